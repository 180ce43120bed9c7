"""Book Routes — catalog search and book CRUD."""

from fastapi import APIRouter, Depends, Query, Response, status

from backoffice.api.dependencies import get_book_handlers, page_request
from backoffice.core.paging import PageRequest
from backoffice.handlers.handle_catalog import BookHandlers
from backoffice.schemas.book import BookCreate, BookResponse, BookUpdate
from backoffice.schemas.common import PagedResult

router = APIRouter(prefix="/api/v1/books", tags=["books"])


@router.get("", response_model=PagedResult[BookResponse])
async def search_books(
    search: str | None = Query(None),
    category_id: int | None = Query(None, alias="categoryId"),
    paging: PageRequest = Depends(page_request),
    handlers: BookHandlers = Depends(get_book_handlers),
):
    """Title, author or ISBN contains `search`; ordered by title."""
    return await handlers.search(paging, search, category_id)


@router.get("/available", response_model=PagedResult[BookResponse])
async def list_available_books(
    paging: PageRequest = Depends(page_request),
    handlers: BookHandlers = Depends(get_book_handlers),
):
    return await handlers.available(paging)


@router.get("/{book_id}", response_model=BookResponse)
async def get_book(book_id: int, handlers: BookHandlers = Depends(get_book_handlers)):
    return await handlers.get(book_id)


@router.post("", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
async def create_book(
    body: BookCreate, handlers: BookHandlers = Depends(get_book_handlers),
):
    return await handlers.create(body)


@router.put("/{book_id}", response_model=BookResponse)
async def update_book(
    book_id: int, body: BookUpdate,
    handlers: BookHandlers = Depends(get_book_handlers),
):
    return await handlers.update(book_id, body)


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_book(book_id: int, handlers: BookHandlers = Depends(get_book_handlers)):
    await handlers.delete(book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
