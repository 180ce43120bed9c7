"""Category Routes."""

from fastapi import APIRouter, Depends, Query, Response, status

from backoffice.api.dependencies import get_category_handlers, page_request
from backoffice.core.paging import PageRequest
from backoffice.handlers.handle_catalog import CategoryHandlers
from backoffice.schemas.category import (
    CategoryCreate, CategoryResponse, CategoryUpdate,
)
from backoffice.schemas.common import PagedResult

router = APIRouter(prefix="/api/v1/categories", tags=["categories"])


@router.get("", response_model=PagedResult[CategoryResponse])
async def search_categories(
    search: str | None = Query(None),
    parent_category_id: int | None = Query(None, alias="parentCategoryId"),
    paging: PageRequest = Depends(page_request),
    handlers: CategoryHandlers = Depends(get_category_handlers),
):
    return await handlers.search(paging, search, parent_category_id)


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(
    category_id: int, handlers: CategoryHandlers = Depends(get_category_handlers),
):
    return await handlers.get(category_id)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    body: CategoryCreate, handlers: CategoryHandlers = Depends(get_category_handlers),
):
    return await handlers.create(body)


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: int, body: CategoryUpdate,
    handlers: CategoryHandlers = Depends(get_category_handlers),
):
    return await handlers.update(category_id, body)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: int, handlers: CategoryHandlers = Depends(get_category_handlers),
):
    """Refused with 409 while any book references the category."""
    await handlers.delete(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
