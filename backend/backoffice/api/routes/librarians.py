"""Librarian Routes — staff accounts."""

from fastapi import APIRouter, Depends, Query, Response, status

from backoffice.api.dependencies import get_librarian_handlers, page_request
from backoffice.core.paging import PageRequest
from backoffice.handlers.handle_people import LibrarianHandlers
from backoffice.schemas.common import PagedResult
from backoffice.schemas.librarian import (
    ChangeRoleRequest, LibrarianCreate, LibrarianResponse, LibrarianStats,
    LibrarianUpdate,
)

router = APIRouter(prefix="/api/v1/librarians", tags=["librarians"])


@router.get("", response_model=PagedResult[LibrarianResponse])
async def search_librarians(
    search: str | None = Query(None),
    role: str | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
    paging: PageRequest = Depends(page_request),
    handlers: LibrarianHandlers = Depends(get_librarian_handlers),
):
    return await handlers.search(paging, search, role, status_filter)


@router.get("/stats", response_model=LibrarianStats)
async def librarian_stats(handlers: LibrarianHandlers = Depends(get_librarian_handlers)):
    return await handlers.stats()


@router.get("/{librarian_id}", response_model=LibrarianResponse)
async def get_librarian(
    librarian_id: int, handlers: LibrarianHandlers = Depends(get_librarian_handlers),
):
    return await handlers.get(librarian_id)


@router.post("", response_model=LibrarianResponse, status_code=status.HTTP_201_CREATED)
async def create_librarian(
    body: LibrarianCreate, handlers: LibrarianHandlers = Depends(get_librarian_handlers),
):
    return await handlers.create(body)


@router.put("/{librarian_id}", response_model=LibrarianResponse)
async def update_librarian(
    librarian_id: int, body: LibrarianUpdate,
    handlers: LibrarianHandlers = Depends(get_librarian_handlers),
):
    return await handlers.update(librarian_id, body)


@router.delete("/{librarian_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_librarian(
    librarian_id: int, handlers: LibrarianHandlers = Depends(get_librarian_handlers),
):
    await handlers.delete(librarian_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{librarian_id}/activate", response_model=LibrarianResponse)
async def activate_librarian(
    librarian_id: int, handlers: LibrarianHandlers = Depends(get_librarian_handlers),
):
    return await handlers.activate(librarian_id)


@router.post("/{librarian_id}/deactivate", response_model=LibrarianResponse)
async def deactivate_librarian(
    librarian_id: int, handlers: LibrarianHandlers = Depends(get_librarian_handlers),
):
    return await handlers.deactivate(librarian_id)


@router.post("/{librarian_id}/role", response_model=LibrarianResponse)
async def change_librarian_role(
    librarian_id: int, body: ChangeRoleRequest,
    handlers: LibrarianHandlers = Depends(get_librarian_handlers),
):
    return await handlers.change_role(librarian_id, body)
