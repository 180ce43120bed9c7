"""Member Routes — member CRUD, search and membership extension."""

from fastapi import APIRouter, Depends, Query, Response, status

from backoffice.api.dependencies import get_member_handlers, page_request
from backoffice.core.paging import PageRequest
from backoffice.handlers.handle_people import MemberHandlers
from backoffice.schemas.common import PagedResult
from backoffice.schemas.member import (
    ExtendMembershipRequest, MemberCreate, MemberResponse, MemberUpdate,
)

router = APIRouter(prefix="/api/v1/members", tags=["members"])


@router.get("", response_model=PagedResult[MemberResponse])
async def search_members(
    search: str | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
    paging: PageRequest = Depends(page_request),
    handlers: MemberHandlers = Depends(get_member_handlers),
):
    """Name, e-mail or membership number contains `search`; ordered by last, first name."""
    return await handlers.search(paging, search, status_filter)


@router.get("/{member_id}", response_model=MemberResponse)
async def get_member(
    member_id: int, handlers: MemberHandlers = Depends(get_member_handlers),
):
    return await handlers.get(member_id)


@router.post("", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
async def create_member(
    body: MemberCreate, handlers: MemberHandlers = Depends(get_member_handlers),
):
    return await handlers.create(body)


@router.put("/{member_id}", response_model=MemberResponse)
async def update_member(
    member_id: int, body: MemberUpdate,
    handlers: MemberHandlers = Depends(get_member_handlers),
):
    return await handlers.update(member_id, body)


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_member(
    member_id: int, handlers: MemberHandlers = Depends(get_member_handlers),
):
    await handlers.delete(member_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{member_id}/extend-membership", response_model=MemberResponse)
async def extend_membership(
    member_id: int, body: ExtendMembershipRequest,
    handlers: MemberHandlers = Depends(get_member_handlers),
):
    return await handlers.extend_membership(member_id, body)
