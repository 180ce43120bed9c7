"""Fine Routes — listings, payment, waiver and summaries."""

from fastapi import APIRouter, Depends

from backoffice.api.dependencies import get_fine_handlers, page_request
from backoffice.core.paging import PageRequest
from backoffice.handlers.handle_circulation import FineHandlers
from backoffice.schemas.common import PagedResult
from backoffice.schemas.fine import (
    FineResponse, MemberFineSummary, OverallFineSummary, PayFineRequest,
    WaiveFineRequest,
)

router = APIRouter(prefix="/api/v1/fines", tags=["fines"])


@router.get("/pending", response_model=PagedResult[FineResponse])
async def list_pending_fines(
    paging: PageRequest = Depends(page_request),
    handlers: FineHandlers = Depends(get_fine_handlers),
):
    return await handlers.pending(paging)


@router.get("/overdue", response_model=PagedResult[FineResponse])
async def list_overdue_fines(
    paging: PageRequest = Depends(page_request),
    handlers: FineHandlers = Depends(get_fine_handlers),
):
    return await handlers.overdue(paging)


@router.get("/summary", response_model=OverallFineSummary)
async def overall_fine_summary(handlers: FineHandlers = Depends(get_fine_handlers)):
    return await handlers.overall_summary()


@router.get("/member/{member_id}", response_model=PagedResult[FineResponse])
async def list_member_fines(
    member_id: int,
    paging: PageRequest = Depends(page_request),
    handlers: FineHandlers = Depends(get_fine_handlers),
):
    return await handlers.by_member(member_id, paging)


@router.get("/member/{member_id}/summary", response_model=MemberFineSummary)
async def member_fine_summary(
    member_id: int, handlers: FineHandlers = Depends(get_fine_handlers),
):
    return await handlers.member_summary(member_id)


@router.get("/{fine_id}", response_model=FineResponse)
async def get_fine(fine_id: int, handlers: FineHandlers = Depends(get_fine_handlers)):
    return await handlers.get(fine_id)


@router.post("/{fine_id}/pay", response_model=FineResponse)
async def pay_fine(
    fine_id: int, body: PayFineRequest,
    handlers: FineHandlers = Depends(get_fine_handlers),
):
    return await handlers.pay(fine_id, body)


@router.post("/{fine_id}/waive", response_model=FineResponse)
async def waive_fine(
    fine_id: int, body: WaiveFineRequest,
    handlers: FineHandlers = Depends(get_fine_handlers),
):
    return await handlers.waive(fine_id, body)
