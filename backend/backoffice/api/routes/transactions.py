"""Transaction Routes — borrow, return, renew and loan listings.

Invariants:
    - Fixed paths (/overdue, /active, /stats) are declared before /{transaction_id}
"""

from fastapi import APIRouter, Depends, status

from backoffice.api.dependencies import get_transaction_handlers, page_request
from backoffice.core.paging import PageRequest
from backoffice.handlers.handle_circulation import TransactionHandlers
from backoffice.schemas.common import PagedResult
from backoffice.schemas.transaction import (
    BorrowRequest, RenewRequest, ReturnRequest, TransactionResponse,
    TransactionStats,
)

router = APIRouter(prefix="/api/v1/transactions", tags=["transactions"])


@router.post(
    "/borrow", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED,
)
async def borrow_book(
    body: BorrowRequest,
    handlers: TransactionHandlers = Depends(get_transaction_handlers),
):
    return await handlers.borrow(body)


@router.post("/return", response_model=TransactionResponse)
async def return_book(
    body: ReturnRequest,
    handlers: TransactionHandlers = Depends(get_transaction_handlers),
):
    return await handlers.return_book(body)


@router.post("/renew", response_model=TransactionResponse)
async def renew_book(
    body: RenewRequest,
    handlers: TransactionHandlers = Depends(get_transaction_handlers),
):
    return await handlers.renew(body)


@router.get("/overdue", response_model=PagedResult[TransactionResponse])
async def list_overdue(
    paging: PageRequest = Depends(page_request),
    handlers: TransactionHandlers = Depends(get_transaction_handlers),
):
    return await handlers.overdue(paging)


@router.get("/active", response_model=PagedResult[TransactionResponse])
async def list_active(
    paging: PageRequest = Depends(page_request),
    handlers: TransactionHandlers = Depends(get_transaction_handlers),
):
    return await handlers.active(paging)


@router.get("/stats", response_model=TransactionStats)
async def transaction_stats(
    handlers: TransactionHandlers = Depends(get_transaction_handlers),
):
    return await handlers.stats()


@router.get("/member/{member_id}", response_model=PagedResult[TransactionResponse])
async def list_by_member(
    member_id: int,
    paging: PageRequest = Depends(page_request),
    handlers: TransactionHandlers = Depends(get_transaction_handlers),
):
    return await handlers.by_member(member_id, paging)


@router.get("/book/{book_id}", response_model=PagedResult[TransactionResponse])
async def list_by_book(
    book_id: int,
    paging: PageRequest = Depends(page_request),
    handlers: TransactionHandlers = Depends(get_transaction_handlers),
):
    return await handlers.by_book(book_id, paging)


@router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: int,
    handlers: TransactionHandlers = Depends(get_transaction_handlers),
):
    return await handlers.get(transaction_id)
