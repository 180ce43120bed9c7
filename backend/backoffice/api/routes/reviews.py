"""Review Routes — member reviews and moderation."""

from fastapi import APIRouter, Depends, Response, status

from backoffice.api.dependencies import get_review_handlers, page_request
from backoffice.core.paging import PageRequest
from backoffice.handlers.handle_catalog import ReviewHandlers
from backoffice.schemas.common import PagedResult
from backoffice.schemas.review import (
    BookReviewStats, RejectReviewRequest, ReviewCreate, ReviewResponse, ReviewUpdate,
)

router = APIRouter(prefix="/api/v1/reviews", tags=["reviews"])


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    body: ReviewCreate, handlers: ReviewHandlers = Depends(get_review_handlers),
):
    return await handlers.create(body)


@router.get("/approved", response_model=PagedResult[ReviewResponse])
async def list_approved_reviews(
    paging: PageRequest = Depends(page_request),
    handlers: ReviewHandlers = Depends(get_review_handlers),
):
    return await handlers.by_approval(True, paging)


@router.get("/pending", response_model=PagedResult[ReviewResponse])
async def list_pending_reviews(
    paging: PageRequest = Depends(page_request),
    handlers: ReviewHandlers = Depends(get_review_handlers),
):
    return await handlers.by_approval(False, paging)


@router.get("/book/{book_id}", response_model=PagedResult[ReviewResponse])
async def list_book_reviews(
    book_id: int,
    paging: PageRequest = Depends(page_request),
    handlers: ReviewHandlers = Depends(get_review_handlers),
):
    return await handlers.by_book(book_id, paging)


@router.get("/book/{book_id}/stats", response_model=BookReviewStats)
async def book_review_stats(
    book_id: int, handlers: ReviewHandlers = Depends(get_review_handlers),
):
    return await handlers.book_stats(book_id)


@router.get("/member/{member_id}", response_model=PagedResult[ReviewResponse])
async def list_member_reviews(
    member_id: int,
    paging: PageRequest = Depends(page_request),
    handlers: ReviewHandlers = Depends(get_review_handlers),
):
    return await handlers.by_member(member_id, paging)


@router.get("/{review_id}", response_model=ReviewResponse)
async def get_review(review_id: int, handlers: ReviewHandlers = Depends(get_review_handlers)):
    return await handlers.get(review_id)


@router.put("/{review_id}", response_model=ReviewResponse)
async def update_review(
    review_id: int, body: ReviewUpdate,
    handlers: ReviewHandlers = Depends(get_review_handlers),
):
    return await handlers.update(review_id, body)


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(
    review_id: int, handlers: ReviewHandlers = Depends(get_review_handlers),
):
    await handlers.delete(review_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{review_id}/approve", response_model=ReviewResponse)
async def approve_review(
    review_id: int, handlers: ReviewHandlers = Depends(get_review_handlers),
):
    return await handlers.approve(review_id)


@router.post("/{review_id}/reject", status_code=status.HTTP_204_NO_CONTENT)
async def reject_review(
    review_id: int, body: RejectReviewRequest,
    handlers: ReviewHandlers = Depends(get_review_handlers),
):
    """Rejected reviews are deleted."""
    await handlers.reject(review_id, body)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
