"""Review Schemas."""

from datetime import datetime

from backoffice.schemas.common import CamelModel


class ReviewCreate(CamelModel):
    book_id: int
    member_id: int
    rating: int
    comment: str | None = None


class ReviewUpdate(CamelModel):
    rating: int
    comment: str | None = None


class RejectReviewRequest(CamelModel):
    reason: str
    notes: str | None = None


class ReviewResponse(CamelModel):
    id: int
    book_id: int
    book_title: str | None = None
    member_id: int
    member_name: str | None = None
    rating: int
    comment: str | None = None
    review_date: datetime
    is_approved: bool


class BookReviewStats(CamelModel):
    book_id: int
    book_title: str
    total_reviews: int
    approved_reviews: int
    pending_reviews: int
    average_rating: float
    one_star_count: int
    two_star_count: int
    three_star_count: int
    four_star_count: int
    five_star_count: int
