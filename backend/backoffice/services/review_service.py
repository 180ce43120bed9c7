"""Review Service — member ratings of books with a moderation step.

Invariants:
    - One review per (book, member); a second one raises ConflictError
    - New and edited reviews are unapproved until approve() is called
    - Rejecting a review deletes it
"""

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.errors import ConflictError, ResourceNotFoundError
from backoffice.core.paging import PageRequest
from backoffice.models import Review
from backoffice.repositories.catalog import BookRepository, ReviewRepository
from backoffice.repositories.people import MemberRepository

logger = logging.getLogger(__name__)


class ReviewService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.reviews = ReviewRepository(db)
        self.books = BookRepository(db)
        self.members = MemberRepository(db)

    async def get(self, review_id: int) -> Review:
        review = await self.reviews.get_by_id(review_id)
        if review is None:
            raise ResourceNotFoundError("Review", review_id)
        return review

    async def create(self, review: Review) -> Review:
        if await self.books.get_by_id(review.book_id) is None:
            raise ResourceNotFoundError("Book", review.book_id)
        if await self.members.get_by_id(review.member_id) is None:
            raise ResourceNotFoundError("Member", review.member_id)
        if await self.reviews.get_for(review.book_id, review.member_id) is not None:
            raise ConflictError(
                "Member has already reviewed this book", "DUPLICATE_REVIEW",
            )
        review.is_approved = False
        review.review_date = datetime.now(timezone.utc)
        await self.reviews.add(review)
        await self.db.commit()
        return await self.reviews.reload(review)

    async def update(self, review: Review) -> Review:
        review.is_approved = False
        review.review_date = datetime.now(timezone.utc)
        await self.db.commit()
        return await self.reviews.reload(review)

    async def delete(self, review_id: int) -> None:
        review = await self.get(review_id)
        await self.reviews.delete(review)
        await self.db.commit()

    async def approve(self, review_id: int) -> Review:
        review = await self.get(review_id)
        review.is_approved = True
        await self.db.commit()
        return review

    async def reject(self, review_id: int, reason: str) -> None:
        review = await self.get(review_id)
        await self.reviews.delete(review)
        await self.db.commit()
        logger.info(
            "Review rejected: %s", reason,
            extra={"entity": "Review", "entity_id": review_id},
        )

    async def by_book(self, book_id: int, request: PageRequest):
        return await self.reviews.by_book(book_id, request)

    async def by_member(self, member_id: int, request: PageRequest):
        return await self.reviews.by_member(member_id, request)

    async def by_approval(self, approved: bool, request: PageRequest):
        return await self.reviews.by_approval(approved, request)

    async def book_stats(self, book_id: int) -> dict[str, Any]:
        book = await self.books.get_by_id(book_id)
        if book is None:
            raise ResourceNotFoundError("Book", book_id)
        rows = await self.reviews.rating_breakdown(book_id)
        stars = {n: 0 for n in range(1, 6)}
        approved = pending = 0
        rating_sum = 0
        for rating, is_approved, count in rows:
            stars[rating] = stars.get(rating, 0) + count
            rating_sum += rating * count
            if is_approved:
                approved += count
            else:
                pending += count
        total = approved + pending
        return {
            "book_id": book.id,
            "book_title": book.title,
            "total_reviews": total,
            "approved_reviews": approved,
            "pending_reviews": pending,
            "average_rating": round(rating_sum / total, 2) if total else 0.0,
            "one_star_count": stars[1],
            "two_star_count": stars[2],
            "three_star_count": stars[3],
            "four_star_count": stars[4],
            "five_star_count": stars[5],
        }
