"""Transaction ORM — one loan of a book to a member (borrow -> renew* -> return).

Invariants:
    - transaction_number is unique (TXN-YYYYMMDD-XXXXXX)
    - return_date is set iff status == Returned
    - renewal_count <= max_renewals_allowed
    - Book/member rows cannot be deleted while transactions reference them (RESTRICT)

Design Decisions:
    - book and member loaded eagerly (selectin): every response carries book title and member name
    - fine_amount denormalized from the overdue fine issued at return
"""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.core.domain_types import TransactionStatus, TransactionType
from backoffice.db.base import Base


class Transaction(Base):
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    transaction_number: Mapped[str] = mapped_column(
        String(50), nullable=False, unique=True,
    )
    book_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("books.id", ondelete="RESTRICT"), nullable=False, index=True,
    )
    member_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("members.id", ondelete="RESTRICT"), nullable=False, index=True,
    )
    type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TransactionType.BORROW.value,
    )
    checkout_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    due_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    return_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TransactionStatus.ACTIVE.value, index=True,
    )
    renewal_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_renewals_allowed: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    fine_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)
    processed_by_librarian_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("librarians.id", ondelete="SET NULL"), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    book: Mapped["Book"] = relationship("Book", lazy="selectin")
    member: Mapped["Member"] = relationship("Member", lazy="selectin")
