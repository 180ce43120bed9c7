"""Member ORM — a library patron with borrowing limits and fine balance.

Invariants:
    - membership_number and email are unique
    - 0 <= current_books_count <= max_books_allowed
    - total_fines_owed and max_fine_limit are non-negative money (Numeric 10,2)

Design Decisions:
    - current_books_count and total_fines_owed are denormalized counters kept in step
      by circulation and fine services
"""

from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, DateTime, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from backoffice.core.domain_types import MemberStatus, MembershipType
from backoffice.db.base import Base


class Member(Base):
    __tablename__ = "members"
    __table_args__ = (
        CheckConstraint("current_books_count >= 0", name="current_books_non_negative"),
        CheckConstraint(
            "current_books_count <= max_books_allowed", name="current_within_max",
        ),
        CheckConstraint("total_fines_owed >= 0", name="fines_owed_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    membership_number: Mapped[str] = mapped_column(
        String(50), nullable=False, unique=True,
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    phone_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    membership_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=MembershipType.REGULAR.value,
    )
    membership_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    membership_end_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=MemberStatus.ACTIVE.value,
    )
    max_books_allowed: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    current_books_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_fines_owed: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00"),
    )
    max_fine_limit: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("50.00"),
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

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
