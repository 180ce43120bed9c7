"""Notification ORM — a message addressed to one member.

Invariants:
    - status Unread until marked Read (read_at set at the same time)
    - related_entity_type/id optionally point at the record that triggered it
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.core.domain_types import NotificationStatus, NotificationType
from backoffice.db.base import Base


class Notification(Base):
    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    member_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("members.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(String(1000), nullable=False)
    type: Mapped[str] = mapped_column(
        String(30), nullable=False, default=NotificationType.GENERAL.value,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=NotificationStatus.UNREAD.value, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    related_entity_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    related_entity_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_email_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    member: Mapped["Member"] = relationship("Member", lazy="selectin")
