"""Statistics Helpers — pure arithmetic shared by reports and the statistics endpoints.

Invariants:
    - All functions are PURE: no IO, no clock reads
    - Date ranges cover whole UTC days; a missing bound leaves that side open
    - Averages and percentages are rounded to two decimals; empty input yields 0.0
    - Overdue buckets partition every positive day count (1-7, 8-14, 15-30, 31+)
"""

from calendar import monthrange
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable

OVERDUE_BUCKETS: tuple[tuple[str, int, int | None], ...] = (
    ("1-7 days", 1, 7),
    ("8-14 days", 8, 14),
    ("15-30 days", 15, 30),
    ("31+ days", 31, None),
)


def day_range(
    from_date: date | None, to_date: date | None,
) -> tuple[datetime | None, datetime | None]:
    """Inclusive [start of from_date, end of to_date] in UTC."""
    start = datetime.combine(from_date, time.min, timezone.utc) if from_date else None
    end = (
        datetime.combine(to_date + timedelta(days=1), time.min, timezone.utc)
        - timedelta(microseconds=1)
        if to_date else None
    )
    return start, end


def month_range(year: int, month: int) -> tuple[datetime, datetime]:
    last_day = monthrange(year, month)[1]
    start, end = day_range(date(year, month, 1), date(year, month, last_day))
    return start, end


def in_range(value: datetime | None, start: datetime | None, end: datetime | None) -> bool:
    if value is None:
        return False
    value = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    return (start is None or value >= start) and (end is None or value <= end)


def mean(values: Iterable[float]) -> float:
    items = [float(v) for v in values]
    return round(sum(items) / len(items), 2) if items else 0.0


def percentage(part: int, whole: int) -> float:
    return round(part * 100 / whole, 2) if whole else 0.0


def overdue_bucket(days: int) -> str | None:
    """Bucket label for a loan `days` late; None when not late."""
    for label, low, high in OVERDUE_BUCKETS:
        if days >= low and (high is None or days <= high):
            return label
    return None
