"""Statistics Helpers — date ranges, averages and overdue buckets."""

from datetime import date, datetime, timezone

import pytest

from backoffice.core.statistics import (
    day_range, in_range, mean, month_range, overdue_bucket, percentage,
)


def test_day_range_covers_whole_days():
    start, end = day_range(date(2024, 5, 1), date(2024, 5, 3))
    assert start == datetime(2024, 5, 1, tzinfo=timezone.utc)
    assert end == datetime(2024, 5, 3, 23, 59, 59, 999999, tzinfo=timezone.utc)


def test_day_range_open_ends():
    assert day_range(None, None) == (None, None)
    start, end = day_range(None, date(2024, 5, 3))
    assert start is None and end.day == 3


def test_month_range_handles_leap_february():
    start, end = month_range(2024, 2)
    assert start.date() == date(2024, 2, 1)
    assert end.date() == date(2024, 2, 29)


def test_in_range_treats_naive_values_as_utc():
    start, end = day_range(date(2024, 5, 1), date(2024, 5, 1))
    assert in_range(datetime(2024, 5, 1, 12), start, end)
    assert not in_range(datetime(2024, 5, 2, 0, 0, 1), start, end)
    assert in_range(datetime(1999, 1, 1), None, None)
    assert not in_range(None, None, None)


def test_mean_and_percentage_of_nothing_are_zero():
    assert mean([]) == 0.0
    assert percentage(3, 0) == 0.0
    assert mean([3, 10, 40]) == 17.67
    assert percentage(1, 3) == 33.33


@pytest.mark.parametrize("days,label", [
    (0, None),
    (1, "1-7 days"),
    (7, "1-7 days"),
    (8, "8-14 days"),
    (15, "15-30 days"),
    (30, "15-30 days"),
    (31, "31+ days"),
    (400, "31+ days"),
])
def test_overdue_bucket(days, label):
    assert overdue_bucket(days) == label
