"""Validation Engine — verifies the fluent rule builder and violation reporting.

Tests:
    - Every failing check of every rule is reported (no short-circuit)
    - None passes every check except not_empty
    - when() guards the whole rule; with_message() replaces the last message
    - Sibling comparisons and date rules
    - field_label and shape_violations produce display labels
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

import pytest

from backoffice.core.validation import (
    Validator, Violation, field_label, shape_violations,
)


@dataclass
class _Target:
    name: str | None = None
    total: int | None = None
    available: int | None = None
    email: str | None = None
    joined: date | None = None
    kind: str | None = None


NOW = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)


def test_field_label_pascal_cases_attribute_names():
    assert field_label("available_copies") == "AvailableCopies"
    assert field_label("categoryId") == "CategoryId"
    assert field_label("isbn") == "ISBN"
    assert field_label("name") == "Name"


def test_valid_target_has_no_violations():
    v = Validator()
    v.rule_for("name").not_empty().max_length(10)
    assert v.validate(_Target(name="ok"), NOW) == []


def test_all_checks_of_a_rule_are_reported():
    v = Validator()
    v.rule_for("name").not_empty().length(3, 5)
    violations = v.validate(_Target(name=""), NOW)
    assert [x.field for x in violations] == ["Name", "Name"]
    assert violations[0].message == "'Name' is required."
    assert "between 3 and 5" in violations[1].message


def test_all_rules_are_evaluated():
    v = Validator()
    v.rule_for("name").not_empty()
    v.rule_for("total").greater_than_or_equal(0)
    violations = v.validate(_Target(name=None, total=-1), NOW)
    assert {x.field for x in violations} == {"Name", "Total"}


def test_none_passes_everything_but_not_empty():
    v = Validator()
    (
        v.rule_for("name").max_length(1).length(2, 3).email()
        .one_of(["a"]).must(lambda value: value is None, "never")
    )
    v.rule_for("total").greater_than(0).inclusive_between(1, 2)
    v.rule_for("joined").not_in_future()
    assert v.validate(_Target(), NOW) == []


def test_when_skips_the_whole_rule():
    v = Validator()
    v.rule_for("total").greater_than(100).when(lambda t: t.kind == "big")
    assert v.validate(_Target(total=5, kind="small"), NOW) == []
    assert len(v.validate(_Target(total=5, kind="big"), NOW)) == 1


def test_with_message_replaces_last_check_message():
    v = Validator()
    v.rule_for("total").greater_than(0).with_message("Must be positive.")
    assert v.validate(_Target(total=0), NOW) == [Violation("Total", "Must be positive.")]


def test_with_message_without_check_raises():
    v = Validator()
    with pytest.raises(ValueError):
        v.rule_for("total").with_message("nothing to replace")


def test_sibling_comparison_uses_other_field():
    v = Validator()
    v.rule_for("available").less_than_or_equal_field("total")
    assert v.validate(_Target(total=3, available=3), NOW) == []
    violations = v.validate(_Target(total=3, available=4), NOW)
    assert violations[0].message == "'Available' must be less than or equal to 'Total'."


def test_email_rule():
    v = Validator()
    v.rule_for("email").email()
    assert v.validate(_Target(email="reader@example.org"), NOW) == []
    assert v.validate(_Target(email="not-an-email"), NOW)[0].field == "Email"


def test_one_of_is_case_insensitive():
    v = Validator()
    v.rule_for("kind").one_of(["Low", "High"])
    assert v.validate(_Target(kind="low"), NOW) == []
    assert "one of: Low, High" in v.validate(_Target(kind="mid"), NOW)[0].message


def test_not_in_future_uses_supplied_clock():
    v = Validator()
    v.rule_for("joined").not_in_future()
    assert v.validate(_Target(joined=NOW.date()), NOW) == []
    tomorrow = NOW.date() + timedelta(days=1)
    assert v.validate(_Target(joined=tomorrow), NOW)[0].message == (
        "'Joined' cannot be in the future."
    )


def test_shape_violations_labels_from_last_loc_part():
    errors = [
        {"type": "missing", "loc": ("body", "categoryId"), "msg": "Field required"},
        {"type": "int_parsing", "loc": ("body", "totalCopies"), "msg": "Input should be a valid integer"},
        {"type": "model_type", "loc": ("body",), "msg": "Input should be an object"},
    ]
    violations = shape_violations(errors)
    assert violations[0] == Violation("CategoryId", "'CategoryId' is required.")
    assert violations[1].field == "TotalCopies"
    assert "valid integer" in violations[1].message
    assert violations[2].field == "Body"
