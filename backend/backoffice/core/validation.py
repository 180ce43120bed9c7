"""Declarative Validation — field rules per DTO, evaluated into (field, message) violations.

Invariants:
    - validate() is PURE: no IO, no DB; the clock is passed in for date rules
    - Every rule of every field is evaluated (no short-circuit across rules or checks)
    - None passes every check except not_empty (optional fields are only checked when present)
    - Violations are keyed by display label ("ISBN", "AvailableCopies"), never by attribute name
    - Empty result list means the object is valid

Design Decisions:
    - Fluent builder (rule_for(...).not_empty().max_length(n)) so a rule set reads as a table
    - when() guards the whole rule; with_message() replaces the message of the last check
    - Sibling comparisons resolve the other field at validation time, not at build time
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Callable, Iterable, NamedTuple

from email_validator import EmailNotValidError, validate_email

_ACRONYMS = {"isbn": "ISBN"}


class Violation(NamedTuple):
    """One failed check: the field label and a human-readable message."""
    field: str
    message: str


def field_label(name: str) -> str:
    """snake_case or camelCase attribute name -> PascalCase display label."""
    words: list[str] = []
    current = ""
    for ch in name:
        if ch == "_":
            if current:
                words.append(current)
            current = ""
        elif ch.isupper() and current and not current[-1].isupper():
            words.append(current)
            current = ch
        else:
            current += ch
    if current:
        words.append(current)
    return "".join(
        _ACRONYMS.get(w.lower(), w[:1].upper() + w[1:]) for w in words
    )


@dataclass(frozen=True)
class _Scope:
    target: Any
    now: datetime


# test(value, scope) -> True when the value is acceptable
_Test = Callable[[Any, _Scope], bool]


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class RuleBuilder:
    """Checks attached to one attribute of the validated object."""

    def __init__(self, attr: str, label: str):
        self.attr = attr
        self.label = label
        self._checks: list[list] = []  # [test, message]
        self._condition: Callable[[Any], bool] | None = None

    def _add(self, test: _Test, message: str) -> "RuleBuilder":
        self._checks.append([test, message])
        return self

    # --- presence / strings ---------------------------------------------------

    def not_empty(self) -> "RuleBuilder":
        return self._add(
            lambda v, _: not _is_empty(v), "'{label}' is required.",
        )

    def max_length(self, limit: int) -> "RuleBuilder":
        return self._add(
            lambda v, _: v is None or len(v) <= limit,
            f"'{{label}}' must be {limit} characters or fewer.",
        )

    def length(self, minimum: int, maximum: int) -> "RuleBuilder":
        return self._add(
            lambda v, _: v is None or minimum <= len(v) <= maximum,
            f"'{{label}}' must be between {minimum} and {maximum} characters.",
        )

    def email(self) -> "RuleBuilder":
        def _valid(v: Any, _: _Scope) -> bool:
            if _is_empty(v):
                return True
            try:
                validate_email(v, check_deliverability=False)
            except EmailNotValidError:
                return False
            return True
        return self._add(_valid, "'{label}' is not a valid email address.")

    def one_of(self, allowed: Iterable[Any]) -> "RuleBuilder":
        options = tuple(allowed)
        folded = {str(o).lower() for o in options}
        return self._add(
            lambda v, _: v is None or str(v).lower() in folded,
            f"'{{label}}' must be one of: {', '.join(str(o) for o in options)}.",
        )

    # --- numbers ------------------------------------------------------------

    def greater_than(self, bound: Any) -> "RuleBuilder":
        return self._add(
            lambda v, _: v is None or v > bound,
            f"'{{label}}' must be greater than {bound}.",
        )

    def greater_than_or_equal(self, bound: Any) -> "RuleBuilder":
        return self._add(
            lambda v, _: v is None or v >= bound,
            f"'{{label}}' must be greater than or equal to {bound}.",
        )

    def inclusive_between(self, low: Any, high: Any) -> "RuleBuilder":
        return self._add(
            lambda v, _: v is None or low <= v <= high,
            f"'{{label}}' must be between {low} and {high}.",
        )

    # --- sibling fields -------------------------------------------------------

    def less_than_or_equal_field(self, other: str) -> "RuleBuilder":
        def _test(v: Any, scope: _Scope) -> bool:
            bound = getattr(scope.target, other, None)
            return v is None or bound is None or v <= bound
        return self._add(
            _test, f"'{{label}}' must be less than or equal to '{field_label(other)}'.",
        )

    def greater_than_or_equal_field(self, other: str) -> "RuleBuilder":
        def _test(v: Any, scope: _Scope) -> bool:
            bound = getattr(scope.target, other, None)
            return v is None or bound is None or v >= bound
        return self._add(
            _test, f"'{{label}}' must be greater than or equal to '{field_label(other)}'.",
        )

    # --- dates --------------------------------------------------------------

    def not_in_future(self) -> "RuleBuilder":
        def _test(v: Any, scope: _Scope) -> bool:
            if v is None:
                return True
            if isinstance(v, datetime):
                return _as_utc(v) <= scope.now
            if isinstance(v, date):
                return v <= scope.now.date()
            return True
        return self._add(_test, "'{label}' cannot be in the future.")

    # --- composition ----------------------------------------------------------

    def must(self, predicate: Callable[[Any], bool], message: str) -> "RuleBuilder":
        return self._add(lambda v, _: predicate(v), message)

    def when(self, condition: Callable[[Any], bool]) -> "RuleBuilder":
        """Only evaluate this rule when condition(target) is truthy."""
        self._condition = condition
        return self

    def with_message(self, message: str) -> "RuleBuilder":
        if not self._checks:
            raise ValueError("with_message() must follow a check")
        self._checks[-1][1] = message
        return self

    def evaluate(self, scope: _Scope) -> list[Violation]:
        if self._condition is not None and not self._condition(scope.target):
            return []
        value = getattr(scope.target, self.attr, None)
        return [
            Violation(self.label, message.format(label=self.label))
            for test, message in self._checks
            if not test(value, scope)
        ]


class Validator:
    """Static rule set for one DTO type."""

    def __init__(self) -> None:
        self._rules: list[RuleBuilder] = []

    def rule_for(self, attr: str, label: str | None = None) -> RuleBuilder:
        rule = RuleBuilder(attr, label or field_label(attr))
        self._rules.append(rule)
        return rule

    def validate(self, target: Any, now: datetime | None = None) -> list[Violation]:
        scope = _Scope(target, now or datetime.now(timezone.utc))
        violations: list[Violation] = []
        for rule in self._rules:
            violations.extend(rule.evaluate(scope))
        return violations


def shape_violations(errors: Iterable[dict[str, Any]]) -> list[Violation]:
    """Pydantic error dicts (type/loc/msg) -> labelled violations.

    The label is taken from the last string element of `loc`; a missing value
    reads the same as a failed not_empty check.
    """
    violations: list[Violation] = []
    for error in errors:
        names = [part for part in error.get("loc", ()) if isinstance(part, str)]
        label = field_label(names[-1]) if names else "Body"
        if error.get("type") == "missing":
            message = f"'{label}' is required."
        else:
            message = f"'{label}': {error.get('msg', 'is invalid')}."
        violations.append(Violation(label, message))
    return violations
