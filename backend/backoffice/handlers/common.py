"""Handler helpers — validation gate and paged-result assembly."""

from datetime import datetime
from typing import Any, Sequence

from backoffice.core.errors import ValidationFailedError
from backoffice.core.paging import PageRequest
from backoffice.core.validation import Validator
from backoffice.mapping.profiles import mapper
from backoffice.schemas.common import PagedResult


def ensure_valid(validator: Validator, target: Any, now: datetime | None = None) -> None:
    """Raise ValidationFailedError carrying every violation, or return silently."""
    violations = validator.validate(target, now)
    if violations:
        raise ValidationFailedError.from_violations(violations)


def to_page(
    result: tuple[Sequence[Any], int], request: PageRequest, dest: type,
) -> PagedResult:
    items, total = result
    return PagedResult[dest](
        items=mapper.map_many(list(items), dest),
        total_count=total,
        page=request.page,
        page_size=request.page_size,
    )
