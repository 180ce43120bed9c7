"""Common Schemas — camelCase base model, money type and the paged-result envelope.

Invariants:
    - Every DTO serializes camelCase and accepts both camelCase and snake_case on input
    - Money is Decimal in Python and a JSON number on the wire
    - PagedResult always carries items, totalCount, page, pageSize

Design Decisions:
    - Request DTOs carry types only; field rules live in core/validate_*.py so every
      violation is reported in one response
"""

from decimal import Decimal
from typing import Annotated, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

Money = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json"),
]

ItemT = TypeVar("ItemT")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PagedResult(CamelModel, Generic[ItemT]):
    """A page of items plus the total number of matching rows."""
    items: list[ItemT]
    total_count: int
    page: int
    page_size: int


class MessageResponse(CamelModel):
    message: str
    affected: int = 0
