"""Category Schemas."""

from datetime import datetime

from backoffice.schemas.common import CamelModel


class CategoryWrite(CamelModel):
    name: str
    description: str | None = None
    parent_category_id: int | None = None


class CategoryCreate(CategoryWrite):
    pass


class CategoryUpdate(CategoryWrite):
    is_active: bool = True


class CategoryResponse(CamelModel):
    id: int
    name: str
    description: str | None = None
    parent_category_id: int | None = None
    is_active: bool
    created_at: datetime
