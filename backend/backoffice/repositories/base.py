"""Base Repository — generic async CRUD, counting and paging over one ORM model.

Invariants:
    - add/delete flush so generated ids and constraint errors surface immediately
    - page() returns (items, total) where total ignores offset/limit
    - reload() re-reads a row with populate_existing so eager relationships reflect flushed state
"""

from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.paging import PageRequest

ModelT = TypeVar("ModelT")


class BaseRepository(Generic[ModelT]):
    """Generic repository; subclasses set `model` and add query methods."""

    model: type[ModelT]

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, entity_id: int) -> ModelT | None:
        result = await self.db.execute(
            select(self.model).where(self.model.id == entity_id),
        )
        return result.scalar_one_or_none()

    async def reload(self, entity: ModelT) -> ModelT:
        result = await self.db.execute(
            select(self.model)
            .where(self.model.id == entity.id)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one()

    async def add(self, entity: ModelT) -> ModelT:
        self.db.add(entity)
        await self.db.flush()
        return entity

    async def delete(self, entity: ModelT) -> None:
        await self.db.delete(entity)
        await self.db.flush()

    async def count(self, *criteria: Any) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(self.model).where(*criteria),
        )
        return int(result.scalar_one())

    async def exists(self, *criteria: Any) -> bool:
        result = await self.db.execute(
            select(self.model.id).where(*criteria).limit(1),
        )
        return result.first() is not None

    async def find_one(self, *criteria: Any) -> ModelT | None:
        result = await self.db.execute(select(self.model).where(*criteria).limit(1))
        return result.scalar_one_or_none()

    async def find_all(
        self, *criteria: Any, order_by: Sequence[Any] = (), limit: int | None = None,
    ) -> list[ModelT]:
        stmt = select(self.model).where(*criteria).order_by(*order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def page(
        self, request: PageRequest, *criteria: Any, order_by: Sequence[Any] = (),
    ) -> tuple[list[ModelT], int]:
        total = await self.count(*criteria)
        if request.offset >= total:
            return [], total
        stmt = (
            select(self.model)
            .where(*criteria)
            .order_by(*order_by, self.model.id)
            .offset(request.offset)
            .limit(request.limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total
