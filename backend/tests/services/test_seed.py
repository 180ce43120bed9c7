"""Seed Script — verifies the demo load and that a second run leaves data untouched."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import create_async_engine

from backoffice.db.base import Base
from backoffice.models import Book, Librarian, Member
from backoffice.seed import seed


async def test_seed_loads_once(tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path / 'seed.db'}"
    engine = create_async_engine(url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    assert await seed(url) is True
    assert await seed(url) is False

    async with engine.connect() as conn:
        books = (await conn.execute(select(func.count()).select_from(Book))).scalar_one()
        members = (await conn.execute(select(func.count()).select_from(Member))).scalar_one()
        staff = (await conn.execute(select(Librarian.employee_number))).scalars().all()
    await engine.dispose()
    assert books > 0
    assert members == 3
    assert staff == ["E-0001"]
