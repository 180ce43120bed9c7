"""Alembic environment — migrations for the library back office schema.

Invariants:
    - target_metadata is Base.metadata with every model in backoffice.models registered
    - The URL comes from Settings when DATABASE_URL is set (environment or .env),
      so the postgresql:// -> postgresql+asyncpg:// rewrite lives in one place;
      otherwise sqlalchemy.url from alembic.ini
    - SQLite runs in batch mode (ALTER TABLE is emulated by table copy)
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context

import backoffice.models  # noqa: F401
from backoffice.config import get_settings
from backoffice.db.base import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def database_url() -> str:
    settings = get_settings()
    if "database_url" in settings.model_fields_set:
        return settings.database_url
    return config.get_main_option("sqlalchemy.url")


def _configure(**options) -> None:
    context.configure(
        target_metadata=target_metadata, compare_type=True, **options,
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_with_connection(connection: Connection) -> None:
    _configure(
        connection=connection,
        render_as_batch=connection.dialect.name == "sqlite",
    )


async def _run_online() -> None:
    engine = create_async_engine(database_url(), poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_with_connection)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    _configure(
        url=database_url(), literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
else:
    asyncio.run(_run_online())
