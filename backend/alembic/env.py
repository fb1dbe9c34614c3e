"""Alembic environment — migrates the database the app itself is configured for.

The target URL comes from snipvault.config (env vars and .env), never from
alembic.ini, so `alembic upgrade head` and the running app cannot disagree
about which snippet database they touch.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from snipvault.config import get_settings
from snipvault.db.base import Base
import snipvault.models  # noqa: F401  (registers kv_entries on Base.metadata)

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)


def _configure(**kwargs) -> None:
    context.configure(target_metadata=Base.metadata, render_as_batch=True, **kwargs)


def _migrate_offline(url: str) -> None:
    """Emit SQL to stdout instead of connecting (alembic --sql)."""
    _configure(url=url, literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()


async def _migrate_online(url: str) -> None:
    engine = create_async_engine(url, poolclass=pool.NullPool)
    async with engine.connect() as conn:
        await conn.run_sync(_run_in_transaction)
    await engine.dispose()


def _run_in_transaction(connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


database_url = get_settings().database_url
if context.is_offline_mode():
    _migrate_offline(database_url)
else:
    asyncio.run(_migrate_online(database_url))
