from __future__ import annotations

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

import petvet.db.models  # noqa: F401  registers every table on Base.metadata
from petvet.core.config import settings
from petvet.db.base import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def database_url() -> str:
    # Settings already read DATABASE_URL; alembic.ini is the last resort.
    return settings.database_url or config.get_main_option("sqlalchemy.url")


def _configure(url: str, **options) -> None:
    context.configure(
        target_metadata=Base.metadata,
        compare_type=True,
        # SQLite rebuilds tables to change constraints.
        render_as_batch=url.startswith("sqlite"),
        **options,
    )


def run_offline(url: str) -> None:
    _configure(url, url=url, literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()


def run_online(url: str) -> None:
    # Foreign keys stay off while batch mode rebuilds tables.
    engine = create_engine(url, poolclass=pool.NullPool, future=True)
    with engine.connect() as connection:
        _configure(url, connection=connection)
        with context.begin_transaction():
            context.run_migrations()
    engine.dispose()


if context.is_offline_mode():
    run_offline(database_url())
else:
    run_online(database_url())
