"""Alembic environment: runs the compliance store migrations on a sync driver"""

import os
import sys
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from sqlalchemy import engine_from_config, pool

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

# database.py skips the async engine when this is set
os.environ.setdefault("ALEMBIC_MODE", "1")

from app.config import settings  # noqa: E402
from app.infrastructure.db import models  # noqa: E402,F401
from app.infrastructure.db.database import Base, to_sync_url  # noqa: E402

config = context.config
config.set_main_option("sqlalchemy.url", to_sync_url(settings.DATABASE_URL))

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def _configure(is_sqlite: bool, **kwargs) -> None:
    # SQLite cannot ALTER constraints in place
    context.configure(
        target_metadata=Base.metadata,
        compare_type=True,
        render_as_batch=is_sqlite,
        **kwargs,
    )


def run_migrations_offline() -> None:
    url = config.get_main_option("sqlalchemy.url")
    _configure(
        url.startswith("sqlite"),
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        _configure(connection.dialect.name == "sqlite", connection=connection)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
