from __future__ import annotations

from logging.config import fileConfig
from alembic import context
from sqlalchemy import engine_from_config, pool
from sqlalchemy.exc import OperationalError
import time

from backend.carconnect.config import settings
from backend.carconnect.models import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    context.configure(
        url=settings.database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    cfg = config.get_section(config.config_ini_section) or {}
    cfg["sqlalchemy.url"] = settings.database_url

    # wait for the database container to accept connections
    last_exc = None
    for _ in range(15):
        try:
            connectable = engine_from_config(
                cfg,
                prefix="sqlalchemy.",
                poolclass=pool.NullPool,
            )
            with connectable.connect() as connection:
                context.configure(connection=connection, target_metadata=target_metadata)
                with context.begin_transaction():
                    context.run_migrations()
            return
        except OperationalError as exc:
            last_exc = exc
            time.sleep(2)
    if last_exc:
        raise last_exc


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
