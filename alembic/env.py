"""Alembic environment for the stock transaction table.

The target URL comes from `-x database_url=...` when given, otherwise from
the same `DATABASE_URL` setting the ledger uses.
"""
# pylint: disable=no-member,invalid-name,wrong-import-order

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from stonks.config import config_load_database_url

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)


def migration_resolve_database_url() -> str:
    """Return the migration target, preferring an explicit `-x database_url`."""

    x_arguments = context.get_x_argument(as_dictionary=True)
    explicit_url = x_arguments.get("database_url", "").strip()
    return explicit_url or config_load_database_url()


def run_migrations_offline() -> None:
    """Emit migration SQL without connecting."""

    context.configure(
        url=migration_resolve_database_url(),
        target_metadata=None,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a short-lived connection."""

    connectable = create_engine(migration_resolve_database_url(), poolclass=pool.NullPool)
    try:
        with connectable.connect() as connection:
            context.configure(connection=connection, target_metadata=None)
            with context.begin_transaction():
                context.run_migrations()
    finally:
        connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
