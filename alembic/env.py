"""Alembic environment: migrates the database named by the app's DATABASE_URL setting."""

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy.pool import NullPool

os.environ.setdefault("APP_ENV", "dev")
from app.core.config import settings
from app.core.database import build_engine, is_sqlite

# Importing the models registers every table on Base.metadata.
from app.models import AuthToken, Base, FamilyMember, Relationship, User  # noqa: F401

config = context.config
# alembic.ini may omit logging sections; fileConfig raises KeyError then.
if config.config_file_name is not None:
    try:
        fileConfig(config.config_file_name)
    except KeyError:
        pass

target_metadata = Base.metadata
database_url = settings.DATABASE_URL

# SQLite cannot ALTER most constraints in place; batch mode recreates the table instead.
common_options = {
    "target_metadata": target_metadata,
    "compare_type": True,
    "render_as_batch": is_sqlite(database_url),
}


def run_migrations_offline() -> None:
    """Emit the migration SQL without connecting."""
    context.configure(
        url=database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **common_options,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Connect with a throwaway engine and apply migrations."""
    connectable = build_engine(database_url, poolclass=NullPool)
    with connectable.connect() as connection:
        context.configure(connection=connection, **common_options)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
