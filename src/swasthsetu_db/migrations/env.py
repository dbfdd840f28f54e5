"""Alembic environment for the registry tables.

Migrations run synchronously over psycopg2, using the URL from
:func:`load_database_settings`.  The URL is passed straight to the engine
rather than through ``alembic.ini`` so passwords containing ``%`` survive
configparser interpolation.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from swasthsetu_db.config import load_database_settings
from swasthsetu_db.models.base import Base

# Register every table on Base.metadata
import swasthsetu_db.models.credential  # noqa: F401
import swasthsetu_db.models.notification  # noqa: F401
import swasthsetu_db.models.registration  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
database_url = load_database_settings().sync_url


def run_migrations_offline() -> None:
    """Emit the migration SQL to stdout without connecting."""
    context.configure(
        url=database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Connect to the database and apply pending revisions."""
    connectable = create_engine(database_url, poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
