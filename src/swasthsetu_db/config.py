"""Database settings read from the environment.

The connection target comes from either:

1. ``DATABASE_URL`` (takes precedence).  Any PostgreSQL flavour is accepted
   (``postgres://``, ``postgresql://``, ``postgresql+asyncpg://``,
   ``postgresql+psycopg2://``); the driver part is rewritten as needed.
2. ``PG_HOST``, ``PG_PORT``, ``PG_USER``, ``PG_PASSWORD``, ``PG_DATABASE``
   (convenient for docker-compose).

Alembic needs a synchronous psycopg2 URL; the runtime engine needs asyncpg.
"""

import os
import re
from dataclasses import dataclass

_SCHEME_RE = re.compile(r"^postgres(?:ql)?(?:\+\w+)?://")


def _with_driver(url: str, driver: str | None) -> str:
    scheme = f"postgresql+{driver}://" if driver else "postgresql://"
    if not _SCHEME_RE.match(url):
        raise ValueError(f"Unsupported database URL scheme: {url.split('://', 1)[0]}")
    return _SCHEME_RE.sub(scheme, url, count=1)


@dataclass(frozen=True)
class DatabaseSettings:
    """Connection target and pool sizing for the registry database."""

    url: str
    pool_size: int = 5
    max_overflow: int = 10
    echo: bool = False

    @property
    def sync_url(self) -> str:
        """libpq URL for Alembic migrations."""
        return _with_driver(self.url, None)

    @property
    def async_url(self) -> str:
        """asyncpg URL for the runtime engine."""
        return _with_driver(self.url, "asyncpg")


def load_database_settings() -> DatabaseSettings:
    """Build settings from ``DATABASE_URL`` / ``PG_*`` environment variables."""
    url = os.getenv("DATABASE_URL")
    if not url:
        url = "postgresql://{user}:{password}@{host}:{port}/{database}".format(
            user=os.getenv("PG_USER", "swasthsetu"),
            password=os.getenv("PG_PASSWORD", "swasthsetu"),
            host=os.getenv("PG_HOST", "localhost"),
            port=os.getenv("PG_PORT", "5432"),
            database=os.getenv("PG_DATABASE", "swasthsetu"),
        )
    return DatabaseSettings(
        url=url,
        pool_size=int(os.getenv("PG_POOL_SIZE", "5")),
        max_overflow=int(os.getenv("PG_MAX_OVERFLOW", "10")),
        echo=os.getenv("SQL_ECHO", "").lower() in ("1", "true", "yes"),
    )
