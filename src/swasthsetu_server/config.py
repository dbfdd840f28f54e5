"""Server settings, read once from ``SERVER_*`` / ``ADMIN_API_KEY`` env vars."""

import os
from dataclasses import dataclass, field

# Pagination bounds; read at import because Query() defaults are static
DEFAULT_PAGE_LIMIT = int(os.getenv("DEFAULT_PAGE_LIMIT", "20"))
MAX_PAGE_LIMIT = int(os.getenv("MAX_PAGE_LIMIT", "100"))


def _split_csv(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


@dataclass(frozen=True)
class ServerSettings:
    """Immutable server configuration.

    ``admin_api_key`` guards the review endpoints; with no key configured
    those endpoints refuse every request.  ``catalog_dir`` of ``None`` uses
    the catalog shipped inside ``swasthsetu_registry``.
    """

    host: str = "0.0.0.0"
    port: int = 8080
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    catalog_dir: str | None = None
    log_level: str = "INFO"
    admin_api_key: str | None = None


def load_settings() -> ServerSettings:
    """Build :class:`ServerSettings` from the environment."""
    return ServerSettings(
        host=os.getenv("SERVER_HOST", "0.0.0.0"),
        port=int(os.getenv("SERVER_PORT", "8080")),
        cors_origins=_split_csv(os.getenv("SERVER_CORS_ORIGINS", "*")),
        catalog_dir=os.getenv("SERVER_CATALOG_DIR") or None,
        log_level=os.getenv("SERVER_LOG_LEVEL", "INFO").upper(),
        admin_api_key=os.getenv("ADMIN_API_KEY") or None,
    )
