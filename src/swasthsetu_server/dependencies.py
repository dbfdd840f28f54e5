"""FastAPI dependency injection: DB sessions, workflow, catalog, admin key.

Each request that touches the database gets a fresh ``AsyncSession`` via
``get_db()``.  The session is committed on success and rolled back on error,
matching the SDK convention where workflow/repository call ``flush()`` but
never ``commit()``.
"""

import hmac
from typing import AsyncGenerator

from fastapi import Header, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from swasthsetu_db.engine import get_session_factory
from swasthsetu_registry.catalog_store import CatalogStore
from swasthsetu_registry.workflow import RegistrationWorkflow


# ------------------------------------------------------------------
# Database session: transaction boundary lives here
# ------------------------------------------------------------------

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async DB session; commit on success, rollback on error."""
    factory = get_session_factory()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# ------------------------------------------------------------------
# Workflow & catalog: stashed on app.state during lifespan
# ------------------------------------------------------------------

def get_workflow(request: Request) -> RegistrationWorkflow:
    """Return the workflow singleton from ``app.state``."""
    return request.app.state.workflow


def get_catalog(request: Request) -> CatalogStore:
    """Return the CatalogStore singleton from ``app.state``."""
    return request.app.state.catalog


# ------------------------------------------------------------------
# Admin key: guards the review endpoints
# ------------------------------------------------------------------

async def require_admin_key(
    request: Request,
    x_admin_key: str | None = Header(None, alias="X-Admin-Key"),
) -> str:
    """Validate the ``X-Admin-Key`` header against the configured admin key.

    Raises 403 if no key is configured (review disabled), 401 if the header
    is missing, 403 if it does not match.
    """
    expected: str | None = request.app.state.settings.admin_api_key
    if not expected:
        raise HTTPException(
            status_code=403,
            detail="Admin endpoints are disabled (ADMIN_API_KEY not configured)",
        )
    if not x_admin_key:
        raise HTTPException(status_code=401, detail="X-Admin-Key header is required")
    # Constant-time comparison
    if not hmac.compare_digest(x_admin_key.encode("utf-8"), expected.encode("utf-8")):
        raise HTTPException(status_code=403, detail="Invalid admin key")
    return x_admin_key
