"""FastAPI application factory and the ``swasthsetu-server`` entry point.

``create_app()`` wires together:

  - a lifespan that loads the catalog, builds the shared
    ``RegistrationWorkflow`` and disposes the engine on shutdown
  - CORS for the portal front-ends
  - exception handlers from :mod:`swasthsetu_server.errors`
  - the ``/api/v1`` routers and an unversioned ``/health`` check
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from swasthsetu_db.engine import dispose_engine, get_engine
from swasthsetu_registry.catalog_store import CatalogStore
from swasthsetu_registry.errors import (
    CredentialIssuanceError,
    RegistrationNotFoundError,
    RegistrationNotPendingError,
)
from swasthsetu_registry.workflow import RegistrationWorkflow

from swasthsetu_server.config import ServerSettings, load_settings
from swasthsetu_server.errors import (
    credential_issuance_handler,
    generic_error_handler,
    not_found_handler,
    not_pending_handler,
    value_error_handler,
)
from swasthsetu_server.routes import register_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: ServerSettings = app.state.settings

    catalog = CatalogStore(catalog_dir=settings.catalog_dir)
    catalog.load()
    app.state.catalog = catalog
    app.state.workflow = RegistrationWorkflow(catalog)
    if not settings.admin_api_key:
        logger.warning("ADMIN_API_KEY is not set; review endpoints will refuse requests")

    try:
        yield
    finally:
        await dispose_engine()
        logger.info("Database engine disposed")


def create_app(settings: ServerSettings | None = None) -> FastAPI:
    """Build the FastAPI application.  Settings default to the environment."""
    settings = settings or load_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title="SwasthSetu Registry API",
        description="Registration review, credential issuance and portal login",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RegistrationNotFoundError, not_found_handler)
    app.add_exception_handler(RegistrationNotPendingError, not_pending_handler)
    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(CredentialIssuanceError, credential_issuance_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    @app.get("/health")
    async def health():
        """Report database reachability; 503 when the database is down."""
        try:
            async with get_engine().connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Health check failed: %s", exc)
            return JSONResponse(
                status_code=503,
                content={"status": "error", "database": "unreachable"},
            )
        return {"status": "ok", "database": "reachable"}

    register_routes(app)
    return app


# ASGI target for ``uvicorn swasthsetu_server.app:app``
app = create_app()


def cli() -> None:
    """Console-script entry point: ``swasthsetu-server``."""
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        "swasthsetu_server.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
