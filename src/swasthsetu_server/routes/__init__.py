"""Route registration: mounts all routers under ``/api/v1``."""

from fastapi import FastAPI

from swasthsetu_server.routes.admin import router as admin_router
from swasthsetu_server.routes.auth import router as auth_router
from swasthsetu_server.routes.notifications import router as notifications_router
from swasthsetu_server.routes.reference import router as reference_router
from swasthsetu_server.routes.registrations import router as registrations_router

API_PREFIX = "/api/v1"


def register_routes(app: FastAPI) -> None:
    """Include all sub-routers under the versioned API prefix."""
    app.include_router(registrations_router, prefix=API_PREFIX)
    app.include_router(admin_router, prefix=API_PREFIX)
    app.include_router(notifications_router, prefix=API_PREFIX)
    app.include_router(auth_router, prefix=API_PREFIX)
    app.include_router(reference_router, prefix=API_PREFIX)
