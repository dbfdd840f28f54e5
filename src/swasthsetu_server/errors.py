"""Exception handlers that turn workflow errors into HTTP responses.

Handlers are chosen by exception type (most specific class wins):

    RegistrationNotFoundError     -> 404
    RegistrationNotPendingError   -> 409  (already approved or declined)
    ValueError (any other)        -> 400  (unknown catalog choice, blank reason)
    CredentialIssuanceError       -> 503  (identifier attempts exhausted)
    Exception                     -> 500

For 404/409 the client gets a fixed description and ids stay in the server
log.  400 messages describe the caller's own input and are passed through.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from swasthsetu_registry.errors import (
    CredentialIssuanceError,
    RegistrationNotFoundError,
    RegistrationNotPendingError,
)

logger = logging.getLogger(__name__)


async def not_found_handler(
    request: Request, exc: RegistrationNotFoundError
) -> JSONResponse:
    logger.warning("%s %s -> 404: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=404, content={"detail": "Resource not found"})


async def not_pending_handler(
    request: Request, exc: RegistrationNotPendingError
) -> JSONResponse:
    logger.warning("%s %s -> 409: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=409,
        content={"detail": "Registration has already been reviewed"},
    )


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Any other ``ValueError`` is a bad request; its message is returned."""
    logger.info("%s %s -> 400: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": str(exc)})


async def credential_issuance_handler(
    request: Request, exc: CredentialIssuanceError
) -> JSONResponse:
    """Identifier attempts ran out; the caller may retry the approval."""
    logger.error("%s %s -> 503: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=503,
        content={"detail": "Could not issue a login identifier, please retry"},
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the traceback and return a bare 500."""
    logger.exception("Unhandled exception at %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})
