"""Portal login endpoint.

Resolves an identifier/secret pair against the demo table and issued
credentials, then checks that the identity belongs to the portal used:
  - 200 with the identity on success
  - 403 "Wrong portal" when the credential is valid for another portal
  - 401 otherwise
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from swasthsetu_registry.models.registry import LoginOutcome, LoginResult
from swasthsetu_registry.workflow import RegistrationWorkflow

from swasthsetu_server.dependencies import get_db, get_workflow
from swasthsetu_server.routes.registrations import RoleParam

router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(BaseModel):
    """Body for POST /auth/login."""
    identifier: str
    secret: str
    portal: RoleParam


@router.post("/login")
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
    workflow: RegistrationWorkflow = Depends(get_workflow),
) -> LoginResult:
    """Log in to a portal."""
    result = await workflow.login(
        db, identifier=body.identifier, secret=body.secret, portal=body.portal,
    )
    if result.outcome == LoginOutcome.WRONG_PORTAL:
        raise HTTPException(
            status_code=403,
            detail=f"Wrong portal: please use the {result.expected_portal} dashboard to log in",
        )
    if result.outcome == LoginOutcome.INVALID_CREDENTIALS:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return result
