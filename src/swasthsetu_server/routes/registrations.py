"""Registration endpoints: submit, get and list registrations.

Submission is public (it is how applicants reach the admin queue); the body
is a role-tagged form, validated by Pydantic before the workflow sees it.
"""

from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from swasthsetu_registry.errors import RegistrationNotFoundError
from swasthsetu_registry.models.forms import RegistrationSubmission
from swasthsetu_registry.models.registry import RegistrationInfo
from swasthsetu_registry.workflow import RegistrationWorkflow

from swasthsetu_server.config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from swasthsetu_server.dependencies import get_db, get_workflow

router = APIRouter(tags=["registrations"])

RoleParam = Literal["patient", "doctor", "hospital", "pharmacy", "insurance", "admin"]
StatusParam = Literal["pending", "approved", "declined"]


@router.post("/registrations", status_code=201)
async def submit_registration(
    body: RegistrationSubmission,
    db: AsyncSession = Depends(get_db),
    workflow: RegistrationWorkflow = Depends(get_workflow),
) -> RegistrationInfo:
    """Submit a role-specific registration.  It starts out ``pending``."""
    return await workflow.submit_registration(db, body.root)


@router.get("/registrations/pending")
async def list_pending_registrations(
    db: AsyncSession = Depends(get_db),
    workflow: RegistrationWorkflow = Depends(get_workflow),
) -> list[RegistrationInfo]:
    """All pending registrations across roles, newest first."""
    return await workflow.list_pending(db)


@router.get("/registrations/{registration_id}")
async def get_registration(
    registration_id: str,
    db: AsyncSession = Depends(get_db),
    workflow: RegistrationWorkflow = Depends(get_workflow),
) -> RegistrationInfo:
    """Get a registration by id.  Raises 404 if it does not exist."""
    info = await workflow.get_registration(db, registration_id=registration_id)
    if info is None:
        raise RegistrationNotFoundError(f"Registration not found: id={registration_id}")
    return info


@router.get("/registrations")
async def list_registrations(
    role: RoleParam | None = Query(None),
    status: StatusParam | None = Query(None),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    workflow: RegistrationWorkflow = Depends(get_workflow),
) -> list[RegistrationInfo]:
    """List registrations, most recent first, filtered by role and status."""
    return await workflow.list_registrations(
        db, role=role, status=status, limit=limit, offset=offset,
    )
