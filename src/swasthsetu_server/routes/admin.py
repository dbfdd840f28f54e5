"""Admin review endpoints: approve or decline pending registrations.

Protected by the ``ADMIN_API_KEY`` setting.  Every request must include an
``X-Admin-Key`` header whose value matches the configured key.  Returns 401
if missing, 403 if wrong or if review is disabled.

Approving or declining an id that is not in the role's collection is a
no-op in the SDK; here it surfaces as 404 so the reviewer sees that nothing
happened.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from swasthsetu_registry.errors import RegistrationNotFoundError
from swasthsetu_registry.models.registry import IssuedCredential, RegistrationInfo
from swasthsetu_registry.workflow import RegistrationWorkflow

from swasthsetu_server.dependencies import get_db, get_workflow, require_admin_key
from swasthsetu_server.routes.registrations import RoleParam

router = APIRouter(prefix="/admin", tags=["admin"])


# ------------------------------------------------------------------
# Request models
# ------------------------------------------------------------------

class DeclineRequest(BaseModel):
    """Body for POST /admin/registrations/{role}/{id}/decline."""
    reason: str = Field(min_length=1)


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.post("/registrations/{role}/{registration_id}/approve")
async def approve_registration(
    role: RoleParam,
    registration_id: str,
    db: AsyncSession = Depends(get_db),
    workflow: RegistrationWorkflow = Depends(get_workflow),
    _admin: str = Depends(require_admin_key),
) -> IssuedCredential:
    """Approve a pending registration and return the issued credential.

    The secret in the response is shown exactly once; deliver it to the
    applicant out of band.
    """
    issued = await workflow.approve_registration(
        db, registration_id=registration_id, role=role,
    )
    if issued is None:
        raise RegistrationNotFoundError(
            f"Registration not found: id={registration_id} role={role}"
        )
    return issued


@router.post("/registrations/{role}/{registration_id}/decline")
async def decline_registration(
    role: RoleParam,
    registration_id: str,
    body: DeclineRequest,
    db: AsyncSession = Depends(get_db),
    workflow: RegistrationWorkflow = Depends(get_workflow),
    _admin: str = Depends(require_admin_key),
) -> RegistrationInfo:
    """Decline a pending registration with a reason."""
    info = await workflow.decline_registration(
        db, registration_id=registration_id, role=role, reason=body.reason,
    )
    if info is None:
        raise RegistrationNotFoundError(
            f"Registration not found: id={registration_id} role={role}"
        )
    return info
