"""Notification endpoints: list decision notifications and mark them read."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from swasthsetu_registry.models.registry import NotificationInfo
from swasthsetu_registry.workflow import RegistrationWorkflow

from swasthsetu_server.config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from swasthsetu_server.dependencies import get_db, get_workflow
from swasthsetu_server.routes.registrations import RoleParam

router = APIRouter(tags=["notifications"])


@router.get("/notifications")
async def list_notifications(
    registration_id: str | None = Query(None),
    role: RoleParam | None = Query(None),
    unread_only: bool = Query(False),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    workflow: RegistrationWorkflow = Depends(get_workflow),
) -> list[NotificationInfo]:
    """List notifications, most recent first."""
    return await workflow.list_notifications(
        db,
        registration_id=registration_id,
        role=role,
        unread_only=unread_only,
        limit=limit,
        offset=offset,
    )


@router.post("/notifications/{notification_id}/read")
async def mark_notification_read(
    notification_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    workflow: RegistrationWorkflow = Depends(get_workflow),
) -> NotificationInfo:
    """Mark a notification read.  Returns 404 if it does not exist."""
    return await workflow.mark_notification_read(
        db, notification_id=notification_id,
    )
