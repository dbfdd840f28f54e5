"""Async CRUD repository for registrations, credentials and notifications.

All public methods accept an ``AsyncSession`` so the caller controls
transaction boundaries (approval writes three rows that must commit together).

Business-logic validation lives in the SDK layer.  Structural invariants
(e.g. an approved registration must reference a credential) are DB
constraints.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from swasthsetu_db.models.credential import IssuedCredentialRow
from swasthsetu_db.models.enums import NotificationKind, RegistrationStatus
from swasthsetu_db.models.notification import RegistrationNotification
from swasthsetu_db.models.registration import Registration


class RegistrationRepository:
    """Async read/write operations on the registry tables."""

    # ------------------------------------------------------------------
    # Registrations: create
    # ------------------------------------------------------------------

    async def create_registration(
        self,
        db: AsyncSession,
        *,
        registration_id: str,
        role: str,
        display_name: str,
        details: dict[str, Any],
    ) -> Registration:
        """Insert a new pending registration and return it.

        The insert runs in a savepoint, so a duplicate id raises
        ``IntegrityError`` and leaves the outer transaction usable.
        The caller must ``await db.commit()`` to persist.
        """
        row = Registration(
            id=registration_id,
            role=role,
            display_name=display_name,
            details=details,
            status=RegistrationStatus.PENDING.value,
        )
        async with db.begin_nested():
            db.add(row)
        return row

    # ------------------------------------------------------------------
    # Registrations: read
    # ------------------------------------------------------------------

    async def get_by_id(
        self, db: AsyncSession, registration_id: str
    ) -> Registration | None:
        """Fetch a registration by its primary key."""
        return await db.get(Registration, registration_id)

    async def get_by_role_and_id(
        self, db: AsyncSession, role: str, registration_id: str
    ) -> Registration | None:
        """Fetch and row-lock a registration in ``role``'s collection.

        ``FOR UPDATE`` serialises concurrent reviews of the same row: a
        second reviewer blocks until the first commits, then reads the
        terminal status.
        """
        stmt = (
            select(Registration)
            .where(
                Registration.id == registration_id,
                Registration.role == role,
            )
            .with_for_update()
            # Refresh a row this session already holds with the locked read
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_registrations(
        self,
        db: AsyncSession,
        *,
        role: str | None = None,
        status: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Registration]:
        """List registrations, most recent first, optionally filtered."""
        stmt = select(Registration)
        if role is not None:
            stmt = stmt.where(Registration.role == role)
        if status is not None:
            stmt = stmt.where(Registration.status == status)
        stmt = (
            stmt.order_by(Registration.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    async def list_pending(self, db: AsyncSession) -> list[Registration]:
        """Return every pending registration across all roles, newest first."""
        stmt = (
            select(Registration)
            .where(Registration.status == RegistrationStatus.PENDING.value)
            .order_by(Registration.created_at.desc())
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Registrations: terminal transitions
    # ------------------------------------------------------------------

    async def mark_approved(
        self,
        db: AsyncSession,
        row: Registration,
        *,
        login_identifier: str,
    ) -> Registration:
        """Move a registration to ``approved`` and link its credential.

        The CHECK constraint ``ck_approved_has_credential`` enforces that
        ``issued_login_identifier`` is non-null whenever status is approved.
        """
        now = datetime.now(timezone.utc)
        row.status = RegistrationStatus.APPROVED.value
        row.issued_login_identifier = login_identifier
        row.decided_at = now
        row.updated_at = now
        await db.flush()
        return row

    async def mark_declined(
        self,
        db: AsyncSession,
        row: Registration,
        *,
        reason: str,
    ) -> Registration:
        """Move a registration to ``declined`` with the given reason."""
        now = datetime.now(timezone.utc)
        row.status = RegistrationStatus.DECLINED.value
        row.decline_reason = reason
        row.decided_at = now
        row.updated_at = now
        await db.flush()
        return row

    # ------------------------------------------------------------------
    # Issued credentials
    # ------------------------------------------------------------------

    async def create_credential(
        self,
        db: AsyncSession,
        *,
        login_identifier: str,
        secret_hash: str,
        role: str,
        display_name: str,
        registration_id: str,
    ) -> IssuedCredentialRow:
        """Insert an issued credential keyed by the lowercase identifier."""
        row = IssuedCredentialRow(
            login_identifier=login_identifier.lower(),
            secret_hash=secret_hash,
            role=role,
            display_name=display_name,
            registration_id=registration_id,
        )
        db.add(row)
        await db.flush()
        return row

    async def get_credential(
        self, db: AsyncSession, login_identifier: str
    ) -> IssuedCredentialRow | None:
        """Case-insensitive lookup of an issued credential."""
        return await db.get(IssuedCredentialRow, login_identifier.lower())

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    async def create_notification(
        self,
        db: AsyncSession,
        *,
        registration_id: str,
        role: str,
        kind: NotificationKind,
        message: str,
        login_identifier: str | None = None,
    ) -> RegistrationNotification:
        """Insert an unread notification for a registration decision."""
        row = RegistrationNotification(
            registration_id=registration_id,
            role=role,
            kind=kind.value,
            message=message,
            login_identifier=login_identifier,
            read=False,
        )
        db.add(row)
        await db.flush()
        return row

    async def get_notification(
        self, db: AsyncSession, notification_id: uuid.UUID
    ) -> RegistrationNotification | None:
        """Fetch a notification by its primary-key UUID."""
        return await db.get(RegistrationNotification, notification_id)

    async def list_notifications(
        self,
        db: AsyncSession,
        *,
        registration_id: str | None = None,
        role: str | None = None,
        unread_only: bool = False,
        limit: int = 20,
        offset: int = 0,
    ) -> list[RegistrationNotification]:
        """List notifications, most recent first, optionally filtered."""
        stmt = select(RegistrationNotification)
        if registration_id is not None:
            stmt = stmt.where(
                RegistrationNotification.registration_id == registration_id
            )
        if role is not None:
            stmt = stmt.where(RegistrationNotification.role == role)
        if unread_only:
            stmt = stmt.where(RegistrationNotification.read.is_(False))
        stmt = (
            stmt.order_by(RegistrationNotification.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    async def mark_notification_read(
        self, db: AsyncSession, row: RegistrationNotification
    ) -> RegistrationNotification:
        """Flag a notification as read.  Re-reading keeps the first read_at."""
        if not row.read:
            row.read = True
            row.read_at = datetime.now(timezone.utc)
            await db.flush()
        return row
