"""RegistrationWorkflow: orchestrates submission, review and login.

The workflow owns the registration state machine::

    pending ──approve──► approved   (credential issued, notification emitted)
       │
       └────decline────► declined   (reason stored, notification emitted)

Both terminal states are final.  Approving or declining an id that does not
exist in the given role's collection is a silent no-op (returns ``None``);
acting on a registration that already left ``pending`` raises.

Every method takes an ``AsyncSession`` and only flushes; the caller commits,
so an approval's three writes (registration, credential, notification) land
in one transaction.

Usage::

    store = CatalogStore()
    store.load()
    workflow = RegistrationWorkflow(store)

    info = await workflow.submit_registration(db, form)
    issued = await workflow.approve_registration(
        db, registration_id=info.id, role="doctor",
    )
    result = await workflow.login(
        db, identifier=issued.login_identifier, secret=issued.secret,
        portal="doctor",
    )
    # result.outcome == LoginOutcome.SUCCESS
"""

from __future__ import annotations

import hmac
import logging
import random
import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from swasthsetu_db.models.enums import NotificationKind, RegistrationStatus, Role
from swasthsetu_db.models.notification import RegistrationNotification
from swasthsetu_db.models.registration import Registration
from swasthsetu_db.repository import RegistrationRepository

from swasthsetu_registry.catalog_store import CatalogStore
from swasthsetu_registry.constants import (
    APPROVED_MESSAGE,
    CREDENTIAL_MAX_ATTEMPTS,
    DECLINED_MESSAGE,
    REGISTRATION_ID_ATTEMPTS,
    ROLE_LABELS,
)
from swasthsetu_registry.credentials import (
    build_login_identifier,
    draw_suffix,
    generate_secret,
    hash_secret,
    verify_secret,
)
from swasthsetu_registry.errors import (
    CredentialIssuanceError,
    RegistrationNotFoundError,
    RegistrationNotPendingError,
)
from swasthsetu_registry.models.forms import (
    BaseRegistrationForm,
    DoctorRegistrationForm,
    PharmacyRegistrationForm,
)
from swasthsetu_registry.models.registry import (
    Identity,
    IssuedCredential,
    LoginOutcome,
    LoginResult,
    NotificationInfo,
    RegistrationInfo,
)

logger = logging.getLogger(__name__)


class RegistrationWorkflow:
    """Registration, approval/decline, notification and login orchestration.

    Args:
        catalog: a loaded :class:`CatalogStore` (form option lists and the
            demo login table)
        rng: optional random source for credential suffixes; defaults to the
            OS CSPRNG.  Tests pass a seeded ``random.Random``.
    """

    def __init__(
        self,
        catalog: CatalogStore,
        rng: random.Random | None = None,
    ) -> None:
        self._catalog = catalog
        self._rng = rng
        self._repo = RegistrationRepository()

    # ==================================================================
    # Submission
    # ==================================================================

    async def submit_registration(
        self,
        db: AsyncSession,
        form: BaseRegistrationForm,
    ) -> RegistrationInfo:
        """Validate catalog choices and append a new pending registration.

        Field-format checks already ran when ``form`` was built; this adds
        the checks that need the catalog.

        Raises:
            ValueError: if a specialization, hospital or medicine category is
                not in the catalog
            IntegrityError: if every candidate id was taken by concurrent
                submissions
        """
        self._check_catalog_choices(form)

        millis = int(datetime.now(timezone.utc).timestamp() * 1000)
        for attempt in range(1, REGISTRATION_ID_ATTEMPTS + 1):
            registration_id = await self._free_registration_id(db, form.role, millis)
            try:
                row = await self._repo.create_registration(
                    db,
                    registration_id=registration_id,
                    role=form.role,
                    display_name=form.display_name,
                    details=form.details(),
                )
                break
            except IntegrityError:
                # A concurrent submission committed the same id first
                if attempt == REGISTRATION_ID_ATTEMPTS:
                    raise
                logger.info("Registration id taken concurrently: %s", registration_id)
                millis = int(registration_id.rsplit("-", 1)[1]) + 1
        logger.info("Registration submitted: id=%s role=%s", row.id, row.role)
        return self._to_registration_info(row)

    def _check_catalog_choices(self, form: BaseRegistrationForm) -> None:
        if isinstance(form, DoctorRegistrationForm):
            if not self._catalog.is_specialization(form.specialization):
                raise ValueError(f"Unknown specialization: {form.specialization}")
            if not self._catalog.is_hospital(form.hospital_affiliation):
                raise ValueError(
                    f"Unknown hospital affiliation: {form.hospital_affiliation}"
                )
        elif isinstance(form, PharmacyRegistrationForm):
            unknown = [
                c for c in form.medicine_categories
                if not self._catalog.is_medicine_category(c)
            ]
            if unknown:
                raise ValueError(f"Unknown medicine categories: {', '.join(unknown)}")

    async def _free_registration_id(
        self, db: AsyncSession, role: str, millis: int
    ) -> str:
        """Return ``reg-<role>-<millis>``, bumping the millis past existing ids."""
        while await self._repo.get_by_id(db, f"reg-{role}-{millis}") is not None:
            millis += 1
        return f"reg-{role}-{millis}"

    # ==================================================================
    # Registration queries
    # ==================================================================

    async def get_registration(
        self, db: AsyncSession, *, registration_id: str
    ) -> RegistrationInfo | None:
        """Fetch a registration by id.  Returns None if not found."""
        row = await self._repo.get_by_id(db, registration_id)
        if row is None:
            return None
        return self._to_registration_info(row)

    async def list_registrations(
        self,
        db: AsyncSession,
        *,
        role: Role | str | None = None,
        status: RegistrationStatus | str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[RegistrationInfo]:
        """List registrations, most recent first."""
        rows = await self._repo.list_registrations(
            db,
            role=Role(role).value if role is not None else None,
            status=RegistrationStatus(status).value if status is not None else None,
            limit=limit,
            offset=offset,
        )
        return [self._to_registration_info(r) for r in rows]

    async def list_pending(self, db: AsyncSession) -> list[RegistrationInfo]:
        """Every pending registration across all roles, newest first."""
        rows = await self._repo.list_pending(db)
        return [self._to_registration_info(r) for r in rows]

    # ==================================================================
    # Review: terminal transitions
    # ==================================================================

    async def approve_registration(
        self,
        db: AsyncSession,
        *,
        registration_id: str,
        role: Role | str,
    ) -> IssuedCredential | None:
        """Approve a pending registration and issue its login credential.

        Returns the issued credential (with the plaintext secret, the only
        time it is exposed), or ``None`` when no registration with that id
        exists in ``role``'s collection.

        Raises:
            ValueError: if ``role`` is unknown or the registration is not
                pending
            CredentialIssuanceError: if no free login identifier could be drawn
        """
        role = Role(role)
        row = await self._repo.get_by_role_and_id(db, role.value, registration_id)
        if row is None:
            logger.warning(
                "Approve ignored, registration not found: id=%s role=%s",
                registration_id, role.value,
            )
            return None
        self._ensure_pending(row)

        login_identifier = await self._draw_login_identifier(db, row.display_name)
        secret = generate_secret()

        await self._repo.create_credential(
            db,
            login_identifier=login_identifier,
            secret_hash=hash_secret(secret),
            role=role.value,
            display_name=row.display_name,
            registration_id=row.id,
        )
        await self._repo.mark_approved(db, row, login_identifier=login_identifier)
        await self._repo.create_notification(
            db,
            registration_id=row.id,
            role=role.value,
            kind=NotificationKind.APPROVED,
            message=APPROVED_MESSAGE.format(
                role=role.value,
                label=ROLE_LABELS[role.value],
                login_identifier=login_identifier,
            ),
            login_identifier=login_identifier,
        )

        logger.info(
            "Registration approved: id=%s role=%s login=%s",
            row.id, role.value, login_identifier,
        )
        return IssuedCredential(
            login_identifier=login_identifier,
            secret=secret,
            role=role.value,
            display_name=row.display_name,
            registration_id=row.id,
        )

    async def decline_registration(
        self,
        db: AsyncSession,
        *,
        registration_id: str,
        role: Role | str,
        reason: str,
    ) -> RegistrationInfo | None:
        """Decline a pending registration with a mandatory reason.

        Returns the updated registration, or ``None`` when no registration
        with that id exists in ``role``'s collection.

        Raises:
            ValueError: if ``reason`` is blank, ``role`` is unknown, or the
                registration is not pending
        """
        reason = (reason or "").strip()
        if not reason:
            raise ValueError("A reason is required to decline a registration")

        role = Role(role)
        row = await self._repo.get_by_role_and_id(db, role.value, registration_id)
        if row is None:
            logger.warning(
                "Decline ignored, registration not found: id=%s role=%s",
                registration_id, role.value,
            )
            return None
        self._ensure_pending(row)

        await self._repo.mark_declined(db, row, reason=reason)
        await self._repo.create_notification(
            db,
            registration_id=row.id,
            role=role.value,
            kind=NotificationKind.DECLINED,
            message=DECLINED_MESSAGE.format(role=role.value, reason=reason),
        )

        logger.info("Registration declined: id=%s role=%s", row.id, role.value)
        return self._to_registration_info(row)

    @staticmethod
    def _ensure_pending(row: Registration) -> None:
        if row.status != RegistrationStatus.PENDING.value:
            raise RegistrationNotPendingError(
                f"Registration {row.id} is not pending (status={row.status})"
            )

    async def _draw_login_identifier(
        self, db: AsyncSession, display_name: str
    ) -> str:
        """Draw suffixes until the identifier is free in both credential tables."""
        for _ in range(CREDENTIAL_MAX_ATTEMPTS):
            candidate = build_login_identifier(display_name, draw_suffix(self._rng))
            if self._catalog.get_demo_account(candidate) is not None:
                continue
            if await self._repo.get_credential(db, candidate) is not None:
                logger.debug("Login identifier collision: %s", candidate)
                continue
            return candidate
        raise CredentialIssuanceError(
            f"Could not issue a unique login identifier for {display_name!r} "
            f"after {CREDENTIAL_MAX_ATTEMPTS} attempts"
        )

    # ==================================================================
    # Notifications
    # ==================================================================

    async def list_notifications(
        self,
        db: AsyncSession,
        *,
        registration_id: str | None = None,
        role: Role | str | None = None,
        unread_only: bool = False,
        limit: int = 20,
        offset: int = 0,
    ) -> list[NotificationInfo]:
        """List notifications, most recent first."""
        rows = await self._repo.list_notifications(
            db,
            registration_id=registration_id,
            role=Role(role).value if role is not None else None,
            unread_only=unread_only,
            limit=limit,
            offset=offset,
        )
        return [self._to_notification_info(r) for r in rows]

    async def mark_notification_read(
        self, db: AsyncSession, *, notification_id: uuid.UUID
    ) -> NotificationInfo:
        """Mark a notification read.  Idempotent.

        Raises:
            RegistrationNotFoundError: if the notification does not exist
        """
        row = await self._repo.get_notification(db, notification_id)
        if row is None:
            raise RegistrationNotFoundError(f"Notification not found: id={notification_id}")
        row = await self._repo.mark_notification_read(db, row)
        return self._to_notification_info(row)

    # ==================================================================
    # Login resolution
    # ==================================================================

    async def login(
        self,
        db: AsyncSession,
        *,
        identifier: str,
        secret: str,
        portal: Role | str,
    ) -> LoginResult:
        """Resolve a login attempt against a portal.

        The demo table is checked first, then issued credentials; the first
        table whose identifier AND secret match wins.  A match whose role
        differs from ``portal`` yields ``wrong_portal``.
        """
        portal = Role(portal)
        key = (identifier or "").strip().lower()
        secret = secret or ""

        identity = self._match_demo(key, secret)
        if identity is None:
            identity = await self._match_issued(db, key, secret)

        if identity is None:
            logger.info("Login rejected: identifier=%s portal=%s", key, portal.value)
            return LoginResult(outcome=LoginOutcome.INVALID_CREDENTIALS)

        if identity.role != portal.value:
            logger.info(
                "Login on wrong portal: identifier=%s portal=%s expected=%s",
                key, portal.value, identity.role,
            )
            return LoginResult(
                outcome=LoginOutcome.WRONG_PORTAL,
                identity=identity,
                expected_portal=identity.role,
            )

        return LoginResult(outcome=LoginOutcome.SUCCESS, identity=identity)

    def _match_demo(self, key: str, secret: str) -> Identity | None:
        account = self._catalog.get_demo_account(key)
        if account is None:
            return None
        if not hmac.compare_digest(
            account.password.encode("utf-8"), secret.encode("utf-8")
        ):
            return None
        return Identity(
            login_identifier=account.email,
            role=account.role,
            display_name=account.name,
            source="demo",
        )

    async def _match_issued(
        self, db: AsyncSession, key: str, secret: str
    ) -> Identity | None:
        if not key:
            return None
        row = await self._repo.get_credential(db, key)
        if row is None or not verify_secret(secret, row.secret_hash):
            return None
        return Identity(
            login_identifier=row.login_identifier,
            role=row.role,
            display_name=row.display_name,
            source="issued",
        )

    # ==================================================================
    # Internal: conversion
    # ==================================================================

    @staticmethod
    def _to_registration_info(row: Registration) -> RegistrationInfo:
        """Convert an ORM row to a public RegistrationInfo."""
        return RegistrationInfo(
            id=row.id,
            role=row.role,
            status=row.status.value if isinstance(row.status, RegistrationStatus) else str(row.status),
            display_name=row.display_name,
            details=dict(row.details or {}),
            created_at=row.created_at,
            decided_at=row.decided_at,
            decline_reason=row.decline_reason,
            login_identifier=row.issued_login_identifier,
        )

    @staticmethod
    def _to_notification_info(row: RegistrationNotification) -> NotificationInfo:
        """Convert an ORM row to a public NotificationInfo."""
        return NotificationInfo(
            id=row.id,
            registration_id=row.registration_id,
            role=row.role,
            kind=row.kind,
            message=row.message,
            login_identifier=row.login_identifier,
            read=row.read,
            created_at=row.created_at,
        )
