"""Registry view models: the contract between the workflow and API callers.

These models are intentionally decoupled from the ORM models in
``swasthsetu_db`` so that API consumers never see database internals (in
particular, never a stored secret hash).
"""

import enum
import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class RegistrationInfo(BaseModel):
    """Public view of a registration."""

    id: str
    role: str
    status: str
    display_name: str
    details: dict
    created_at: datetime
    decided_at: datetime | None = None
    decline_reason: str | None = None
    # Login identifier of the issued credential (approved only)
    login_identifier: str | None = None


class IssuedCredential(BaseModel):
    """Credential returned once, to the approving admin, on approval.

    ``secret`` is the only place the plaintext secret ever appears; the
    database keeps a salted hash.
    """

    login_identifier: str
    secret: str
    role: str
    display_name: str
    registration_id: str


class NotificationInfo(BaseModel):
    """Public view of a registration notification."""

    id: uuid.UUID
    registration_id: str
    role: str
    kind: Literal["approved", "declined"]
    message: str
    login_identifier: str | None = None
    read: bool
    created_at: datetime


class LoginOutcome(str, enum.Enum):
    """Result of resolving a login attempt against a portal."""

    SUCCESS = "success"
    WRONG_PORTAL = "wrong_portal"
    INVALID_CREDENTIALS = "invalid_credentials"


class Identity(BaseModel):
    """Who logged in, and from which credential table."""

    login_identifier: str
    role: str
    display_name: str
    source: Literal["demo", "issued"]


class LoginResult(BaseModel):
    """Login resolution result.

    ``identity`` is set for ``success`` and ``wrong_portal`` (the secret was
    right); ``expected_portal`` names the portal the identity belongs to
    when the caller used the wrong one.
    """

    outcome: LoginOutcome
    identity: Identity | None = None
    expected_portal: str | None = None
