"""ORM models for swasthsetu_db."""

from swasthsetu_db.models.base import Base
from swasthsetu_db.models.credential import IssuedCredentialRow
from swasthsetu_db.models.enums import NotificationKind, RegistrationStatus, Role
from swasthsetu_db.models.notification import RegistrationNotification
from swasthsetu_db.models.registration import Registration

__all__ = [
    "Base",
    "IssuedCredentialRow",
    "NotificationKind",
    "Registration",
    "RegistrationNotification",
    "RegistrationStatus",
    "Role",
]
