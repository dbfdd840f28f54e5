"""swasthsetu_db: PostgreSQL persistence layer for the registration registry.

This package provides the ORM models, async engine factory, and repository
for registrations, issued credentials, and registration notifications.  It is
consumed by the SDK workflow, the FastAPI server, and the review CLI.
"""

from swasthsetu_db.config import DatabaseSettings, load_database_settings
from swasthsetu_db.engine import dispose_engine, get_engine, get_session_factory
from swasthsetu_db.models.credential import IssuedCredentialRow
from swasthsetu_db.models.enums import NotificationKind, RegistrationStatus, Role
from swasthsetu_db.models.notification import RegistrationNotification
from swasthsetu_db.models.registration import Registration
from swasthsetu_db.repository import RegistrationRepository

__all__ = [
    "Registration",
    "IssuedCredentialRow",
    "RegistrationNotification",
    "RegistrationStatus",
    "NotificationKind",
    "Role",
    "DatabaseSettings",
    "load_database_settings",
    "dispose_engine",
    "get_engine",
    "get_session_factory",
    "RegistrationRepository",
]
