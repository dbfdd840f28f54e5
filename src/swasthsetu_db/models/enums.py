"""Database-level enumerations for registrations and notifications."""

import enum


class Role(str, enum.Enum):
    """Platform roles.  Each role is also a login portal."""

    PATIENT = "patient"
    DOCTOR = "doctor"
    HOSPITAL = "hospital"
    PHARMACY = "pharmacy"
    INSURANCE = "insurance"
    ADMIN = "admin"


class RegistrationStatus(str, enum.Enum):
    """Lifecycle states for a registration.

    Transitions:
        pending -> approved  (admin approval, credential issued)
        pending -> declined  (admin decline, reason recorded)

    Both ``approved`` and ``declined`` are terminal.
    """

    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"


class NotificationKind(str, enum.Enum):
    """Which terminal transition a notification reports."""

    APPROVED = "approved"
    DECLINED = "declined"
