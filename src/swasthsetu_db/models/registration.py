"""Registration ORM model: one row per role-specific application.

Role-specific form fields live in a single JSONB ``details`` column so that
every role shares one table; ``role`` is the discriminator that tells the SDK
how to read them back.  ``display_name`` is denormalised out of ``details``
because credential issuance and listings need it without parsing the blob.
"""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Index, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from swasthsetu_db.models.base import Base
from swasthsetu_db.models.enums import RegistrationStatus


class Registration(Base):
    """One row per submitted registration.  Rows are never deleted."""

    __tablename__ = "registrations"

    # --- Primary key ---
    # Human-readable id of the form ``reg-<role>-<epoch millis>``
    id: Mapped[str] = mapped_column(Text, primary_key=True)

    # --- Identity ---
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    display_name: Mapped[str] = mapped_column(Text, nullable=False)

    # --- Lifecycle ---
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=RegistrationStatus.PENDING,
        server_default=text("'pending'"),
    )

    # --- Role-specific form payload ---
    details: Mapped[dict] = mapped_column(
        JSONB,
        nullable=False,
        server_default=text("'{}'::jsonb"),
    )

    # --- Decision ---
    # Set exactly once, on the pending -> approved/declined transition.
    decline_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Lowercase login identifier of the credential issued on approval.
    # The secret itself lives (hashed) in ``issued_credentials`` only.
    issued_login_identifier: Mapped[str | None] = mapped_column(Text, nullable=True)
    decided_at: Mapped[datetime | None] = mapped_column(
        TIMESTAMP(timezone=True), nullable=True
    )

    # --- Timestamps ---
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint(
            "role IN ('patient', 'doctor', 'hospital', 'pharmacy', 'insurance', 'admin')",
            name="ck_registration_role",
        ),
        CheckConstraint(
            "status IN ('pending', 'approved', 'declined')",
            name="ck_registration_status",
        ),
        # Approved registrations must point at their issued credential
        CheckConstraint(
            "status != 'approved' OR issued_login_identifier IS NOT NULL",
            name="ck_approved_has_credential",
        ),
        # Declined registrations must carry a reason
        CheckConstraint(
            "status != 'declined' OR decline_reason IS NOT NULL",
            name="ck_declined_has_reason",
        ),
        # Terminal rows must record when the decision was made
        CheckConstraint(
            "status = 'pending' OR decided_at IS NOT NULL",
            name="ck_decided_has_timestamp",
        ),
        Index("ix_registrations_role_status", "role", "status"),
        Index("ix_registrations_created_at", "created_at"),
        # Partial index backing the admin "pending across all roles" queue
        Index(
            "ix_registrations_pending",
            "created_at",
            postgresql_where=text("status = 'pending'"),
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Registration(id={self.id!r}, role={self.role!r}, "
            f"status={self.status!r}, name={self.display_name!r})>"
        )
