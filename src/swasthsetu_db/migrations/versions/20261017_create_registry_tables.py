"""Create registrations, issued_credentials and registration_notifications.

Initial migration for the registry.  Mirrors the ORM models in
``swasthsetu_db.models``.

Revision ID: 20261017_registry
Revises:
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID

# revision identifiers, used by Alembic.
revision = "20261017_registry"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # --- registrations ---
    op.create_table(
        "registrations",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("display_name", sa.Text, nullable=False),
        sa.Column(
            "status",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'pending'"),
        ),
        sa.Column(
            "details",
            JSONB,
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("decline_reason", sa.Text, nullable=True),
        sa.Column("issued_login_identifier", sa.Text, nullable=True),
        sa.Column("decided_at", TIMESTAMP(timezone=True), nullable=True),
        sa.Column("created_at", TIMESTAMP(timezone=True), nullable=False),
        sa.Column("updated_at", TIMESTAMP(timezone=True), nullable=False),
        sa.CheckConstraint(
            "role IN ('patient', 'doctor', 'hospital', 'pharmacy', 'insurance', 'admin')",
            name="ck_registration_role",
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'declined')",
            name="ck_registration_status",
        ),
        sa.CheckConstraint(
            "status != 'approved' OR issued_login_identifier IS NOT NULL",
            name="ck_approved_has_credential",
        ),
        sa.CheckConstraint(
            "status != 'declined' OR decline_reason IS NOT NULL",
            name="ck_declined_has_reason",
        ),
        sa.CheckConstraint(
            "status = 'pending' OR decided_at IS NOT NULL",
            name="ck_decided_has_timestamp",
        ),
    )
    op.create_index(
        "ix_registrations_role_status", "registrations", ["role", "status"]
    )
    op.create_index("ix_registrations_created_at", "registrations", ["created_at"])
    op.create_index(
        "ix_registrations_pending",
        "registrations",
        ["created_at"],
        postgresql_where=sa.text("status = 'pending'"),
    )

    # --- issued_credentials ---
    op.create_table(
        "issued_credentials",
        sa.Column("login_identifier", sa.Text, primary_key=True),
        sa.Column("secret_hash", sa.Text, nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("display_name", sa.Text, nullable=False),
        sa.Column(
            "registration_id",
            sa.Text,
            sa.ForeignKey("registrations.id"),
            nullable=False,
            unique=True,
        ),
        sa.Column("created_at", TIMESTAMP(timezone=True), nullable=False),
    )
    op.create_index("ix_issued_credentials_role", "issued_credentials", ["role"])

    # --- registration_notifications ---
    op.create_table(
        "registration_notifications",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "registration_id",
            sa.Text,
            sa.ForeignKey("registrations.id"),
            nullable=False,
        ),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("kind", sa.String(20), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("login_identifier", sa.Text, nullable=True),
        sa.Column(
            "read",
            sa.Boolean,
            nullable=False,
            server_default=sa.text("false"),
        ),
        sa.Column("created_at", TIMESTAMP(timezone=True), nullable=False),
        sa.Column("read_at", TIMESTAMP(timezone=True), nullable=True),
    )
    op.create_index(
        "ix_registration_notifications_registration_id",
        "registration_notifications",
        ["registration_id"],
    )
    op.create_index(
        "ix_notifications_role_read",
        "registration_notifications",
        ["role", "read"],
    )


def downgrade() -> None:
    op.drop_table("registration_notifications")
    op.drop_table("issued_credentials")
    op.drop_index("ix_registrations_pending", table_name="registrations")
    op.drop_index("ix_registrations_created_at", table_name="registrations")
    op.drop_index("ix_registrations_role_status", table_name="registrations")
    op.drop_table("registrations")
