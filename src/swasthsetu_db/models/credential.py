"""IssuedCredentialRow ORM model: login identities created on approval.

Keyed by the lowercased login identifier so lookups during login are a
single primary-key fetch.  Secrets are stored as salted PBKDF2 hashes.
"""

from datetime import datetime, timezone

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from swasthsetu_db.models.base import Base


class IssuedCredentialRow(Base):
    """One row per credential issued by an approval."""

    __tablename__ = "issued_credentials"

    login_identifier: Mapped[str] = mapped_column(Text, primary_key=True)
    secret_hash: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    display_name: Mapped[str] = mapped_column(Text, nullable=False)
    # One credential per registration
    registration_id: Mapped[str] = mapped_column(
        Text,
        ForeignKey("registrations.id"),
        nullable=False,
        unique=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return (
            f"<IssuedCredentialRow(login={self.login_identifier!r}, "
            f"role={self.role!r}, registration={self.registration_id!r})>"
        )
