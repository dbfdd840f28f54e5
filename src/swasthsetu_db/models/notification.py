"""RegistrationNotification ORM model: messages emitted on approve/decline."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, ForeignKey, Index, String, Text, text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from swasthsetu_db.models.base import Base


class RegistrationNotification(Base):
    """One row per approval/decline notification.

    ``read`` is the only column mutated after insert (by the recipient
    viewing the notification).
    """

    __tablename__ = "registration_notifications"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    registration_id: Mapped[str] = mapped_column(
        Text, ForeignKey("registrations.id"), nullable=False, index=True
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    # Only set for approvals; never carries the secret
    login_identifier: Mapped[str | None] = mapped_column(Text, nullable=True)
    read: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    read_at: Mapped[datetime | None] = mapped_column(
        TIMESTAMP(timezone=True), nullable=True
    )

    __table_args__ = (
        Index("ix_notifications_role_read", "role", "read"),
    )

    def __repr__(self) -> str:
        return (
            f"<RegistrationNotification(id={self.id!s}, "
            f"registration={self.registration_id!r}, kind={self.kind!r}, "
            f"read={self.read})>"
        )
