"""
Notification Preference Models

Per-user email opt-ins. A user without a row receives every notification.
"""

import uuid

from sqlalchemy import Boolean, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from alumni_portal.modules.shared import BaseModel


class NotificationPreference(BaseModel):
    """Email notification settings for one user."""

    __tablename__ = "notification_preferences"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    profile_updates: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    event_notifications: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    job_notifications: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    message_notifications: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<NotificationPreference(user_id={self.user_id})>"
