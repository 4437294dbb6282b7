"""Notification preference schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class NotificationPreferenceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    profile_updates: bool
    event_notifications: bool
    job_notifications: bool
    message_notifications: bool
    updated_at: datetime


class NotificationPreferenceUpdate(BaseModel):
    """Only the provided flags change."""

    profile_updates: bool | None = None
    event_notifications: bool | None = None
    job_notifications: bool | None = None
    message_notifications: bool | None = None
