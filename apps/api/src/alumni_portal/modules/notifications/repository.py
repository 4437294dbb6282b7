"""
Notification Preference Repository

Database operations for notification preferences.
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import NotificationPreference

PREFERENCE_FLAGS = (
    "profile_updates",
    "event_notifications",
    "job_notifications",
    "message_notifications",
)


async def get_by_user_id(db: AsyncSession, user_id: UUID) -> NotificationPreference | None:
    result = await db.execute(
        select(NotificationPreference).where(NotificationPreference.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def create_default(db: AsyncSession, user_id: UUID) -> NotificationPreference:
    """Insert the all-enabled row. Raises IntegrityError if one already exists."""
    preferences = NotificationPreference(
        user_id=user_id,
        **{flag: True for flag in PREFERENCE_FLAGS},
    )
    db.add(preferences)
    await db.flush()
    await db.refresh(preferences)
    return preferences


async def update_flags(
    db: AsyncSession,
    preferences: NotificationPreference,
    values: dict[str, bool],
) -> NotificationPreference:
    for flag, value in values.items():
        if flag in PREFERENCE_FLAGS and value is not None:
            setattr(preferences, flag, value)
    await db.flush()
    return preferences
