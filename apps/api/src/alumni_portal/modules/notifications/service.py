"""
Notification Preference Service

Reads and updates per-user email preferences and answers whether an
optional email should be sent.
"""

import logging
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from alumni_portal.core.policy import Action, enforce
from alumni_portal.modules.notifications import repository
from alumni_portal.modules.notifications.models import NotificationPreference
from alumni_portal.modules.notifications.schemas import NotificationPreferenceUpdate

if TYPE_CHECKING:
    from alumni_portal.core.auth import Principal

logger = logging.getLogger(__name__)


async def get_preferences(db: AsyncSession, principal: "Principal") -> NotificationPreference:
    """
    Return the caller's preferences, creating the default row on first access.

    Two first requests racing each other both try the insert; the loser hits
    the unique constraint and re-reads the winner's row.
    """
    enforce(principal, Action.PREFERENCES_MANAGE)

    preferences = await repository.get_by_user_id(db, principal.id)
    if preferences is not None:
        return preferences

    try:
        preferences = await repository.create_default(db, principal.id)
        await db.commit()
        logger.info(f"Created default notification preferences for user {principal.id}")
        return preferences
    except IntegrityError:
        await db.rollback()
        logger.info(f"Notification preferences for {principal.id} created concurrently")
        preferences = await repository.get_by_user_id(db, principal.id)
        if preferences is None:
            raise
        return preferences


async def update_preferences(
    db: AsyncSession,
    principal: "Principal",
    data: NotificationPreferenceUpdate,
) -> NotificationPreference:
    preferences = await get_preferences(db, principal)
    await repository.update_flags(db, preferences, data.model_dump(exclude_none=True))
    await db.commit()
    logger.info(f"User {principal.id} updated notification preferences")
    return preferences


async def should_notify(db: AsyncSession, user_id: UUID, category: str) -> bool:
    """
    Whether ``user_id`` wants emails in ``category`` (a preference flag name).

    Missing rows and lookup failures default to True.
    """
    try:
        preferences = await repository.get_by_user_id(db, user_id)
    except Exception as e:
        logger.warning(f"Could not read notification preferences for {user_id}: {e}")
        return True

    if preferences is None:
        return True
    return bool(getattr(preferences, category, True))
