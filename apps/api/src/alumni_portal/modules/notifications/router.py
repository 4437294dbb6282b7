"""Notification preference endpoints."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from alumni_portal.core.auth import Principal, get_current_principal
from alumni_portal.core.database import get_db
from alumni_portal.core.exceptions import ServiceError, to_http_exception
from alumni_portal.modules.notifications import service
from alumni_portal.modules.notifications.schemas import (
    NotificationPreferenceResponse,
    NotificationPreferenceUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=NotificationPreferenceResponse, summary="Get My Preferences")
async def get_preferences(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> NotificationPreferenceResponse:
    try:
        preferences = await service.get_preferences(db, principal)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return NotificationPreferenceResponse.model_validate(preferences)


@router.put("", response_model=NotificationPreferenceResponse, summary="Update My Preferences")
async def update_preferences(
    data: NotificationPreferenceUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> NotificationPreferenceResponse:
    try:
        preferences = await service.update_preferences(db, principal, data)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return NotificationPreferenceResponse.model_validate(preferences)
