"""
Event Router

Endpoints:
- GET    /events - List events (public)
- POST   /events - Create an event (registered alumni)
- GET    /events/{id} - Event detail (public)
- PUT    /events/{id} - Update (organizer or admin)
- DELETE /events/{id} - Delete (organizer or admin)
- POST   /events/{id}/register - Register (registered alumni)
- GET    /events/{id}/registrations - Registrations (organizer or admin)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from alumni_portal.core.auth import Principal, get_current_principal, get_optional_principal
from alumni_portal.core.database import get_db
from alumni_portal.core.exceptions import ServiceError, to_http_exception
from alumni_portal.modules.events import service
from alumni_portal.modules.events.helpers import to_event_response, to_registration_response
from alumni_portal.modules.events.schemas import (
    EventCreate,
    EventRegistrationResponse,
    EventResponse,
    EventUpdate,
    RegisterResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _internal_error(e: Exception, action: str) -> HTTPException:
    logger.exception(f"Error {action}: {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )


@router.get("", response_model=list[EventResponse], summary="List Events")
async def list_events(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
    principal: Principal | None = Depends(get_optional_principal),
) -> list[EventResponse]:
    try:
        events = await service.list_events(db, principal, skip=skip, limit=limit)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return [to_event_response(event, count) for event, count in events]


@router.post(
    "",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Event",
    responses={403: {"description": "Only registered alumni can create events"}},
)
async def create_event(
    data: EventCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> EventResponse:
    try:
        event = await service.create_event(db, principal, data)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise _internal_error(e, "creating event") from e
    return to_event_response(event)


@router.get(
    "/{event_id}",
    response_model=EventResponse,
    summary="Get Event",
    responses={404: {"description": "Event not found"}},
)
async def get_event(
    event_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal | None = Depends(get_optional_principal),
) -> EventResponse:
    try:
        event, count = await service.get_event(db, principal, event_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return to_event_response(event, count)


@router.put(
    "/{event_id}",
    response_model=EventResponse,
    summary="Update Event",
    responses={
        403: {"description": "Not the organizer"},
        404: {"description": "Event not found"},
    },
)
async def update_event(
    event_id: UUID,
    data: EventUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> EventResponse:
    try:
        event = await service.update_event(db, principal, event_id, data)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise _internal_error(e, f"updating event {event_id}") from e
    return to_event_response(event)


@router.delete(
    "/{event_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Event",
    responses={
        403: {"description": "Not the organizer"},
        404: {"description": "Event not found"},
    },
)
async def delete_event(
    event_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> None:
    try:
        await service.delete_event(db, principal, event_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise _internal_error(e, f"deleting event {event_id}") from e


@router.post(
    "/{event_id}/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register For Event",
    description="""
Register the caller for an event. Requires `registered_alumni`.

A confirmation email is sent unless the caller turned off event
notifications; `email_sent` reports the outcome.
""",
    responses={
        403: {"description": "Only registered alumni can register"},
        404: {"description": "Event not found"},
        409: {"description": "Already registered"},
    },
)
async def register_for_event(
    event_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> RegisterResponse:
    try:
        result = await service.register(db, principal, event_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise _internal_error(e, f"registering for event {event_id}") from e

    return RegisterResponse(
        registration=to_registration_response(result.registration),
        email_sent=result.email_sent,
        message="Registered for event.",
    )


@router.get(
    "/{event_id}/registrations",
    response_model=list[EventRegistrationResponse],
    summary="List Registrations",
    responses={
        403: {"description": "Not the organizer"},
        404: {"description": "Event not found"},
    },
)
async def list_registrations(
    event_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> list[EventRegistrationResponse]:
    try:
        registrations = await service.list_registrations(db, principal, event_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return [to_registration_response(r) for r in registrations]
