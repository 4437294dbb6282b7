"""
Event Service Layer

Event management and registration. Registered alumni organize events and
register for them; organizers and administrators manage them.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from alumni_portal.core.email import EmailTemplate, dispatch_notification
from alumni_portal.core.exceptions import ConflictError, NotFoundError, ServiceError
from alumni_portal.core.policy import Action, enforce
from alumni_portal.modules.events import repository
from alumni_portal.modules.events.models import Event, EventRegistration
from alumni_portal.modules.events.schemas import EventCreate, EventUpdate
from alumni_portal.modules.notifications.service import should_notify

if TYPE_CHECKING:
    from alumni_portal.core.auth import Principal

logger = logging.getLogger(__name__)


class EventNotFoundError(NotFoundError):
    def __init__(self, event_id: UUID):
        super().__init__(message=f"Event {event_id} not found", error_code="EVENT_NOT_FOUND")


class AlreadyRegisteredError(ConflictError):
    def __init__(self):
        super().__init__(
            message="You are already registered for this event.",
            error_code="ALREADY_REGISTERED",
        )


class InvalidEventTimesError(ServiceError):
    def __init__(self):
        super().__init__(
            message="end_time must be after start_time.",
            error_code="INVALID_EVENT_TIMES",
            status_code=422,
        )


@dataclass
class RegistrationResult:
    registration: EventRegistration
    email_sent: bool


async def _get_event_or_404(db: AsyncSession, event_id: UUID) -> Event:
    event = await repository.get_event(db, event_id)
    if event is None:
        raise EventNotFoundError(event_id)
    return event


async def list_events(
    db: AsyncSession,
    viewer: "Principal | None",
    *,
    skip: int = 0,
    limit: int = 50,
) -> list[tuple[Event, int]]:
    """Events by date and start time, each with its registration count."""
    enforce(viewer, Action.EVENT_LIST)

    events = await repository.list_events(db, skip=skip, limit=limit)
    counts = await repository.registration_counts(db, [event.id for event in events])
    return [(event, counts.get(event.id, 0)) for event in events]


async def get_event(db: AsyncSession, viewer: "Principal | None", event_id: UUID) -> tuple[Event, int]:
    enforce(viewer, Action.EVENT_VIEW)

    event = await _get_event_or_404(db, event_id)
    counts = await repository.registration_counts(db, [event.id])
    return event, counts.get(event.id, 0)


async def create_event(db: AsyncSession, principal: "Principal", data: EventCreate) -> Event:
    enforce(principal, Action.EVENT_CREATE)

    event = await repository.create_event(db, principal.id, data.model_dump())
    await db.commit()

    logger.info(f"User {principal.id} created event {event.id}: {event.title}")
    return event


async def update_event(
    db: AsyncSession,
    principal: "Principal",
    event_id: UUID,
    data: EventUpdate,
) -> Event:
    """
    Update an event. Organizer or admin.

    Raises:
        EventNotFoundError: If the event doesn't exist
        ForbiddenError: If the principal is neither organizer nor admin
        InvalidEventTimesError: If the resulting end time is not after the start time
    """
    event = await _get_event_or_404(db, event_id)
    enforce(principal, Action.EVENT_UPDATE, event)

    values = data.model_dump(exclude_unset=True)
    start_time = values.get("start_time", event.start_time)
    end_time = values.get("end_time", event.end_time)
    if start_time and end_time and end_time <= start_time:
        raise InvalidEventTimesError()

    await repository.update_event(db, event, values)
    await db.commit()

    logger.info(f"Event {event_id} updated by {principal.id}")
    return event


async def delete_event(db: AsyncSession, principal: "Principal", event_id: UUID) -> None:
    event = await _get_event_or_404(db, event_id)
    enforce(principal, Action.EVENT_DELETE, event)

    await repository.delete_event(db, event)
    await db.commit()

    logger.info(f"Event {event_id} deleted by {principal.id}")


async def _notify_registrant(db: AsyncSession, principal: "Principal", event: Event) -> bool:
    """Send the registration confirmation. Never raises."""
    try:
        if not await should_notify(db, principal.id, "event_notifications"):
            return False

        result = await dispatch_notification(
            EmailTemplate.EVENT_REGISTRATION,
            principal.email,
            {
                "name": principal.name,
                "event_title": event.title,
                "event_date": event.event_date,
                "start_time": event.start_time,
                "location": event.location,
                "meeting_link": event.meeting_link if event.is_virtual else None,
            },
        )
        return result.success
    except Exception as e:
        logger.error(f"Failed to send registration email for event {event.id}: {e}", exc_info=True)
        return False


async def register(db: AsyncSession, principal: "Principal", event_id: UUID) -> RegistrationResult:
    """
    Register the caller for an event.

    The unique (event_id, alumni_id) constraint is the duplicate check.

    Raises:
        ForbiddenError: If the principal is not registered alumni
        EventNotFoundError: If the event doesn't exist
        AlreadyRegisteredError: If the caller is already registered
    """
    enforce(principal, Action.EVENT_REGISTER)

    event = await _get_event_or_404(db, event_id)

    try:
        registration = await repository.create_registration(db, event_id, principal.id)
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.info(f"User {principal.id} already registered for event {event_id}")
        raise AlreadyRegisteredError() from e

    logger.info(f"User {principal.id} registered for event {event_id}")

    email_sent = await _notify_registrant(db, principal, event)
    return RegistrationResult(registration=registration, email_sent=email_sent)


async def list_registrations(
    db: AsyncSession,
    principal: "Principal",
    event_id: UUID,
) -> list[EventRegistration]:
    """Registrations for an event. Organizer or admin."""
    event = await _get_event_or_404(db, event_id)
    enforce(principal, Action.EVENT_REGISTRATIONS_VIEW, event)
    return await repository.list_registrations(db, event_id)
