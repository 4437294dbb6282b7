"""
Event Repository

Database operations for events and registrations. Functions flush but never
commit.
"""

from uuid import UUID

from sqlalchemy import asc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Event, EventRegistration


async def create_event(db: AsyncSession, organizer_id: UUID, values: dict) -> Event:
    event = Event(organizer_id=organizer_id, **values)

    db.add(event)
    await db.flush()
    await db.refresh(event)

    return event


async def get_event(db: AsyncSession, event_id: UUID) -> Event | None:
    return await db.get(Event, event_id)


async def list_events(db: AsyncSession, *, skip: int = 0, limit: int = 50) -> list[Event]:
    """Events ordered by date, then start time."""
    result = await db.execute(
        select(Event)
        .order_by(asc(Event.event_date), asc(Event.start_time))
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all())


async def update_event(db: AsyncSession, event: Event, values: dict) -> Event:
    for key, value in values.items():
        if key not in ("id", "organizer_id") and hasattr(event, key):
            setattr(event, key, value)

    await db.flush()
    return event


async def delete_event(db: AsyncSession, event: Event) -> None:
    await db.delete(event)
    await db.flush()


async def create_registration(db: AsyncSession, event_id: UUID, alumni_id: UUID) -> EventRegistration:
    """
    Register ``alumni_id`` for ``event_id``.

    Raises:
        IntegrityError: If the pair is already registered
    """
    registration = EventRegistration(event_id=event_id, alumni_id=alumni_id)

    db.add(registration)
    await db.flush()
    await db.refresh(registration)

    return registration


async def list_registrations(db: AsyncSession, event_id: UUID) -> list[EventRegistration]:
    result = await db.execute(
        select(EventRegistration)
        .where(EventRegistration.event_id == event_id)
        .order_by(asc(EventRegistration.created_at))
    )
    return list(result.scalars().all())


async def registration_counts(db: AsyncSession, event_ids: list[UUID]) -> dict[UUID, int]:
    if not event_ids:
        return {}

    result = await db.execute(
        select(EventRegistration.event_id, func.count(EventRegistration.id))
        .where(EventRegistration.event_id.in_(event_ids))
        .group_by(EventRegistration.event_id)
    )
    return {event_id: count for event_id, count in result.all()}
