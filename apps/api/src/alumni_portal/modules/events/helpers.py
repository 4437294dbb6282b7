"""Model-to-schema conversion for events."""

from alumni_portal.modules.events.models import Event, EventRegistration
from alumni_portal.modules.events.schemas import EventRegistrationResponse, EventResponse


def to_event_response(event: Event, registration_count: int = 0) -> EventResponse:
    organizer = event.organizer
    return EventResponse(
        id=event.id,
        organizer_id=event.organizer_id,
        organizer_name=organizer.full_name if organizer is not None else None,
        title=event.title,
        description=event.description,
        event_date=event.event_date,
        start_time=event.start_time,
        end_time=event.end_time,
        location=event.location,
        is_virtual=event.is_virtual,
        meeting_link=event.meeting_link,
        registration_count=registration_count,
        created_at=event.created_at,
        updated_at=event.updated_at,
    )


def to_registration_response(registration: EventRegistration) -> EventRegistrationResponse:
    alumnus = registration.alumnus
    return EventRegistrationResponse(
        id=registration.id,
        event_id=registration.event_id,
        alumni_id=registration.alumni_id,
        alumni_name=alumnus.full_name if alumnus is not None else None,
        alumni_email=alumnus.email if alumnus is not None else None,
        created_at=registration.created_at,
    )
