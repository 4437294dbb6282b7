"""
Event Models

Events organized by registered alumni and the registrations for them.
"""

import uuid
from datetime import date, time
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, ForeignKey, Index, String, Text, Time, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from alumni_portal.modules.shared import BaseModel

if TYPE_CHECKING:
    from alumni_portal.modules.users.models import User


class Event(BaseModel):
    """An alumni event, in person or virtual."""

    __tablename__ = "events"

    organizer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    event_date: Mapped[date] = mapped_column(Date, nullable=False)
    start_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    end_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_virtual: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    meeting_link: Mapped[str | None] = mapped_column(String(500), nullable=True)

    organizer: Mapped["User"] = relationship("User", lazy="selectin")

    __table_args__ = (
        Index("ix_events_event_date", "event_date"),
        Index("ix_events_organizer_id", "organizer_id"),
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title={self.title}, event_date={self.event_date})>"


class EventRegistration(BaseModel):
    """An alumnus registered for an event. Unique per (event, alumnus)."""

    __tablename__ = "event_registrations"

    event_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
    )
    alumni_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    alumnus: Mapped["User"] = relationship("User", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("event_id", "alumni_id", name="uq_event_registrations_event_alumni"),
    )

    def __repr__(self) -> str:
        return f"<EventRegistration(event_id={self.event_id}, alumni_id={self.alumni_id})>"
