"""Event schemas."""

from datetime import date, datetime, time
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator


class EventBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=10000)
    event_date: date
    start_time: time | None = None
    end_time: time | None = None
    location: str | None = Field(None, max_length=255)
    is_virtual: bool = False
    meeting_link: str | None = Field(None, max_length=500)


class EventCreate(EventBase):
    @model_validator(mode="after")
    def check_times(self) -> "EventCreate":
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class EventUpdate(BaseModel):
    """Partial update; only provided fields change."""

    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=10000)
    event_date: date | None = None
    start_time: time | None = None
    end_time: time | None = None
    location: str | None = Field(None, max_length=255)
    is_virtual: bool | None = None
    meeting_link: str | None = Field(None, max_length=500)


class EventResponse(EventBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    organizer_id: UUID
    organizer_name: str | None = None
    registration_count: int = 0
    created_at: datetime
    updated_at: datetime


class EventRegistrationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    event_id: UUID
    alumni_id: UUID
    alumni_name: str | None = None
    alumni_email: str | None = None
    created_at: datetime


class RegisterResponse(BaseModel):
    registration: EventRegistrationResponse
    email_sent: bool
    message: str
