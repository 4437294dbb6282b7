"""Authentication schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from alumni_portal.modules.users.models import UserRole


class RegisterRequest(BaseModel):
    """Registration request schema. New accounts start as applied alumni."""

    username: str = Field(..., min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    school_id: UUID | None = None
    address: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    country: str | None = Field(None, max_length=100)
    zipcode: str | None = Field(None, max_length=20)
    mobile: str | None = Field(None, max_length=30)
    birth_date: date | None = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class LoginRequest(BaseModel):
    """Login request schema. ``login`` is a username or an email address."""

    login: str = Field(..., min_length=1, max_length=255)
    password: str


class UserResponse(BaseModel):
    """User response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    email: str
    first_name: str
    last_name: str
    role: UserRole
    school_id: UUID | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None
    zipcode: str | None = None
    mobile: str | None = None
    birth_date: date | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class LoginResponse(BaseModel):
    """Login response schema."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse
