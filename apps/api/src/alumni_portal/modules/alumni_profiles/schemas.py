"""
Alumni Profile Schemas

Pydantic schemas for profile submission, review and the directory.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from alumni_portal.modules.alumni_profiles.models import ProfileStatus
from alumni_portal.modules.users.models import UserRole

PROFILE_FIELDS = (
    "school_id",
    "graduation_year",
    "degree_earned",
    "study_program",
    "current_job_title",
    "current_company",
    "employment_history",
    "bio",
    "linkedin",
    "profile_image",
)

CONTACT_FIELDS = ("email", "address", "city", "country", "mobile")


class ProfileFields(BaseModel):
    """Fields an owner may set on their profile. Status is never accepted."""

    school_id: UUID | None = None
    graduation_year: int | None = Field(None, ge=1900, le=2100)
    degree_earned: str | None = Field(None, max_length=150)
    study_program: str | None = Field(None, max_length=150)
    current_job_title: str | None = Field(None, max_length=150)
    current_company: str | None = Field(None, max_length=150)
    employment_history: str | None = Field(None, max_length=5000)
    bio: str | None = Field(None, max_length=2000)
    linkedin: str | None = Field(None, max_length=255)
    profile_image: str | None = Field(None, max_length=500)

    def profile_values(self) -> dict:
        """Explicitly provided profile fields."""
        return self.model_dump(include=set(PROFILE_FIELDS), exclude_unset=True)


class ProfileSubmitRequest(ProfileFields):
    """Request body for a first profile submission."""


class ProfileUpdateRequest(ProfileFields):
    """Request body for editing one's own profile, including contact details."""

    email: EmailStr | None = None
    address: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    country: str | None = Field(None, max_length=100)
    mobile: str | None = Field(None, max_length=30)

    def contact_values(self) -> dict:
        """Explicitly provided, non-null contact fields."""
        return self.model_dump(include=set(CONTACT_FIELDS), exclude_unset=True, exclude_none=True)


class ProfileResponse(BaseModel):
    """Full profile view (owner, administrators, or approved profiles)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    name: str
    email: str | None = None
    mobile: str | None = None
    city: str | None = None
    country: str | None = None
    school_id: UUID | None = None
    school_name: str | None = None
    graduation_year: int | None = None
    degree_earned: str | None = None
    study_program: str | None = None
    current_job_title: str | None = None
    current_company: str | None = None
    employment_history: str | None = None
    bio: str | None = None
    linkedin: str | None = None
    profile_image: str | None = None
    status: ProfileStatus
    admin_comment: str | None = None
    reviewed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class RedactedProfileResponse(BaseModel):
    """Public subset shown to other users while a profile is not approved."""

    name: str
    school: str | None = None
    graduation_year: int | None = None
    degree: str | None = None
    status: ProfileStatus


class ProfileDecisionRequest(BaseModel):
    """Request body for approving or rejecting a profile."""

    comment: str | None = Field(
        None,
        max_length=1000,
        description="Comment recorded on the profile and included in the email",
        json_schema_extra={"example": "Graduation record verified with the registrar."},
    )
    notify: bool = Field(True, description="Email the profile owner about the decision")


class ProfileDecisionResponse(BaseModel):
    """Response after a profile decision."""

    profile: ProfileResponse
    status: ProfileStatus
    user_role: UserRole | None = None
    email_sent: bool = Field(..., description="Whether the notification email was delivered")
    email_opted_out: bool = Field(
        False, description="The owner turned off profile update emails, so none was sent"
    )
    message: str


class ProfileListResponse(BaseModel):
    """Paginated administrator listing."""

    profiles: list[ProfileResponse]
    total: int
    skip: int
    limit: int


class DirectoryEntry(BaseModel):
    """One approved alumnus in the public directory."""

    user_id: UUID
    first_name: str
    last_name: str
    degree_earned: str | None = None
    graduation_year: int | None = None
    current_job_title: str | None = None
    current_company: str | None = None
    linkedin: str | None = None


class DirectorySchoolGroup(BaseModel):
    school_id: UUID | None = None
    school_name: str
    alumni: list[DirectoryEntry]


class DirectoryResponse(BaseModel):
    schools: list[DirectorySchoolGroup]
    total: int


class ContactResponse(BaseModel):
    """A registered alumnus the caller can message."""

    id: UUID
    username: str
    name: str
    school_name: str | None = None
