"""
Job Board Schemas

Pydantic schemas for job postings and applications.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from alumni_portal.modules.jobs.models import ApplicationStatus


class JobPostingBase(BaseModel):
    company_name: str = Field(..., min_length=1, max_length=200)
    job_title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=10000)
    requirements: str | None = Field(None, max_length=5000)
    location: str | None = Field(None, max_length=200)
    is_remote: bool = False
    application_link: str | None = Field(None, max_length=500)
    contact_email: EmailStr | None = None
    expires_at: date | None = None


class JobPostingCreate(JobPostingBase):
    """Request body for creating a job posting."""


class JobPostingUpdate(BaseModel):
    """Partial update; only provided fields change."""

    company_name: str | None = Field(None, min_length=1, max_length=200)
    job_title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, min_length=1, max_length=10000)
    requirements: str | None = Field(None, max_length=5000)
    location: str | None = Field(None, max_length=200)
    is_remote: bool | None = None
    application_link: str | None = Field(None, max_length=500)
    contact_email: EmailStr | None = None
    expires_at: date | None = None


class JobPostingResponse(JobPostingBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    alumni_id: UUID
    poster_name: str | None = None
    contact_email: str | None = None
    pending_applications: int | None = Field(
        None,
        description="Submitted applications awaiting a decision; only shown to the poster",
    )
    created_at: datetime
    updated_at: datetime


class JobApplicationCreate(BaseModel):
    """Request body for applying to a job."""

    cover_letter: str | None = Field(None, max_length=5000)
    resume_url: str | None = Field(None, max_length=500)


class JobApplicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    job_id: UUID
    job_title: str | None = None
    company_name: str | None = None
    applicant_id: UUID
    applicant_name: str | None = None
    applicant_email: str | None = None
    cover_letter: str | None = None
    resume_url: str | None = None
    status: ApplicationStatus
    decided_by: UUID | None = None
    decided_at: datetime | None = None
    created_at: datetime


class JobApplicationListResponse(BaseModel):
    """Paginated list of applications."""

    applications: list[JobApplicationResponse]
    total: int
    skip: int
    limit: int


class ApplyResponse(BaseModel):
    application: JobApplicationResponse
    email_sent: bool
    message: str


class HasAppliedResponse(BaseModel):
    has_applied: bool
    status: ApplicationStatus | None = None


class PendingCountResponse(BaseModel):
    pending_count: int
