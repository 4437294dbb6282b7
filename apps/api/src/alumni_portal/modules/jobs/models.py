"""
Job Board Models

Job postings owned by registered alumni and the applications submitted to
them. An application is unique per (job, applicant) at the database level.
"""

import enum
import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from alumni_portal.modules.shared import BaseModel

if TYPE_CHECKING:
    from alumni_portal.modules.users.models import User


class ApplicationStatus(str, enum.Enum):
    """Job application status. ACCEPTED and REJECTED are terminal."""

    SUBMITTED = "submitted"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class ApplicationDecision(str, enum.Enum):
    ACCEPT = "accept"
    REJECT = "reject"


class JobPosting(BaseModel):
    """A job posted by a registered alumnus."""

    __tablename__ = "job_postings"

    alumni_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    company_name: Mapped[str] = mapped_column(String(200), nullable=False)
    job_title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    requirements: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    is_remote: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    application_link: Mapped[str | None] = mapped_column(String(500), nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    expires_at: Mapped[date | None] = mapped_column(Date, nullable=True)

    poster: Mapped["User"] = relationship("User", lazy="selectin")

    __table_args__ = (
        Index("ix_job_postings_alumni_id", "alumni_id"),
        Index("ix_job_postings_expires_at", "expires_at"),
    )

    def is_expired(self, today: date | None = None) -> bool:
        """Whether the posting's expiry date has passed."""
        if self.expires_at is None:
            return False
        return self.expires_at < (today or date.today())

    def __repr__(self) -> str:
        return f"<JobPosting(id={self.id}, job_title={self.job_title})>"


class JobApplication(BaseModel):
    """An alumnus's application to a job posting."""

    __tablename__ = "job_applications"

    job_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("job_postings.id", ondelete="CASCADE"),
        nullable=False,
    )
    applicant_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    cover_letter: Mapped[str | None] = mapped_column(Text, nullable=True)
    resume_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    status: Mapped[ApplicationStatus] = mapped_column(
        Enum(
            ApplicationStatus,
            name="application_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=ApplicationStatus.SUBMITTED,
    )
    decided_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    decided_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    job: Mapped["JobPosting"] = relationship("JobPosting", lazy="selectin")
    applicant: Mapped["User"] = relationship(
        "User",
        foreign_keys=[applicant_id],
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("job_id", "applicant_id", name="uq_job_applications_job_applicant"),
        Index("ix_job_applications_status", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<JobApplication(id={self.id}, job_id={self.job_id}, "
            f"applicant_id={self.applicant_id}, status={self.status.value})>"
        )
