"""
Alumni Profile Models

One profile per user. A profile moves through the approval workflow
(pending -> approved | rejected); approval promotes the owner's role.
"""

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from alumni_portal.modules.shared import BaseModel

if TYPE_CHECKING:
    from alumni_portal.modules.schools.models import School
    from alumni_portal.modules.users.models import User


class ProfileStatus(str, enum.Enum):
    """Review status of an alumni profile."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ProfileDecision(str, enum.Enum):
    """Administrator decision on a pending profile."""

    APPROVE = "approve"
    REJECT = "reject"


class AlumniProfile(BaseModel):
    """Alumni profile submitted by a user and reviewed by administrators."""

    __tablename__ = "alumni_profiles"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    school_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("schools.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Education
    graduation_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    degree_earned: Mapped[str | None] = mapped_column(String(150), nullable=True)
    study_program: Mapped[str | None] = mapped_column(String(150), nullable=True)

    # Employment
    current_job_title: Mapped[str | None] = mapped_column(String(150), nullable=True)
    current_company: Mapped[str | None] = mapped_column(String(150), nullable=True)
    employment_history: Mapped[str | None] = mapped_column(Text, nullable=True)

    # About
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    linkedin: Mapped[str | None] = mapped_column(String(255), nullable=True)
    profile_image: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Review
    status: Mapped[ProfileStatus] = mapped_column(
        Enum(
            ProfileStatus,
            name="profile_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=ProfileStatus.PENDING,
    )
    admin_comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    reviewed_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    user: Mapped["User"] = relationship(
        "User",
        foreign_keys=[user_id],
        lazy="selectin",
    )
    school: Mapped["School | None"] = relationship(
        "School",
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_alumni_profiles_status", "status"),
        Index("ix_alumni_profiles_school_id", "school_id"),
    )

    def __repr__(self) -> str:
        return f"<AlumniProfile(id={self.id}, user_id={self.user_id}, status={self.status.value})>"
