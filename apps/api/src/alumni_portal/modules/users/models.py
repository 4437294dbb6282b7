"""
User Models

Identity records for everyone who can sign in to the portal.
"""

import uuid
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import ENUM, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from alumni_portal.modules.shared import BaseModel

if TYPE_CHECKING:
    from alumni_portal.modules.schools.models import School


class UserRole(str, Enum):
    """
    Closed set of portal roles.

    ``applied_alumni`` is assigned at registration and becomes
    ``registered_alumni`` when an administrator approves the user's profile.
    """

    VISITOR = "visitor"
    APPLIED_ALUMNI = "applied_alumni"
    REGISTERED_ALUMNI = "registered_alumni"
    ADMINISTRATIVE = "administrative"


class User(BaseModel):
    """User account used for authentication and authorization."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        index=True,
        nullable=False,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    role: Mapped[UserRole] = mapped_column(
        ENUM(UserRole, name="user_role", create_type=True, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=UserRole.APPLIED_ALUMNI,
    )

    # ON DELETE SET NULL: users outlive a removed school
    school_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("schools.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Contact details
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    country: Mapped[str | None] = mapped_column(String(100), nullable=True)
    zipcode: Mapped[str | None] = mapped_column(String(20), nullable=True)
    mobile: Mapped[str | None] = mapped_column(String(30), nullable=True)
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    school: Mapped["School | None"] = relationship(
        "School",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username}, role={self.role.value})>"

    @property
    def full_name(self) -> str:
        """Return user's full name."""
        return f"{self.first_name} {self.last_name}"
