"""
School Models

Schools alumni graduated from. Profiles and users reference a school for
directory grouping.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from alumni_portal.modules.shared import BaseModel


class School(BaseModel):
    """A school or faculty of the university."""

    __tablename__ = "schools"

    name: Mapped[str] = mapped_column(
        String(200),
        unique=True,
        nullable=False,
        index=True,
    )
    code: Mapped[str | None] = mapped_column(String(20), nullable=True)

    def __repr__(self) -> str:
        return f"<School(id={self.id}, name={self.name})>"
