"""School database operations."""

from sqlalchemy import asc, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import School


async def list_schools(db: AsyncSession) -> list[School]:
    """All schools ordered by name."""
    result = await db.execute(select(School).order_by(asc(School.name)))
    return list(result.scalars().all())
