"""
Alumni Profile Repository

Database operations for alumni profiles. Functions flush but never commit;
the service owns the transaction boundary so a decision and the owner's role
promotion commit together.
"""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import asc, desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from alumni_portal.modules.users.models import User

from .models import AlumniProfile, ProfileStatus

# Profile review state machine. REJECTED -> PENDING happens only through an
# owner's self-edit; the administrator decision path only leaves PENDING.
VALID_STATUS_TRANSITIONS: dict[ProfileStatus, set[ProfileStatus]] = {
    ProfileStatus.PENDING: {
        ProfileStatus.APPROVED,
        ProfileStatus.REJECTED,
    },
    ProfileStatus.REJECTED: {
        ProfileStatus.PENDING,  # Resubmitted by the owner
    },
    ProfileStatus.APPROVED: set(),
}


class InvalidStatusTransitionError(ValueError):
    """Raised when an invalid status transition is attempted."""

    def __init__(self, current_status: ProfileStatus, new_status: ProfileStatus):
        self.current_status = current_status
        self.new_status = new_status
        valid_transitions = VALID_STATUS_TRANSITIONS.get(current_status, set())
        super().__init__(
            f"Invalid status transition: {current_status.value} -> {new_status.value}. "
            f"Valid transitions: {sorted(s.value for s in valid_transitions)}"
        )


async def create(db: AsyncSession, user_id: UUID, values: dict) -> AlumniProfile:
    """Create a PENDING profile for ``user_id``."""
    profile = AlumniProfile(user_id=user_id, status=ProfileStatus.PENDING, **values)

    db.add(profile)
    await db.flush()
    await db.refresh(profile)

    return profile


async def get_by_id(db: AsyncSession, id: UUID) -> AlumniProfile | None:
    """Get profile by ID."""
    return await db.get(AlumniProfile, id)


async def get_by_id_for_update(db: AsyncSession, id: UUID) -> AlumniProfile | None:
    """
    Get a profile and lock its row until the transaction ends.

    Concurrent decisions on the same profile serialize on this lock; the
    second one sees the first one's committed status.
    """
    result = await db.execute(
        select(AlumniProfile)
        .where(AlumniProfile.id == id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_by_user_id(db: AsyncSession, user_id: UUID) -> AlumniProfile | None:
    result = await db.execute(select(AlumniProfile).where(AlumniProfile.user_id == user_id))
    return result.scalar_one_or_none()


async def get_by_user_id_for_update(db: AsyncSession, user_id: UUID) -> AlumniProfile | None:
    """
    Get the user's profile and lock its row until the transaction ends.

    Owner edits and administrator decisions serialize on this lock, so the
    self-edit status rule is applied to the committed status.
    """
    result = await db.execute(
        select(AlumniProfile)
        .where(AlumniProfile.user_id == user_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def update_fields(db: AsyncSession, profile: AlumniProfile, values: dict) -> AlumniProfile:
    """Apply owner-editable fields. Status is not touched here."""
    for key, value in values.items():
        if key != "status" and hasattr(profile, key):
            setattr(profile, key, value)

    await db.flush()
    return profile


async def update_status(
    db: AsyncSession,
    profile: AlumniProfile,
    status: ProfileStatus,
    **kwargs,
) -> AlumniProfile:
    """
    Move a profile to ``status`` and set optional review fields.

    Setting the current status again is allowed and only updates kwargs.

    Raises:
        InvalidStatusTransitionError: If the transition is not allowed
    """
    current_status = profile.status
    valid_transitions = VALID_STATUS_TRANSITIONS.get(current_status, set())

    if status != current_status and status not in valid_transitions:
        raise InvalidStatusTransitionError(current_status, status)

    profile.status = status

    for key, value in kwargs.items():
        if hasattr(profile, key):
            setattr(profile, key, value)

    await db.flush()
    return profile


async def apply_decision(
    db: AsyncSession,
    profile: AlumniProfile,
    status: ProfileStatus,
    *,
    admin_comment: str | None,
    reviewed_by: UUID,
) -> AlumniProfile:
    """Record an administrator decision on a locked profile."""
    return await update_status(
        db,
        profile,
        status,
        admin_comment=admin_comment,
        reviewed_by=reviewed_by,
        reviewed_at=datetime.now(UTC),
    )


async def get_profiles_for_admin(
    db: AsyncSession,
    *,
    status: ProfileStatus | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[AlumniProfile], int]:
    """
    List profiles for the review queue, newest first.

    Args:
        db: Database session
        status: Filter by review status (optional)
        search: Case-insensitive match on the owner's name, username or email
        skip: Records to skip
        limit: Maximum records to return

    Returns:
        Tuple of (profiles, total matching filters)
    """
    query = select(AlumniProfile)

    if status:
        query = query.where(AlumniProfile.status == status)

    if search:
        pattern = f"%{search}%"
        query = query.join(User, User.id == AlumniProfile.user_id).where(
            or_(
                User.first_name.ilike(pattern),
                User.last_name.ilike(pattern),
                User.username.ilike(pattern),
                User.email.ilike(pattern),
            )
        )

    total_result = await db.execute(select(func.count()).select_from(query.subquery()))
    total = total_result.scalar() or 0

    query = query.order_by(desc(AlumniProfile.created_at)).offset(skip).limit(limit)
    result = await db.execute(query)

    return list(result.scalars().all()), total


async def get_approved_profiles(db: AsyncSession) -> list[AlumniProfile]:
    """All approved profiles ordered by graduation year, for the directory."""
    result = await db.execute(
        select(AlumniProfile)
        .where(AlumniProfile.status == ProfileStatus.APPROVED)
        .order_by(desc(AlumniProfile.graduation_year), asc(AlumniProfile.created_at))
    )
    return list(result.scalars().all())
