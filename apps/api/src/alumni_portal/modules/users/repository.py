"""
User Repository

Database operations for user accounts. Methods flush rather than commit so
callers can compose them into a single transaction.
"""

import logging
from uuid import UUID

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from alumni_portal.modules.users.models import User, UserRole

logger = logging.getLogger(__name__)

# Roles an approval promotes from. Administrators are never demoted.
PROMOTABLE_ROLES = (UserRole.VISITOR, UserRole.APPLIED_ALUMNI)

CONTACT_FIELDS = ("email", "address", "city", "country", "mobile")


class UserRepository:
    """Repository for user database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        username: str,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        role: UserRole = UserRole.APPLIED_ALUMNI,
        school_id: UUID | None = None,
        **contact,
    ) -> User:
        """
        Create a new user record.

        Args:
            db: Database session
            username: Unique login name
            email: Unique email address
            password_hash: bcrypt hash
            first_name: User's first name
            last_name: User's last name
            role: Initial role (registration always uses APPLIED_ALUMNI)
            school_id: Optional school affiliation
            **contact: address, city, country, zipcode, mobile, birth_date

        Returns:
            Created User instance
        """
        user = User(
            username=username,
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            role=role,
            school_id=school_id,
            **contact,
        )

        db.add(user)
        await db.flush()
        await db.refresh(user)

        logger.info(f"Created user: {user.id} - {user.username} ({user.role.value})")
        return user

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: UUID) -> User | None:
        return await db.get(User, user_id)

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_username(db: AsyncSession, username: str) -> User | None:
        result = await db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_login(db: AsyncSession, login: str) -> User | None:
        """Look a user up by username or email."""
        result = await db.execute(
            select(User).where(or_(User.username == login, User.email == login.lower()))
        )
        return result.scalars().first()

    @staticmethod
    async def username_or_email_exists(db: AsyncSession, username: str, email: str) -> bool:
        """
        Check whether either identifier is already registered.

        Args:
            db: Database session
            username: Username to check
            email: Email address to check

        Returns:
            True if a user holds the username or the email
        """
        result = await db.execute(
            select(User.id).where(or_(User.username == username, User.email == email)).limit(1)
        )
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def update_contact_fields(db: AsyncSession, user: User, **fields) -> User:
        """Apply the self-editable contact fields; unknown keys are ignored."""
        for key, value in fields.items():
            if key in CONTACT_FIELDS and value is not None:
                setattr(user, key, value)
        await db.flush()
        return user

    @staticmethod
    async def promote_to_registered_alumni(db: AsyncSession, user_id: UUID) -> bool:
        """
        Promote a user to REGISTERED_ALUMNI inside the caller's transaction.

        A conditional UPDATE, so it is a no-op for users who are already
        registered alumni or administrators.

        Returns:
            True if the role changed
        """
        result = await db.execute(
            update(User)
            .where(User.id == user_id, User.role.in_(PROMOTABLE_ROLES))
            .values(role=UserRole.REGISTERED_ALUMNI)
        )
        promoted = result.rowcount > 0
        if promoted:
            logger.info(f"Promoted user {user_id} to {UserRole.REGISTERED_ALUMNI.value}")
        return promoted

    @staticmethod
    async def list_registered_alumni(
        db: AsyncSession,
        *,
        exclude_id: UUID | None = None,
    ) -> list[User]:
        """List registered alumni ordered by name, for messaging contacts."""
        query = select(User).where(
            User.role == UserRole.REGISTERED_ALUMNI,
            User.is_active == True,  # noqa: E712
        )
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)
        query = query.order_by(User.last_name, User.first_name)

        result = await db.execute(query)
        return list(result.scalars().all())
