"""
Seed Administrator User

Creates the initial administrative account for the alumni portal.
Run this script once to set up the admin account.

Credentials are read from the environment:
    SEED_ADMIN_USERNAME, SEED_ADMIN_EMAIL, SEED_ADMIN_PASSWORD,
    SEED_ADMIN_FIRST_NAME (optional), SEED_ADMIN_LAST_NAME (optional)

Usage:
    cd apps/api
    python scripts/seed_admin.py
"""

import asyncio
import os
import sys
from pathlib import Path

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

import alumni_portal.modules.models  # noqa: F401 - needed for relationship resolution
from alumni_portal.core.config import settings
from alumni_portal.core.security import hash_password
from alumni_portal.modules.users.models import User, UserRole


async def seed_admin() -> None:
    """Create the administrator if neither username nor email is taken."""
    username = os.environ.get("SEED_ADMIN_USERNAME")
    email = os.environ.get("SEED_ADMIN_EMAIL")
    password = os.environ.get("SEED_ADMIN_PASSWORD")
    first_name = os.environ.get("SEED_ADMIN_FIRST_NAME", "Portal")
    last_name = os.environ.get("SEED_ADMIN_LAST_NAME", "Administrator")

    if not (username and email and password):
        print("SEED_ADMIN_USERNAME, SEED_ADMIN_EMAIL and SEED_ADMIN_PASSWORD must be set")
        sys.exit(1)

    engine = create_async_engine(settings.database_url, echo=False)
    async_session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as db:
        result = await db.execute(
            select(User).where(or_(User.username == username, User.email == email.lower()))
        )
        existing_user = result.scalars().first()

        if existing_user:
            print(f"User already exists: {existing_user.username}")
            print(f"  ID: {existing_user.id}")
            print(f"  Role: {existing_user.role.value}")
            await engine.dispose()
            return

        admin_user = User(
            username=username,
            email=email.lower(),
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            role=UserRole.ADMINISTRATIVE,
            is_active=True,
        )

        db.add(admin_user)
        await db.commit()
        await db.refresh(admin_user)

        print("Administrator created successfully!")
        print(f"  Username: {username}")
        print(f"  Email: {admin_user.email}")
        print(f"  ID: {admin_user.id}")
        print(f"  Role: {admin_user.role.value}")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed_admin())
