"""
Shared test fixtures.
"""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

import alumni_portal.modules.models  # noqa: F401 - registers every mapper
from alumni_portal.core.auth import Principal
from alumni_portal.modules.users.models import UserRole


def make_principal(role: UserRole = UserRole.REGISTERED_ALUMNI, **overrides) -> Principal:
    """Build a Principal with sensible defaults for ``role``."""
    values = {
        "id": uuid4(),
        "role": role,
        "username": f"{role.value}_user",
        "email": f"{role.value}@alumni.test",
        "name": "Test User",
    }
    values.update(overrides)
    return Principal(**values)


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.flush = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.delete = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def admin():
    return make_principal(UserRole.ADMINISTRATIVE, username="admin", email="admin@alumni.test")


@pytest.fixture
def alumnus():
    return make_principal(UserRole.REGISTERED_ALUMNI, username="alumnus")


@pytest.fixture
def other_alumnus():
    return make_principal(UserRole.REGISTERED_ALUMNI, username="other")


@pytest.fixture
def applicant():
    """A user whose profile has not been approved yet."""
    return make_principal(UserRole.APPLIED_ALUMNI, username="applicant")


@pytest.fixture
def principal_factory():
    """Factory fixture: ``principal_factory(role, **overrides)``."""
    return make_principal
