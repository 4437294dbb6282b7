"""
Fixtures for alumni profile tests.
"""

from datetime import UTC, datetime
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from alumni_portal.modules.alumni_profiles.models import AlumniProfile, ProfileStatus
from alumni_portal.modules.users.models import User, UserRole


def build_profile(status: ProfileStatus, owner_id=None, role: UserRole = UserRole.APPLIED_ALUMNI):
    owner = MagicMock(spec=User)
    owner.id = owner_id or uuid4()
    owner.email = "ada@alumni.test"
    owner.first_name = "Ada"
    owner.last_name = "Lovelace"
    owner.full_name = "Ada Lovelace"
    owner.mobile = "+15550100"
    owner.city = "London"
    owner.country = "UK"
    owner.role = role

    school = MagicMock()
    school.name = "School of Engineering"

    profile = MagicMock(spec=AlumniProfile)
    profile.id = uuid4()
    profile.user_id = owner.id
    profile.user = owner
    profile.school_id = uuid4()
    profile.school = school
    profile.graduation_year = 2015
    profile.degree_earned = "BSc Computer Science"
    profile.study_program = "Computer Science"
    profile.current_job_title = "Engineer"
    profile.current_company = "Analytical Engines Ltd"
    profile.employment_history = None
    profile.bio = "Writes programs."
    profile.linkedin = None
    profile.profile_image = None
    profile.status = status
    profile.admin_comment = None
    profile.reviewed_by = None
    profile.reviewed_at = None
    profile.created_at = datetime.now(UTC)
    profile.updated_at = datetime.now(UTC)
    return profile


@pytest.fixture
def profile_factory():
    return build_profile


@pytest.fixture
def pending_profile():
    return build_profile(ProfileStatus.PENDING)


@pytest.fixture
def approved_profile():
    return build_profile(ProfileStatus.APPROVED, role=UserRole.REGISTERED_ALUMNI)


@pytest.fixture
def rejected_profile():
    return build_profile(ProfileStatus.REJECTED)
