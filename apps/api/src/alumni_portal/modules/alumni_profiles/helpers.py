"""
Helper functions for alumni profiles.

Visibility rules and model-to-schema conversion shared by the service and
routers.
"""

from typing import TYPE_CHECKING

from alumni_portal.modules.alumni_profiles.models import AlumniProfile, ProfileStatus
from alumni_portal.modules.alumni_profiles.schemas import (
    ProfileResponse,
    RedactedProfileResponse,
)
from alumni_portal.modules.users.models import UserRole

if TYPE_CHECKING:
    from alumni_portal.core.auth import Principal


def next_status_on_self_edit(current: ProfileStatus) -> ProfileStatus:
    """
    Status after the owner edits their profile.

    Approved profiles stay approved; anything else goes back to PENDING for
    review.
    """
    if current == ProfileStatus.APPROVED:
        return ProfileStatus.APPROVED
    return ProfileStatus.PENDING


def can_view_full_profile(profile: AlumniProfile, viewer: "Principal") -> bool:
    """Owners, administrators and anyone viewing an approved profile see everything."""
    return (
        profile.status == ProfileStatus.APPROVED
        or viewer.role == UserRole.ADMINISTRATIVE
        or viewer.id == profile.user_id
    )


def _display_name(profile: AlumniProfile) -> str:
    user = profile.user
    return user.full_name if user is not None else ""


def _school_name(profile: AlumniProfile) -> str | None:
    return profile.school.name if profile.school is not None else None


def to_profile_response(profile: AlumniProfile) -> ProfileResponse:
    """Convert AlumniProfile model to the full ProfileResponse schema."""
    user = profile.user
    return ProfileResponse(
        id=profile.id,
        user_id=profile.user_id,
        name=_display_name(profile),
        email=user.email if user is not None else None,
        mobile=user.mobile if user is not None else None,
        city=user.city if user is not None else None,
        country=user.country if user is not None else None,
        school_id=profile.school_id,
        school_name=_school_name(profile),
        graduation_year=profile.graduation_year,
        degree_earned=profile.degree_earned,
        study_program=profile.study_program,
        current_job_title=profile.current_job_title,
        current_company=profile.current_company,
        employment_history=profile.employment_history,
        bio=profile.bio,
        linkedin=profile.linkedin,
        profile_image=profile.profile_image,
        status=profile.status,
        admin_comment=profile.admin_comment,
        reviewed_at=profile.reviewed_at,
        created_at=profile.created_at,
        updated_at=profile.updated_at,
    )


def to_redacted_response(profile: AlumniProfile) -> RedactedProfileResponse:
    """Convert AlumniProfile model to the whitelisted public subset."""
    return RedactedProfileResponse(
        name=_display_name(profile),
        school=_school_name(profile),
        graduation_year=profile.graduation_year,
        degree=profile.degree_earned,
        status=profile.status,
    )
