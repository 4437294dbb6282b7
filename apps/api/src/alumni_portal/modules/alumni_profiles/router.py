"""
Alumni Profile Router

Endpoints for profile owners and viewers, plus the alumni directory.

Endpoints:
- GET  /alumni-profiles/me - Caller's own profile
- PUT  /alumni-profiles/me - Create or edit own profile (status rule applies)
- POST /alumni-profiles - First submission
- GET  /alumni-profiles/{id} - View a profile (redacted for non-approved)
- GET  /alumni - Public directory of approved alumni grouped by school
- GET  /alumni/contacts - Registered alumni the caller can message
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from alumni_portal.core.auth import Principal, get_current_principal, get_optional_principal
from alumni_portal.core.database import get_db
from alumni_portal.core.exceptions import ServiceError, to_http_exception
from alumni_portal.modules.alumni_profiles import service
from alumni_portal.modules.alumni_profiles.helpers import to_profile_response
from alumni_portal.modules.alumni_profiles.schemas import (
    ContactResponse,
    DirectoryResponse,
    ProfileResponse,
    ProfileSubmitRequest,
    ProfileUpdateRequest,
    RedactedProfileResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()
directory_router = APIRouter()


def _internal_error(e: Exception, action: str) -> HTTPException:
    logger.exception(f"Error {action}: {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )


@router.get(
    "/me",
    response_model=ProfileResponse,
    summary="Get My Profile",
    responses={401: {"description": "Not logged in"}, 404: {"description": "No profile yet"}},
)
async def get_my_profile(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> ProfileResponse:
    try:
        profile = await service.get_my_profile(db, principal)
        return to_profile_response(profile)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.put(
    "/me",
    response_model=ProfileResponse,
    summary="Create or Update My Profile",
    description="""
Create the caller's profile, or edit it.

**Status rule:**
- Editing an `approved` profile keeps it `approved`
- Editing a `pending` or `rejected` profile sets it to `pending` (re-review)

Status cannot be set by the request body. Contact fields (`email`, `address`,
`city`, `country`, `mobile`) update the caller's account.
""",
    responses={
        401: {"description": "Not logged in"},
        409: {"description": "Email already in use, or concurrent submission"},
    },
)
async def update_my_profile(
    data: ProfileUpdateRequest,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> ProfileResponse:
    try:
        profile = await service.submit_or_update_profile(db, principal, data)
        return to_profile_response(profile)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise _internal_error(e, "updating profile") from e


@router.post(
    "",
    response_model=ProfileResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Profile",
    responses={
        401: {"description": "Not logged in"},
        409: {"description": "Profile already exists"},
    },
)
async def submit_profile(
    data: ProfileSubmitRequest,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> ProfileResponse:
    try:
        profile = await service.submit_profile(db, principal, data)
        return to_profile_response(profile)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise _internal_error(e, "submitting profile") from e


@router.get(
    "/{profile_id}",
    response_model=ProfileResponse | RedactedProfileResponse,
    summary="View Profile",
    description="""
View an alumni profile.

Profiles that are not yet approved are returned as a redacted subset
(`name`, `school`, `graduation_year`, `degree`, `status`) unless the caller is
the owner or an administrator.
""",
    responses={401: {"description": "Not logged in"}, 404: {"description": "Profile not found"}},
)
async def get_profile(
    profile_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> ProfileResponse | RedactedProfileResponse:
    try:
        return await service.get_profile(db, principal, profile_id)
    except ServiceError as e:
        raise to_http_exception(e) from e


# ============================================
# Directory
# ============================================


@directory_router.get(
    "",
    response_model=DirectoryResponse,
    summary="Alumni Directory",
    description="Approved alumni grouped by school. Public.",
)
async def get_directory(
    db: AsyncSession = Depends(get_db),
    principal: Principal | None = Depends(get_optional_principal),
) -> DirectoryResponse:
    try:
        groups = await service.list_directory(db, principal)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return DirectoryResponse(
        schools=groups,
        total=sum(len(group.alumni) for group in groups),
    )


@directory_router.get(
    "/contacts",
    response_model=list[ContactResponse],
    summary="Messaging Contacts",
)
async def get_contacts(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> list[ContactResponse]:
    try:
        users = await service.list_contacts(db, principal)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return [
        ContactResponse(
            id=user.id,
            username=user.username,
            name=user.full_name,
            school_name=user.school.name if user.school is not None else None,
        )
        for user in users
    ]
