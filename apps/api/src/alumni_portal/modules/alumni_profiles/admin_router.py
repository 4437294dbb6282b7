"""
Alumni Profile Admin Router

Review queue endpoints for administrators.

Endpoints:
- GET  /admin/alumni-profiles - List profiles with filters and pagination
- POST /admin/alumni-profiles/{id}/approve - Approve and promote the owner
- POST /admin/alumni-profiles/{id}/reject - Reject

Security:
- All endpoints require an ADMINISTRATIVE principal (enforced by the service)
- Decision endpoints are rate limited per administrator
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from alumni_portal.core.auth import Principal, get_current_principal
from alumni_portal.core.database import get_db
from alumni_portal.core.exceptions import ServiceError, to_http_exception
from alumni_portal.core.rate_limit import RATE_LIMIT_PROFILE_DECISION, enforce_rate_limit
from alumni_portal.modules.alumni_profiles import service
from alumni_portal.modules.alumni_profiles.helpers import to_profile_response
from alumni_portal.modules.alumni_profiles.models import ProfileDecision, ProfileStatus
from alumni_portal.modules.alumni_profiles.schemas import (
    ProfileDecisionRequest,
    ProfileDecisionResponse,
    ProfileListResponse,
)
from alumni_portal.modules.alumni_profiles.service import (
    ProfileAlreadyDecidedError,
    ProfileDecisionError,
    ProfileNotFoundError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=ProfileListResponse,
    summary="List Profiles",
    description="""
Paginated list of alumni profiles, newest first.

**Filters:**
- `status`: pending, approved or rejected
- `search`: owner's name, username or email

**Access:** Administrators only
""",
    responses={
        401: {"description": "Unauthorized - invalid or missing token"},
        403: {"description": "Forbidden - not an administrator"},
    },
)
async def list_profiles(
    status_filter: ProfileStatus | None = Query(None, alias="status", description="Filter by status"),
    search: str | None = Query(None, min_length=1, max_length=100),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(get_current_principal),
) -> ProfileListResponse:
    try:
        result = await service.admin_list_profiles(
            db,
            admin,
            status=status_filter,
            search=search,
            skip=skip,
            limit=limit,
        )
    except ServiceError as e:
        raise to_http_exception(e) from e

    logger.info(
        f"Admin {admin.id} listed profiles: total={result['total']}, "
        f"returned={len(result['profiles'])}"
    )
    return ProfileListResponse(
        profiles=[to_profile_response(p) for p in result["profiles"]],
        total=result["total"],
        skip=result["skip"],
        limit=result["limit"],
    )


async def _decide(
    profile_id: UUID,
    decision: ProfileDecision,
    data: ProfileDecisionRequest,
    db: AsyncSession,
    admin: Principal,
) -> ProfileDecisionResponse:
    await enforce_rate_limit(admin.id, f"profile:{decision.value}", *RATE_LIMIT_PROFILE_DECISION)

    try:
        result = await service.decide_profile(
            db,
            admin,
            profile_id,
            decision,
            comment=data.comment,
            notify=data.notify,
        )
    except ProfileNotFoundError as e:
        logger.warning(f"Profile not found: {profile_id}")
        raise to_http_exception(e) from e
    except ProfileAlreadyDecidedError as e:
        logger.warning(f"Cannot {decision.value} profile {profile_id}: {e.message}")
        raise to_http_exception(e) from e
    except ProfileDecisionError as e:
        logger.error(f"Profile decision failed: {e.message}")
        raise to_http_exception(e) from e
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error deciding profile {profile_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "INTERNAL_ERROR",
                "message": "An unexpected error occurred.",
            },
        ) from e

    profile = result.profile
    if not result.changed:
        message = f"Profile was already {profile.status.value}. No changes made."
    elif result.email_opted_out:
        message = f"Profile {profile.status.value}. The owner has turned off profile update emails."
    elif data.notify and not result.email_sent:
        message = f"Profile {profile.status.value}. Notification email could not be sent."
    else:
        message = f"Profile {profile.status.value}."

    return ProfileDecisionResponse(
        profile=to_profile_response(profile),
        status=profile.status,
        user_role=profile.user.role if profile.user is not None else None,
        email_sent=result.email_sent,
        email_opted_out=result.email_opted_out,
        message=message,
    )


@router.post(
    "/{profile_id}/approve",
    response_model=ProfileDecisionResponse,
    summary="Approve Profile",
    description="""
Approve a pending profile.

In one transaction the profile becomes `approved` and the owner's role
becomes `registered_alumni`. If either write fails, neither is kept.

The notification email is best-effort: a delivery failure is reported as
`email_sent: false` and does not undo the approval.

**Access:** Administrators only
""",
    responses={
        401: {"description": "Unauthorized - invalid or missing token"},
        403: {"description": "Forbidden - not an administrator"},
        404: {"description": "Profile not found"},
        409: {"description": "Profile already rejected"},
        429: {"description": "Too many decisions"},
        500: {"description": "Decision could not be saved; nothing changed"},
    },
)
async def approve_profile(
    profile_id: UUID,
    data: ProfileDecisionRequest | None = None,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(get_current_principal),
) -> ProfileDecisionResponse:
    return await _decide(profile_id, ProfileDecision.APPROVE, data or ProfileDecisionRequest(), db, admin)


@router.post(
    "/{profile_id}/reject",
    response_model=ProfileDecisionResponse,
    summary="Reject Profile",
    description="""
Reject a pending profile. The owner's role is unchanged. The owner can edit
the profile to send it back to review.

**Access:** Administrators only
""",
    responses={
        401: {"description": "Unauthorized - invalid or missing token"},
        403: {"description": "Forbidden - not an administrator"},
        404: {"description": "Profile not found"},
        409: {"description": "Profile already approved"},
        429: {"description": "Too many decisions"},
    },
)
async def reject_profile(
    profile_id: UUID,
    data: ProfileDecisionRequest | None = None,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(get_current_principal),
) -> ProfileDecisionResponse:
    return await _decide(profile_id, ProfileDecision.REJECT, data or ProfileDecisionRequest(), db, admin)
