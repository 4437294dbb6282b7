"""
Job Board Router

Endpoints:
- GET    /jobs - List active postings (public)
- POST   /jobs - Create a posting (registered alumni)
- GET    /jobs/pending-count - Submitted applications awaiting the caller
- GET    /jobs/my-applications - Applications received across the caller's postings
- POST   /jobs/applications/{id}/accept - Accept an application (job owner or admin)
- POST   /jobs/applications/{id}/reject - Reject an application (job owner or admin)
- GET    /jobs/{id} - Posting detail (public)
- PUT    /jobs/{id} - Update a posting (owner or admin)
- DELETE /jobs/{id} - Delete a posting (owner or admin)
- POST   /jobs/{id}/apply - Apply (registered alumni, rate limited)
- GET    /jobs/{id}/has-applied - Whether the caller applied
- GET    /jobs/{id}/applications - Applications for a posting (owner or admin)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from alumni_portal.core.auth import Principal, get_current_principal, get_optional_principal
from alumni_portal.core.database import get_db
from alumni_portal.core.exceptions import ServiceError, to_http_exception
from alumni_portal.core.rate_limit import RATE_LIMIT_JOB_APPLY, enforce_rate_limit
from alumni_portal.modules.jobs import service
from alumni_portal.modules.jobs.helpers import to_application_response, to_job_response
from alumni_portal.modules.jobs.models import ApplicationDecision
from alumni_portal.modules.jobs.schemas import (
    ApplyResponse,
    HasAppliedResponse,
    JobApplicationCreate,
    JobApplicationResponse,
    JobPostingCreate,
    JobPostingResponse,
    JobPostingUpdate,
    PendingCountResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


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
    "",
    response_model=list[JobPostingResponse],
    summary="List Jobs",
    description="""
Active job postings, newest first. Expired postings are not listed.

When the caller is logged in, postings they own include `pending_applications`.
""",
)
async def list_jobs(
    search: str | None = Query(None, min_length=1, max_length=100),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    principal: Principal | None = Depends(get_optional_principal),
) -> list[JobPostingResponse]:
    try:
        result = await service.list_jobs(db, principal, search=search, skip=skip, limit=limit)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return [to_job_response(job, pending) for job, pending in result["jobs"]]


@router.post(
    "",
    response_model=JobPostingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Job",
    responses={
        401: {"description": "Not logged in"},
        403: {"description": "Only registered alumni can post jobs"},
    },
)
async def create_job(
    data: JobPostingCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> JobPostingResponse:
    try:
        job = await service.create_job(db, principal, data)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise _internal_error(e, "creating job") from e
    return to_job_response(job, 0)


@router.get(
    "/pending-count",
    response_model=PendingCountResponse,
    summary="Pending Application Count",
)
async def get_pending_count(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> PendingCountResponse:
    try:
        count = await service.list_pending_count(db, principal)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return PendingCountResponse(pending_count=count)


@router.get(
    "/my-applications",
    response_model=list[JobApplicationResponse],
    summary="Applications To My Jobs",
)
async def get_received_applications(
    pending_only: bool = Query(False, description="Only submitted applications"),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> list[JobApplicationResponse]:
    try:
        applications = await service.list_received_applications(db, principal, pending_only=pending_only)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return [to_application_response(a) for a in applications]


async def _decide(
    application_id: UUID,
    decision: ApplicationDecision,
    db: AsyncSession,
    principal: Principal,
) -> JobApplicationResponse:
    try:
        result = await service.decide_application(db, principal, application_id, decision)
    except ServiceError as e:
        if e.status_code == status.HTTP_403_FORBIDDEN:
            logger.warning(f"{principal} denied deciding application {application_id}")
        raise to_http_exception(e) from e
    except Exception as e:
        raise _internal_error(e, f"deciding application {application_id}") from e
    return to_application_response(result.application)


@router.post(
    "/applications/{application_id}/accept",
    response_model=JobApplicationResponse,
    summary="Accept Application",
    description="""
Accept a submitted application. Only the job's poster or an administrator.

An application that is already accepted or rejected is returned unchanged.
""",
    responses={
        403: {"description": "Not the job's poster"},
        404: {"description": "Application not found"},
    },
)
async def accept_application(
    application_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> JobApplicationResponse:
    return await _decide(application_id, ApplicationDecision.ACCEPT, db, principal)


@router.post(
    "/applications/{application_id}/reject",
    response_model=JobApplicationResponse,
    summary="Reject Application",
    responses={
        403: {"description": "Not the job's poster"},
        404: {"description": "Application not found"},
    },
)
async def reject_application(
    application_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> JobApplicationResponse:
    return await _decide(application_id, ApplicationDecision.REJECT, db, principal)


@router.get(
    "/{job_id}",
    response_model=JobPostingResponse,
    summary="Get Job",
    responses={404: {"description": "Job not found"}},
)
async def get_job(
    job_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal | None = Depends(get_optional_principal),
) -> JobPostingResponse:
    try:
        job, pending = await service.get_job(db, principal, job_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return to_job_response(job, pending)


@router.put(
    "/{job_id}",
    response_model=JobPostingResponse,
    summary="Update Job",
    responses={
        403: {"description": "Not the job's poster"},
        404: {"description": "Job not found"},
    },
)
async def update_job(
    job_id: UUID,
    data: JobPostingUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> JobPostingResponse:
    try:
        job = await service.update_job(db, principal, job_id, data)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise _internal_error(e, f"updating job {job_id}") from e
    return to_job_response(job)


@router.delete(
    "/{job_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Job",
    responses={
        403: {"description": "Not the job's poster"},
        404: {"description": "Job not found"},
    },
)
async def delete_job(
    job_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> None:
    try:
        await service.delete_job(db, principal, job_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise _internal_error(e, f"deleting job {job_id}") from e


@router.post(
    "/{job_id}/apply",
    response_model=ApplyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Apply To Job",
    description="""
Apply to a job posting. Requires `registered_alumni`.

Each user can apply to a job once. An existing application in any state,
including a rejected one, blocks re-applying.
""",
    responses={
        403: {"description": "Only registered alumni can apply"},
        404: {"description": "Job not found"},
        409: {"description": "Already applied, or the job has expired"},
        429: {"description": "Too many applications"},
    },
)
async def apply_to_job(
    job_id: UUID,
    data: JobApplicationCreate | None = None,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> ApplyResponse:
    await enforce_rate_limit(principal.id, "job:apply", *RATE_LIMIT_JOB_APPLY)

    try:
        result = await service.apply_to_job(db, principal, job_id, data or JobApplicationCreate())
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise _internal_error(e, f"applying to job {job_id}") from e

    return ApplyResponse(
        application=to_application_response(result.application),
        email_sent=result.email_sent,
        message="Application submitted.",
    )


@router.get(
    "/{job_id}/has-applied",
    response_model=HasAppliedResponse,
    summary="Check Application",
)
async def has_applied(
    job_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> HasAppliedResponse:
    try:
        application = await service.has_applied(db, principal, job_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return HasAppliedResponse(
        has_applied=application is not None,
        status=application.status if application is not None else None,
    )


@router.get(
    "/{job_id}/applications",
    response_model=list[JobApplicationResponse],
    summary="List Job Applications",
    responses={
        403: {"description": "Not the job's poster"},
        404: {"description": "Job not found"},
    },
)
async def list_job_applications(
    job_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> list[JobApplicationResponse]:
    try:
        applications = await service.list_job_applications(db, principal, job_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return [to_application_response(a) for a in applications]
