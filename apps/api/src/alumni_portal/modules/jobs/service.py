"""
Job Board Service Layer

Business logic for job postings and the application workflow.

This module implements:
1. Posting management:
   - Registered alumni create postings; owners (or admins) edit and delete them
   - Expired postings are hidden from listings but kept
2. Applying:
   - One application per (job, applicant), enforced by the database
   - Re-applying is refused in every state, including after rejection
   - Best-effort confirmation email to the applicant
3. Deciding:
   - Only the job owner or an admin decides, under a row lock
   - Deciding an already decided application returns it unchanged
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from alumni_portal.core.email import EmailTemplate, dispatch_notification
from alumni_portal.core.exceptions import (
    ConflictError,
    NotFoundError,
    ServiceError,
    ServiceFailureError,
)
from alumni_portal.core.policy import Action, enforce
from alumni_portal.modules.jobs import repository
from alumni_portal.modules.jobs.models import (
    ApplicationDecision,
    ApplicationStatus,
    JobApplication,
    JobPosting,
)
from alumni_portal.modules.jobs.schemas import (
    JobApplicationCreate,
    JobPostingCreate,
    JobPostingUpdate,
)
from alumni_portal.modules.notifications.service import should_notify

if TYPE_CHECKING:
    from alumni_portal.core.auth import Principal

logger = logging.getLogger(__name__)

DECISION_STATUS: dict[ApplicationDecision, ApplicationStatus] = {
    ApplicationDecision.ACCEPT: ApplicationStatus.ACCEPTED,
    ApplicationDecision.REJECT: ApplicationStatus.REJECTED,
}


class JobNotFoundError(NotFoundError):
    def __init__(self, job_id: UUID):
        super().__init__(message=f"Job {job_id} not found", error_code="JOB_NOT_FOUND")


class ApplicationNotFoundError(NotFoundError):
    def __init__(self, application_id: UUID):
        super().__init__(
            message=f"Application {application_id} not found",
            error_code="APPLICATION_NOT_FOUND",
        )


class JobExpiredError(ConflictError):
    """Raised when applying to a posting past its expiry date."""

    def __init__(self, job_id: UUID):
        super().__init__(
            message=f"Job {job_id} has expired and no longer accepts applications.",
            error_code="JOB_EXPIRED",
        )


class AlreadyAppliedError(ConflictError):
    """Raised when the applicant already has an application for the job."""

    def __init__(self):
        super().__init__(
            message="You have already applied to this job.",
            error_code="ALREADY_APPLIED",
        )


class ApplicationDecisionError(ServiceFailureError):
    def __init__(self, application_id: UUID):
        super().__init__(
            message=f"Failed to record decision for application {application_id}. No changes were made.",
            error_code="APPLICATION_DECISION_FAILED",
        )


@dataclass
class ApplyResult:
    application: JobApplication
    email_sent: bool


@dataclass
class ApplicationDecisionResult:
    application: JobApplication
    changed: bool


# ============================================
# Postings
# ============================================


async def _get_job_or_404(db: AsyncSession, job_id: UUID) -> JobPosting:
    job = await repository.get_job(db, job_id)
    if job is None:
        raise JobNotFoundError(job_id)
    return job


async def list_jobs(
    db: AsyncSession,
    viewer: "Principal | None",
    *,
    search: str | None = None,
    skip: int = 0,
    limit: int = 20,
) -> dict:
    """
    List active postings.

    Pending application counts are included for postings the viewer owns.

    Returns:
        dict with ``jobs`` as (job, pending_count | None) pairs, plus
        ``total``, ``skip`` and ``limit``
    """
    enforce(viewer, Action.JOB_LIST)

    jobs, total = await repository.list_active_jobs(db, search=search, skip=skip, limit=limit)

    counts: dict[UUID, int] = {}
    owned_ids = [job.id for job in jobs if viewer is not None and job.alumni_id == viewer.id]
    if owned_ids:
        counts = await repository.pending_counts_by_job(db, owned_ids)

    items = [(job, counts.get(job.id, 0) if job.id in owned_ids else None) for job in jobs]
    return {"jobs": items, "total": total, "skip": skip, "limit": limit}


async def get_job(
    db: AsyncSession,
    viewer: "Principal | None",
    job_id: UUID,
) -> tuple[JobPosting, int | None]:
    """Get a posting, with its pending count when the viewer owns it."""
    enforce(viewer, Action.JOB_VIEW)

    job = await _get_job_or_404(db, job_id)

    pending = None
    if viewer is not None and job.alumni_id == viewer.id:
        counts = await repository.pending_counts_by_job(db, [job.id])
        pending = counts.get(job.id, 0)
    return job, pending


async def create_job(db: AsyncSession, principal: "Principal", data: JobPostingCreate) -> JobPosting:
    enforce(principal, Action.JOB_CREATE)

    job = await repository.create_job(db, principal.id, data.model_dump())
    await db.commit()

    logger.info(f"User {principal.id} posted job {job.id}: {job.job_title}")
    return job


async def update_job(
    db: AsyncSession,
    principal: "Principal",
    job_id: UUID,
    data: JobPostingUpdate,
) -> JobPosting:
    """
    Update a posting.

    Raises:
        JobNotFoundError: If the job doesn't exist
        ForbiddenError: If the principal neither owns the job nor is an admin
    """
    job = await _get_job_or_404(db, job_id)
    enforce(principal, Action.JOB_UPDATE, job)

    await repository.update_job(db, job, data.model_dump(exclude_unset=True))
    await db.commit()

    logger.info(f"Job {job_id} updated by {principal.id}")
    return job


async def delete_job(db: AsyncSession, principal: "Principal", job_id: UUID) -> None:
    job = await _get_job_or_404(db, job_id)
    enforce(principal, Action.JOB_DELETE, job)

    await repository.delete_job(db, job)
    await db.commit()

    logger.info(f"Job {job_id} deleted by {principal.id}")


# ============================================
# Applying
# ============================================


async def _notify_applicant(
    db: AsyncSession,
    principal: "Principal",
    job: JobPosting,
) -> bool:
    """Send the application confirmation. Never raises."""
    try:
        if not await should_notify(db, principal.id, "job_notifications"):
            return False

        result = await dispatch_notification(
            EmailTemplate.JOB_APPLICATION_RECEIVED,
            principal.email,
            {
                "name": principal.name,
                "job_title": job.job_title,
                "company_name": job.company_name,
                "location": job.location,
                "is_remote": job.is_remote,
            },
        )
        return result.success
    except Exception as e:
        logger.error(f"Failed to send application email for job {job.id}: {e}", exc_info=True)
        return False


async def apply_to_job(
    db: AsyncSession,
    principal: "Principal",
    job_id: UUID,
    data: JobApplicationCreate,
) -> ApplyResult:
    """
    Apply to a job posting.

    The lookup for an existing application only saves a round trip; the
    unique (job_id, applicant_id) constraint decides concurrent applies, and
    its IntegrityError becomes AlreadyAppliedError.

    Args:
        db: Database session
        principal: The applicant (must be registered alumni)
        job_id: Posting to apply to
        data: Cover letter and resume link

    Returns:
        ApplyResult with the new application and whether the email was sent

    Raises:
        ForbiddenError: If the principal is not registered alumni
        JobNotFoundError: If the job doesn't exist
        JobExpiredError: If the job has expired
        AlreadyAppliedError: If an application already exists, in any state
    """
    enforce(principal, Action.JOB_APPLY)

    job = await _get_job_or_404(db, job_id)
    if job.is_expired():
        raise JobExpiredError(job_id)

    existing = await repository.get_application_by_job_and_applicant(db, job_id, principal.id)
    if existing is not None:
        logger.info(f"User {principal.id} already applied to job {job_id} ({existing.status.value})")
        raise AlreadyAppliedError()

    try:
        application = await repository.create_application(
            db,
            job_id=job_id,
            applicant_id=principal.id,
            cover_letter=data.cover_letter,
            resume_url=data.resume_url,
        )
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Concurrent application by {principal.id} to job {job_id}")
        raise AlreadyAppliedError() from e

    logger.info(f"User {principal.id} applied to job {job_id}: application {application.id}")

    email_sent = await _notify_applicant(db, principal, job)
    return ApplyResult(application=application, email_sent=email_sent)


async def has_applied(
    db: AsyncSession,
    principal: "Principal",
    job_id: UUID,
) -> JobApplication | None:
    """The caller's application for the job, if any."""
    await _get_job_or_404(db, job_id)
    return await repository.get_application_by_job_and_applicant(db, job_id, principal.id)


# ============================================
# Deciding
# ============================================


async def decide_application(
    db: AsyncSession,
    principal: "Principal",
    application_id: UUID,
    decision: ApplicationDecision,
) -> ApplicationDecisionResult:
    """
    Accept or reject a submitted application.

    The application row is locked for the transaction. An application that
    is already accepted or rejected is returned unchanged (``changed=False``),
    whatever the requested decision.

    Raises:
        ApplicationNotFoundError: If the application doesn't exist
        ForbiddenError: If the principal neither owns the job nor is an admin
        ApplicationDecisionError: If persisting the decision failed (rolled back)
    """
    target_status = DECISION_STATUS[decision]

    try:
        application = await repository.get_application_for_update(db, application_id)
        if application is None:
            raise ApplicationNotFoundError(application_id)

        enforce(principal, Action.APPLICATION_DECIDE, application.job)

        if repository.is_terminal(application.status):
            await db.commit()
            logger.info(
                f"Application {application_id} already {application.status.value}; "
                f"ignoring {decision.value}"
            )
            return ApplicationDecisionResult(application=application, changed=False)

        await repository.apply_decision(db, application, target_status, decided_by=principal.id)
        await db.commit()
    except ServiceError:
        await db.rollback()
        raise
    except Exception as e:
        await db.rollback()
        logger.error(f"Application decision failed for {application_id}: {e}", exc_info=True)
        raise ApplicationDecisionError(application_id) from e

    logger.info(f"Application {application_id} {target_status.value} by {principal.id}")
    return ApplicationDecisionResult(application=application, changed=True)


# ============================================
# Application listings
# ============================================


async def list_job_applications(
    db: AsyncSession,
    principal: "Principal",
    job_id: UUID,
) -> list[JobApplication]:
    """Applications for one posting. Owner or admin."""
    job = await _get_job_or_404(db, job_id)
    enforce(principal, Action.APPLICATION_LIST_FOR_JOB, job)
    return await repository.list_applications_for_job(db, job_id)


async def list_received_applications(
    db: AsyncSession,
    principal: "Principal",
    *,
    pending_only: bool = False,
) -> list[JobApplication]:
    """Applications across all of the caller's postings."""
    enforce(principal, Action.APPLICATION_LIST_RECEIVED)
    return await repository.list_applications_for_poster(db, principal.id, pending_only=pending_only)


async def list_pending_count(db: AsyncSession, principal: "Principal") -> int:
    """Number of submitted applications awaiting the caller's decision."""
    enforce(principal, Action.APPLICATION_LIST_RECEIVED)
    return await repository.count_pending_for_poster(db, principal.id)


async def admin_list_applications(
    db: AsyncSession,
    principal: "Principal",
    *,
    status: ApplicationStatus | None = None,
    skip: int = 0,
    limit: int = 20,
) -> dict:
    enforce(principal, Action.APPLICATION_LIST_ALL)

    applications, total = await repository.list_all_applications(
        db,
        status=status,
        skip=skip,
        limit=limit,
    )
    return {"applications": applications, "total": total, "skip": skip, "limit": limit}
