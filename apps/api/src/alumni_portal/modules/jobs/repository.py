"""
Job Board Repository

Database operations for job postings and applications. Functions flush but
never commit; the service owns the transaction.

Every "pending applications" figure (poster badge, per-job counts, the
applications page) is computed from ``PENDING_APPLICATION`` so the numbers
always agree.
"""

from datetime import UTC, date, datetime
from uuid import UUID

from sqlalchemy import desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import ApplicationStatus, JobApplication, JobPosting

PENDING_APPLICATION = JobApplication.status == ApplicationStatus.SUBMITTED

VALID_APPLICATION_TRANSITIONS: dict[ApplicationStatus, set[ApplicationStatus]] = {
    ApplicationStatus.SUBMITTED: {
        ApplicationStatus.ACCEPTED,
        ApplicationStatus.REJECTED,
    },
    ApplicationStatus.ACCEPTED: set(),  # Terminal
    ApplicationStatus.REJECTED: set(),  # Terminal
}


def is_terminal(status: ApplicationStatus) -> bool:
    return not VALID_APPLICATION_TRANSITIONS.get(status)


def _active_clause(today: date):
    return or_(JobPosting.expires_at.is_(None), JobPosting.expires_at >= today)


# ============================================
# Job postings
# ============================================


async def create_job(db: AsyncSession, alumni_id: UUID, values: dict) -> JobPosting:
    job = JobPosting(alumni_id=alumni_id, **values)

    db.add(job)
    await db.flush()
    await db.refresh(job)

    return job


async def get_job(db: AsyncSession, job_id: UUID) -> JobPosting | None:
    return await db.get(JobPosting, job_id)


async def list_active_jobs(
    db: AsyncSession,
    *,
    today: date | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[JobPosting], int]:
    """
    List postings that have not expired, newest first.

    Expired postings stay in the table; they are only filtered out here.

    Returns:
        Tuple of (jobs, total matching filters)
    """
    query = select(JobPosting).where(_active_clause(today or date.today()))

    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(
                JobPosting.job_title.ilike(pattern),
                JobPosting.company_name.ilike(pattern),
                JobPosting.location.ilike(pattern),
            )
        )

    total_result = await db.execute(select(func.count()).select_from(query.subquery()))
    total = total_result.scalar() or 0

    query = query.order_by(desc(JobPosting.created_at)).offset(skip).limit(limit)
    result = await db.execute(query)

    return list(result.scalars().all()), total


async def update_job(db: AsyncSession, job: JobPosting, values: dict) -> JobPosting:
    for key, value in values.items():
        if key not in ("id", "alumni_id") and hasattr(job, key):
            setattr(job, key, value)

    await db.flush()
    return job


async def delete_job(db: AsyncSession, job: JobPosting) -> None:
    await db.delete(job)
    await db.flush()


# ============================================
# Applications
# ============================================


async def create_application(
    db: AsyncSession,
    *,
    job_id: UUID,
    applicant_id: UUID,
    cover_letter: str | None = None,
    resume_url: str | None = None,
) -> JobApplication:
    """
    Insert a SUBMITTED application.

    Raises:
        IntegrityError: If the applicant already has an application for the job
    """
    application = JobApplication(
        job_id=job_id,
        applicant_id=applicant_id,
        cover_letter=cover_letter,
        resume_url=resume_url,
        status=ApplicationStatus.SUBMITTED,
    )

    db.add(application)
    await db.flush()
    await db.refresh(application)

    return application


async def get_application_for_update(db: AsyncSession, application_id: UUID) -> JobApplication | None:
    """Get an application and lock its row until the transaction ends."""
    result = await db.execute(
        select(JobApplication)
        .where(JobApplication.id == application_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_application_by_job_and_applicant(
    db: AsyncSession,
    job_id: UUID,
    applicant_id: UUID,
) -> JobApplication | None:
    result = await db.execute(
        select(JobApplication).where(
            JobApplication.job_id == job_id,
            JobApplication.applicant_id == applicant_id,
        )
    )
    return result.scalar_one_or_none()


async def list_applications_for_job(db: AsyncSession, job_id: UUID) -> list[JobApplication]:
    result = await db.execute(
        select(JobApplication)
        .where(JobApplication.job_id == job_id)
        .order_by(desc(JobApplication.created_at))
    )
    return list(result.scalars().all())


async def list_applications_for_poster(
    db: AsyncSession,
    poster_id: UUID,
    *,
    pending_only: bool = False,
) -> list[JobApplication]:
    """Applications across every posting owned by ``poster_id``, newest first."""
    query = (
        select(JobApplication)
        .join(JobPosting, JobPosting.id == JobApplication.job_id)
        .where(JobPosting.alumni_id == poster_id)
    )
    if pending_only:
        query = query.where(PENDING_APPLICATION)

    result = await db.execute(query.order_by(desc(JobApplication.created_at)))
    return list(result.scalars().all())


async def list_all_applications(
    db: AsyncSession,
    *,
    status: ApplicationStatus | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[JobApplication], int]:
    query = select(JobApplication)

    if status:
        query = query.where(JobApplication.status == status)

    total_result = await db.execute(select(func.count()).select_from(query.subquery()))
    total = total_result.scalar() or 0

    query = query.order_by(desc(JobApplication.created_at)).offset(skip).limit(limit)
    result = await db.execute(query)

    return list(result.scalars().all()), total


async def count_pending_for_poster(db: AsyncSession, poster_id: UUID) -> int:
    """Number of SUBMITTED applications across the poster's postings."""
    result = await db.execute(
        select(func.count(JobApplication.id))
        .join(JobPosting, JobPosting.id == JobApplication.job_id)
        .where(JobPosting.alumni_id == poster_id, PENDING_APPLICATION)
    )
    return result.scalar() or 0


async def pending_counts_by_job(db: AsyncSession, job_ids: list[UUID]) -> dict[UUID, int]:
    """SUBMITTED application counts keyed by job id. Jobs with none are absent."""
    if not job_ids:
        return {}

    result = await db.execute(
        select(JobApplication.job_id, func.count(JobApplication.id))
        .where(JobApplication.job_id.in_(job_ids), PENDING_APPLICATION)
        .group_by(JobApplication.job_id)
    )
    return {job_id: count for job_id, count in result.all()}


async def apply_decision(
    db: AsyncSession,
    application: JobApplication,
    status: ApplicationStatus,
    *,
    decided_by: UUID,
) -> JobApplication:
    """
    Record a decision on a locked, SUBMITTED application.

    Raises:
        ValueError: If the application is not in a state that allows ``status``
    """
    if status not in VALID_APPLICATION_TRANSITIONS.get(application.status, set()):
        raise ValueError(
            f"Invalid application transition: {application.status.value} -> {status.value}"
        )

    application.status = status
    application.decided_by = decided_by
    application.decided_at = datetime.now(UTC)

    await db.flush()
    return application
