"""Model-to-schema conversion for the job board."""

from alumni_portal.modules.jobs.models import JobApplication, JobPosting
from alumni_portal.modules.jobs.schemas import JobApplicationResponse, JobPostingResponse


def to_job_response(job: JobPosting, pending_applications: int | None = None) -> JobPostingResponse:
    """Convert JobPosting model to JobPostingResponse schema."""
    poster = job.poster
    return JobPostingResponse(
        id=job.id,
        alumni_id=job.alumni_id,
        poster_name=poster.full_name if poster is not None else None,
        company_name=job.company_name,
        job_title=job.job_title,
        description=job.description,
        requirements=job.requirements,
        location=job.location,
        is_remote=job.is_remote,
        application_link=job.application_link,
        contact_email=job.contact_email,
        expires_at=job.expires_at,
        pending_applications=pending_applications,
        created_at=job.created_at,
        updated_at=job.updated_at,
    )


def to_application_response(application: JobApplication) -> JobApplicationResponse:
    """Convert JobApplication model to JobApplicationResponse schema."""
    job = application.job
    applicant = application.applicant
    return JobApplicationResponse(
        id=application.id,
        job_id=application.job_id,
        job_title=job.job_title if job is not None else None,
        company_name=job.company_name if job is not None else None,
        applicant_id=application.applicant_id,
        applicant_name=applicant.full_name if applicant is not None else None,
        applicant_email=applicant.email if applicant is not None else None,
        cover_letter=application.cover_letter,
        resume_url=application.resume_url,
        status=application.status,
        decided_by=application.decided_by,
        decided_at=application.decided_at,
        created_at=application.created_at,
    )
