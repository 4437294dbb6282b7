"""
Fixtures for job board tests.
"""

from datetime import UTC, date, datetime, timedelta
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from alumni_portal.modules.jobs.models import ApplicationStatus, JobApplication, JobPosting
from alumni_portal.modules.users.models import User


def build_job(owner_id, *, expired: bool = False):
    poster = MagicMock(spec=User)
    poster.full_name = "Grace Hopper"

    job = MagicMock(spec=JobPosting)
    job.id = uuid4()
    job.alumni_id = owner_id
    job.poster = poster
    job.company_name = "Acme"
    job.job_title = "Data Engineer"
    job.description = "Build pipelines."
    job.requirements = None
    job.location = "Remote"
    job.is_remote = True
    job.application_link = None
    job.contact_email = None
    job.expires_at = date.today() - timedelta(days=1) if expired else None
    job.is_expired.return_value = expired
    job.created_at = datetime.now(UTC)
    job.updated_at = datetime.now(UTC)
    return job


def build_application(job, applicant_id=None, status=ApplicationStatus.SUBMITTED):
    applicant = MagicMock(spec=User)
    applicant.full_name = "Ada Lovelace"
    applicant.email = "ada@alumni.test"

    application = MagicMock(spec=JobApplication)
    application.id = uuid4()
    application.job_id = job.id
    application.job = job
    application.applicant_id = applicant_id or uuid4()
    application.applicant = applicant
    application.cover_letter = None
    application.resume_url = None
    application.status = status
    application.decided_by = None
    application.decided_at = None
    application.created_at = datetime.now(UTC)
    return application


@pytest.fixture
def job_factory():
    return build_job


@pytest.fixture
def application_factory():
    return build_application


@pytest.fixture
def poster_job(alumnus):
    """A live posting owned by the ``alumnus`` fixture."""
    return build_job(alumnus.id)
