"""
Job Application Admin Router

Endpoints:
- GET /admin/job-applications - All applications, filterable by status
"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from alumni_portal.core.auth import Principal, get_current_principal
from alumni_portal.core.database import get_db
from alumni_portal.core.exceptions import ServiceError, to_http_exception
from alumni_portal.modules.jobs import service
from alumni_portal.modules.jobs.helpers import to_application_response
from alumni_portal.modules.jobs.models import ApplicationStatus
from alumni_portal.modules.jobs.schemas import JobApplicationListResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=JobApplicationListResponse,
    summary="List All Applications",
    description="**Access:** Administrators only",
    responses={
        401: {"description": "Unauthorized - invalid or missing token"},
        403: {"description": "Forbidden - not an administrator"},
    },
)
async def list_applications(
    status_filter: ApplicationStatus | None = Query(None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(get_current_principal),
) -> JobApplicationListResponse:
    try:
        result = await service.admin_list_applications(
            db,
            admin,
            status=status_filter,
            skip=skip,
            limit=limit,
        )
    except ServiceError as e:
        raise to_http_exception(e) from e

    logger.info(f"Admin {admin.id} listed job applications: total={result['total']}")
    return JobApplicationListResponse(
        applications=[to_application_response(a) for a in result["applications"]],
        total=result["total"],
        skip=result["skip"],
        limit=result["limit"],
    )
