"""
School Router

Endpoints:
- GET /schools - List schools (public)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from alumni_portal.core.auth import Principal, get_optional_principal
from alumni_portal.core.database import get_db
from alumni_portal.core.policy import Action, enforce
from alumni_portal.modules.schools import repository
from alumni_portal.modules.schools.schemas import SchoolResponse

router = APIRouter()


@router.get(
    "",
    response_model=list[SchoolResponse],
    summary="List Schools",
    description="All schools ordered by name. Used to populate profile forms.",
)
async def list_schools(
    db: AsyncSession = Depends(get_db),
    principal: Principal | None = Depends(get_optional_principal),
) -> list[SchoolResponse]:
    enforce(principal, Action.SCHOOL_LIST)
    schools = await repository.list_schools(db)
    return [SchoolResponse.model_validate(school) for school in schools]
