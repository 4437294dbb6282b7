from fastapi import APIRouter

from alumni_portal.modules.alumni_profiles import admin_router as admin_profiles_router
from alumni_portal.modules.alumni_profiles import directory_router
from alumni_portal.modules.alumni_profiles import router as alumni_profiles_router
from alumni_portal.modules.auth import router as auth_router
from alumni_portal.modules.events import router as events_router
from alumni_portal.modules.jobs import admin_router as admin_job_applications_router
from alumni_portal.modules.jobs import router as jobs_router
from alumni_portal.modules.messages import router as messages_router
from alumni_portal.modules.notifications import router as notifications_router
from alumni_portal.modules.schools import router as schools_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

api_router.include_router(schools_router, prefix="/schools", tags=["Schools"])

api_router.include_router(directory_router, prefix="/alumni", tags=["Alumni Directory"])

api_router.include_router(
    alumni_profiles_router, prefix="/alumni-profiles", tags=["Alumni Profiles"]
)

api_router.include_router(jobs_router, prefix="/jobs", tags=["Jobs"])

api_router.include_router(events_router, prefix="/events", tags=["Events"])

api_router.include_router(messages_router, prefix="/messages", tags=["Messages"])

api_router.include_router(
    notifications_router,
    prefix="/notification-preferences",
    tags=["Notification Preferences"],
)

api_router.include_router(
    admin_profiles_router,
    prefix="/admin/alumni-profiles",
    tags=["Admin - Alumni Profiles"],
)

api_router.include_router(
    admin_job_applications_router,
    prefix="/admin/job-applications",
    tags=["Admin - Job Applications"],
)
