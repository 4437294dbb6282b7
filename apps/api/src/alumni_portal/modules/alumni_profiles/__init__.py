"""
Alumni Profiles Module

Profile submission and the administrator approval workflow:
1. Owners submit a profile (PENDING) and edit it
   - Edits keep APPROVED, otherwise reset to PENDING
2. Administrators approve or reject pending profiles
   - Approval promotes the owner to registered_alumni in the same transaction
   - Owner is emailed best-effort
3. Other users see a redacted view until a profile is approved
4. Public directory of approved alumni grouped by school

API Endpoints:
- GET/PUT /alumni-profiles/me, POST /alumni-profiles, GET /alumni-profiles/{id}
- GET /alumni, GET /alumni/contacts
- GET /admin/alumni-profiles, POST /admin/alumni-profiles/{id}/approve|reject
"""

from .admin_router import router as admin_router
from .router import directory_router, router

__all__ = ["router", "directory_router", "admin_router"]
