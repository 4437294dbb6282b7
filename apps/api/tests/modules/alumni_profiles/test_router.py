"""
HTTP-level tests for the profile endpoints.

Dependencies are overridden so no database or token is needed.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from alumni_portal.core.auth import get_current_principal
from alumni_portal.core.database import get_db
from alumni_portal.modules.alumni_profiles.admin_router import router as admin_router
from alumni_portal.modules.alumni_profiles.router import router

SERVICE = "alumni_portal.modules.alumni_profiles.service"


@pytest.fixture
def make_client(mock_db):
    def _make(principal):
        app = FastAPI()
        app.include_router(router, prefix="/api/v1/alumni-profiles")
        app.include_router(admin_router, prefix="/api/v1/admin/alumni-profiles")
        app.dependency_overrides[get_db] = lambda: mock_db
        app.dependency_overrides[get_current_principal] = lambda: principal
        return TestClient(app)

    return _make


class TestViewProfile:
    def test_pending_profile_redacted_with_200(self, make_client, alumnus, pending_profile):
        client = make_client(alumnus)

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=pending_profile)
            response = client.get(f"/api/v1/alumni-profiles/{pending_profile.id}")

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"name", "school", "graduation_year", "degree", "status"}
        assert body["status"] == "pending"
        assert "email" not in body

    def test_approved_profile_full(self, make_client, alumnus, approved_profile):
        client = make_client(alumnus)

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=approved_profile)
            response = client.get(f"/api/v1/alumni-profiles/{approved_profile.id}")

        assert response.status_code == 200
        body = response.json()
        assert body["email"] == "ada@alumni.test"
        assert body["status"] == "approved"


class TestAdminDecision:
    def test_non_admin_gets_403(self, make_client, alumnus, pending_profile):
        client = make_client(alumnus)

        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch("alumni_portal.modules.alumni_profiles.admin_router.enforce_rate_limit", new=AsyncMock()),
        ):
            mock_repo.get_by_id_for_update = AsyncMock(return_value=pending_profile)
            response = client.post(f"/api/v1/admin/alumni-profiles/{pending_profile.id}/approve")

        assert response.status_code == 403
        assert response.json()["detail"]["error"] == "ROLE_NOT_PERMITTED"

    def test_list_requires_admin(self, make_client, applicant):
        client = make_client(applicant)
        response = client.get("/api/v1/admin/alumni-profiles")
        assert response.status_code == 403

    def test_opted_out_owner_not_reported_as_failure(self, make_client, admin, pending_profile):
        client = make_client(admin)

        async def _apply(db, profile, status, *, admin_comment, reviewed_by):
            profile.status = status
            return profile

        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.UserRepository") as mock_users,
            patch(f"{SERVICE}.should_notify", new=AsyncMock(return_value=False)),
            patch(f"{SERVICE}.dispatch_notification", new=AsyncMock()) as mock_dispatch,
            patch("alumni_portal.modules.alumni_profiles.admin_router.enforce_rate_limit", new=AsyncMock()),
        ):
            mock_repo.get_by_id_for_update = AsyncMock(return_value=pending_profile)
            mock_repo.apply_decision = AsyncMock(side_effect=_apply)
            mock_users.promote_to_registered_alumni = AsyncMock(return_value=True)
            response = client.post(f"/api/v1/admin/alumni-profiles/{pending_profile.id}/approve")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "approved"
        assert body["email_sent"] is False
        assert body["email_opted_out"] is True
        assert "could not be sent" not in body["message"]
        mock_dispatch.assert_not_awaited()
