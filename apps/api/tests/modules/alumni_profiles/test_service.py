"""
Tests for alumni profile service functions.

These tests verify:
- Atomic approve/reject (status + role promotion in one commit)
- Rollback with no partial effect when persistence fails
- Best-effort notification reported as ``email_sent``
- Idempotent repeat decisions and conflicting decisions
- Self-edit status rule and redacted viewing
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, call, patch
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from alumni_portal.core.email import EmailTemplate, SendResult
from alumni_portal.core.exceptions import ForbiddenError
from alumni_portal.modules.alumni_profiles.models import ProfileDecision, ProfileStatus
from alumni_portal.modules.alumni_profiles.schemas import (
    ProfileResponse,
    ProfileSubmitRequest,
    ProfileUpdateRequest,
    RedactedProfileResponse,
)
from alumni_portal.modules.alumni_profiles.service import (
    ProfileAlreadyDecidedError,
    ProfileDecisionError,
    ProfileExistsError,
    ProfileNotFoundError,
    decide_profile,
    get_profile,
    list_directory,
    submit_or_update_profile,
    submit_profile,
)
from alumni_portal.modules.users.models import UserRole

SERVICE = "alumni_portal.modules.alumni_profiles.service"


def _apply_decision_side_effect():
    async def _apply(db, profile, status, *, admin_comment, reviewed_by):
        profile.status = status
        profile.admin_comment = admin_comment
        profile.reviewed_by = reviewed_by
        return profile

    return _apply


def _promote_side_effect(profile):
    async def _promote(db, user_id):
        profile.user.role = UserRole.REGISTERED_ALUMNI
        return True

    return _promote


# ============================================
# Decisions
# ============================================


class TestApproveProfile:
    @pytest.mark.asyncio
    async def test_approve_promotes_owner_in_one_commit(self, mock_db, admin, pending_profile):
        """Approval sets status and role, then commits exactly once."""
        order = MagicMock()

        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.UserRepository") as mock_users,
            patch(f"{SERVICE}.should_notify", new=AsyncMock(return_value=True)),
            patch(
                f"{SERVICE}.dispatch_notification",
                new=AsyncMock(return_value=SendResult(success=True, message_id="m1")),
            ) as mock_dispatch,
        ):
            mock_repo.get_by_id_for_update = AsyncMock(return_value=pending_profile)
            mock_repo.apply_decision = AsyncMock(side_effect=_apply_decision_side_effect())
            mock_users.promote_to_registered_alumni = AsyncMock(
                side_effect=_promote_side_effect(pending_profile)
            )
            order.attach_mock(mock_users.promote_to_registered_alumni, "promote")
            order.attach_mock(mock_db.commit, "commit")

            result = await decide_profile(
                mock_db, admin, pending_profile.id, ProfileDecision.APPROVE, comment="Welcome"
            )

        assert result.changed is True
        assert result.email_sent is True
        assert result.profile.status == ProfileStatus.APPROVED
        assert result.profile.user.role == UserRole.REGISTERED_ALUMNI

        mock_repo.apply_decision.assert_awaited_once_with(
            mock_db,
            pending_profile,
            ProfileStatus.APPROVED,
            admin_comment="Welcome",
            reviewed_by=admin.id,
        )
        mock_db.commit.assert_awaited_once()
        mock_db.rollback.assert_not_awaited()
        assert order.mock_calls[:2] == [
            call.promote(mock_db, pending_profile.user_id),
            call.commit(),
        ]

        template, recipient, data = mock_dispatch.call_args.args
        assert template == EmailTemplate.PROFILE_APPROVED
        assert recipient == "ada@alumni.test"
        assert data["comment"] == "Welcome"

    @pytest.mark.asyncio
    async def test_email_failure_does_not_fail_approval(self, mock_db, admin, pending_profile):
        """Dispatcher failure: approved, role promoted, email_sent=False."""
        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.UserRepository") as mock_users,
            patch(f"{SERVICE}.should_notify", new=AsyncMock(return_value=True)),
            patch(
                f"{SERVICE}.dispatch_notification",
                new=AsyncMock(return_value=SendResult(success=False, error="provider down")),
            ),
        ):
            mock_repo.get_by_id_for_update = AsyncMock(return_value=pending_profile)
            mock_repo.apply_decision = AsyncMock(side_effect=_apply_decision_side_effect())
            mock_users.promote_to_registered_alumni = AsyncMock(
                side_effect=_promote_side_effect(pending_profile)
            )

            result = await decide_profile(mock_db, admin, pending_profile.id, ProfileDecision.APPROVE)

        assert result.profile.status == ProfileStatus.APPROVED
        assert result.profile.user.role == UserRole.REGISTERED_ALUMNI
        assert result.email_sent is False
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_dispatcher_exception_is_contained(self, mock_db, admin, pending_profile):
        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.UserRepository") as mock_users,
            patch(f"{SERVICE}.should_notify", new=AsyncMock(return_value=True)),
            patch(f"{SERVICE}.dispatch_notification", new=AsyncMock(side_effect=RuntimeError("boom"))),
        ):
            mock_repo.get_by_id_for_update = AsyncMock(return_value=pending_profile)
            mock_repo.apply_decision = AsyncMock(side_effect=_apply_decision_side_effect())
            mock_users.promote_to_registered_alumni = AsyncMock(return_value=True)

            result = await decide_profile(mock_db, admin, pending_profile.id, ProfileDecision.APPROVE)

        assert result.changed is True
        assert result.email_sent is False

    @pytest.mark.asyncio
    async def test_promotion_failure_rolls_back_everything(self, mock_db, admin, pending_profile):
        """A failing role update leaves nothing committed."""
        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.UserRepository") as mock_users,
            patch(f"{SERVICE}.dispatch_notification", new=AsyncMock()) as mock_dispatch,
        ):
            mock_repo.get_by_id_for_update = AsyncMock(return_value=pending_profile)
            mock_repo.apply_decision = AsyncMock(side_effect=_apply_decision_side_effect())
            mock_users.promote_to_registered_alumni = AsyncMock(
                side_effect=OperationalError("UPDATE users", {}, Exception("connection lost"))
            )

            with pytest.raises(ProfileDecisionError) as exc_info:
                await decide_profile(mock_db, admin, pending_profile.id, ProfileDecision.APPROVE)

        assert exc_info.value.status_code == 500
        assert exc_info.value.error_code == "PROFILE_DECISION_FAILED"
        mock_db.rollback.assert_awaited_once()
        mock_db.commit.assert_not_awaited()
        mock_dispatch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_commit_failure_rolls_back(self, mock_db, admin, pending_profile):
        mock_db.commit = AsyncMock(side_effect=OperationalError("COMMIT", {}, Exception("lost")))

        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.UserRepository") as mock_users,
        ):
            mock_repo.get_by_id_for_update = AsyncMock(return_value=pending_profile)
            mock_repo.apply_decision = AsyncMock()
            mock_users.promote_to_registered_alumni = AsyncMock(return_value=True)

            with pytest.raises(ProfileDecisionError):
                await decide_profile(mock_db, admin, pending_profile.id, ProfileDecision.APPROVE)

        mock_db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_notify_false_sends_nothing(self, mock_db, admin, pending_profile):
        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.UserRepository") as mock_users,
            patch(f"{SERVICE}.dispatch_notification", new=AsyncMock()) as mock_dispatch,
        ):
            mock_repo.get_by_id_for_update = AsyncMock(return_value=pending_profile)
            mock_repo.apply_decision = AsyncMock(side_effect=_apply_decision_side_effect())
            mock_users.promote_to_registered_alumni = AsyncMock(return_value=True)

            result = await decide_profile(
                mock_db, admin, pending_profile.id, ProfileDecision.APPROVE, notify=False
            )

        assert result.email_sent is False
        assert result.email_opted_out is False
        mock_dispatch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_opted_out_owner_not_emailed(self, mock_db, admin, pending_profile):
        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.UserRepository") as mock_users,
            patch(f"{SERVICE}.should_notify", new=AsyncMock(return_value=False)),
            patch(f"{SERVICE}.dispatch_notification", new=AsyncMock()) as mock_dispatch,
        ):
            mock_repo.get_by_id_for_update = AsyncMock(return_value=pending_profile)
            mock_repo.apply_decision = AsyncMock(side_effect=_apply_decision_side_effect())
            mock_users.promote_to_registered_alumni = AsyncMock(return_value=True)

            result = await decide_profile(mock_db, admin, pending_profile.id, ProfileDecision.APPROVE)

        assert result.email_sent is False
        assert result.email_opted_out is True
        mock_dispatch.assert_not_awaited()


class TestRejectProfile:
    @pytest.mark.asyncio
    async def test_reject_leaves_role_unchanged(self, mock_db, admin, pending_profile):
        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.UserRepository") as mock_users,
            patch(f"{SERVICE}.should_notify", new=AsyncMock(return_value=True)),
            patch(
                f"{SERVICE}.dispatch_notification",
                new=AsyncMock(return_value=SendResult(success=True)),
            ) as mock_dispatch,
        ):
            mock_repo.get_by_id_for_update = AsyncMock(return_value=pending_profile)
            mock_repo.apply_decision = AsyncMock(side_effect=_apply_decision_side_effect())
            mock_users.promote_to_registered_alumni = AsyncMock()

            result = await decide_profile(
                mock_db, admin, pending_profile.id, ProfileDecision.REJECT, comment="Unverified"
            )

        assert result.profile.status == ProfileStatus.REJECTED
        assert result.profile.user.role == UserRole.APPLIED_ALUMNI
        mock_users.promote_to_registered_alumni.assert_not_awaited()
        mock_db.commit.assert_awaited_once()
        assert mock_dispatch.call_args.args[0] == EmailTemplate.PROFILE_REJECTED


class TestDecisionEdgeCases:
    @pytest.mark.asyncio
    async def test_repeat_decision_is_noop(self, mock_db, admin, approved_profile):
        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.UserRepository") as mock_users,
            patch(f"{SERVICE}.dispatch_notification", new=AsyncMock()) as mock_dispatch,
        ):
            mock_repo.get_by_id_for_update = AsyncMock(return_value=approved_profile)
            mock_repo.apply_decision = AsyncMock()
            mock_users.promote_to_registered_alumni = AsyncMock()

            result = await decide_profile(mock_db, admin, approved_profile.id, ProfileDecision.APPROVE)

        assert result.changed is False
        assert result.email_sent is False
        assert result.profile.status == ProfileStatus.APPROVED
        mock_repo.apply_decision.assert_not_awaited()
        mock_users.promote_to_registered_alumni.assert_not_awaited()
        mock_dispatch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_opposite_decision_conflicts(self, mock_db, admin, approved_profile):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id_for_update = AsyncMock(return_value=approved_profile)
            mock_repo.apply_decision = AsyncMock()

            with pytest.raises(ProfileAlreadyDecidedError) as exc_info:
                await decide_profile(mock_db, admin, approved_profile.id, ProfileDecision.REJECT)

        assert exc_info.value.status_code == 409
        assert exc_info.value.error_code == "PROFILE_ALREADY_DECIDED"
        mock_db.rollback.assert_awaited_once()
        mock_repo.apply_decision.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rejected_cannot_be_approved_directly(self, mock_db, admin, rejected_profile):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id_for_update = AsyncMock(return_value=rejected_profile)

            with pytest.raises(ProfileAlreadyDecidedError):
                await decide_profile(mock_db, admin, rejected_profile.id, ProfileDecision.APPROVE)

    @pytest.mark.asyncio
    async def test_not_found(self, mock_db, admin):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id_for_update = AsyncMock(return_value=None)

            with pytest.raises(ProfileNotFoundError):
                await decide_profile(mock_db, admin, uuid4(), ProfileDecision.APPROVE)

        mock_db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_non_admin_forbidden(self, mock_db, alumnus):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id_for_update = AsyncMock()

            with pytest.raises(ForbiddenError):
                await decide_profile(mock_db, alumnus, uuid4(), ProfileDecision.APPROVE)

        mock_repo.get_by_id_for_update.assert_not_awaited()


# ============================================
# Submission and self-edit
# ============================================


class TestSubmitProfile:
    @pytest.mark.asyncio
    async def test_submit_creates_pending(self, mock_db, applicant, pending_profile):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_user_id = AsyncMock(return_value=None)
            mock_repo.create = AsyncMock(return_value=pending_profile)

            result = await submit_profile(mock_db, applicant, ProfileSubmitRequest(graduation_year=2015))

        assert result.status == ProfileStatus.PENDING
        mock_repo.create.assert_awaited_once_with(mock_db, applicant.id, {"graduation_year": 2015})
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_submit_twice_conflicts(self, mock_db, applicant, pending_profile):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_user_id = AsyncMock(return_value=pending_profile)
            mock_repo.create = AsyncMock()

            with pytest.raises(ProfileExistsError):
                await submit_profile(mock_db, applicant, ProfileSubmitRequest())

        mock_repo.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_concurrent_insert_maps_to_profile_exists(self, mock_db, applicant):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_user_id = AsyncMock(return_value=None)
            mock_repo.create = AsyncMock(
                side_effect=IntegrityError("INSERT", {}, Exception("duplicate key"))
            )

            with pytest.raises(ProfileExistsError) as exc_info:
                await submit_profile(mock_db, applicant, ProfileSubmitRequest())

        assert exc_info.value.error_code == "PROFILE_EXISTS"
        mock_db.rollback.assert_awaited_once()


class TestSelfEdit:
    @pytest.mark.asyncio
    async def test_edit_approved_stays_approved(self, mock_db, principal_factory, approved_profile):
        owner = principal_factory(UserRole.REGISTERED_ALUMNI, id=approved_profile.user_id)

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_user_id_for_update = AsyncMock(return_value=approved_profile)
            mock_repo.update_fields = AsyncMock()
            mock_repo.update_status = AsyncMock()

            result = await submit_or_update_profile(
                mock_db, owner, ProfileUpdateRequest(bio="Now writing compilers.")
            )

        assert result.status == ProfileStatus.APPROVED
        mock_repo.update_fields.assert_awaited_once_with(
            mock_db, approved_profile, {"bio": "Now writing compilers."}
        )
        mock_repo.update_status.assert_not_awaited()
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_edit_rejected_returns_to_pending(self, mock_db, principal_factory, rejected_profile):
        owner = principal_factory(UserRole.APPLIED_ALUMNI, id=rejected_profile.user_id)

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_user_id_for_update = AsyncMock(return_value=rejected_profile)
            mock_repo.update_fields = AsyncMock()
            mock_repo.update_status = AsyncMock()

            await submit_or_update_profile(mock_db, owner, ProfileUpdateRequest(graduation_year=2016))

        mock_repo.update_status.assert_awaited_once_with(
            mock_db, rejected_profile, ProfileStatus.PENDING
        )

    def test_status_not_accepted_from_body(self):
        request = ProfileUpdateRequest.model_validate({"status": "approved", "bio": "x"})
        assert "status" not in request.profile_values()

    @pytest.mark.asyncio
    async def test_edit_creates_when_missing(self, mock_db, applicant, pending_profile):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_user_id_for_update = AsyncMock(return_value=None)
            mock_repo.create = AsyncMock(return_value=pending_profile)

            result = await submit_or_update_profile(mock_db, applicant, ProfileUpdateRequest(bio="Hi"))

        assert result is pending_profile
        mock_repo.create.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_contact_fields_update_user(self, mock_db, principal_factory, approved_profile):
        owner = principal_factory(UserRole.REGISTERED_ALUMNI, id=approved_profile.user_id)

        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.UserRepository") as mock_users,
        ):
            mock_repo.get_by_user_id_for_update = AsyncMock(return_value=approved_profile)
            mock_repo.update_fields = AsyncMock()
            mock_users.get_by_id = AsyncMock(return_value=approved_profile.user)
            mock_users.update_contact_fields = AsyncMock()

            await submit_or_update_profile(mock_db, owner, ProfileUpdateRequest(city="Paris"))

        mock_users.update_contact_fields.assert_awaited_once_with(
            mock_db, approved_profile.user, city="Paris"
        )


# ============================================
# Viewing
# ============================================


class TestGetProfile:
    @pytest.mark.asyncio
    async def test_pending_redacted_for_other_user(self, mock_db, alumnus, pending_profile):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=pending_profile)
            result = await get_profile(mock_db, alumnus, pending_profile.id)

        assert isinstance(result, RedactedProfileResponse)
        assert set(result.model_dump()) == {"name", "school", "graduation_year", "degree", "status"}

    @pytest.mark.asyncio
    async def test_approved_full_for_other_user(self, mock_db, alumnus, approved_profile):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=approved_profile)
            result = await get_profile(mock_db, alumnus, approved_profile.id)

        assert isinstance(result, ProfileResponse)
        assert result.email == "ada@alumni.test"

    @pytest.mark.asyncio
    async def test_pending_full_for_admin(self, mock_db, admin, pending_profile):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=pending_profile)
            result = await get_profile(mock_db, admin, pending_profile.id)

        assert isinstance(result, ProfileResponse)

    @pytest.mark.asyncio
    async def test_missing_profile(self, mock_db, alumnus):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=None)
            with pytest.raises(ProfileNotFoundError):
                await get_profile(mock_db, alumnus, uuid4())


class TestDirectory:
    @pytest.mark.asyncio
    async def test_grouped_by_school_alphabetically(self, mock_db, profile_factory):
        engineering = profile_factory(ProfileStatus.APPROVED)
        arts = profile_factory(ProfileStatus.APPROVED)
        arts.school.name = "School of Arts"
        unaffiliated = profile_factory(ProfileStatus.APPROVED)
        unaffiliated.school = None
        unaffiliated.school_id = None

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_approved_profiles = AsyncMock(return_value=[engineering, arts, unaffiliated])
            groups = await list_directory(mock_db, None)

        assert [g.school_name for g in groups] == [
            "School of Arts",
            "School of Engineering",
            "Unaffiliated",
        ]
        assert all(len(g.alumni) == 1 for g in groups)


# ============================================
# Edits racing decisions
# ============================================


class LockingProfileStore:
    """
    One committed profile row behind a row lock.

    Locked reads return a fresh copy of the committed row; commit writes the
    session's copy back and releases the lock.
    """

    def __init__(self, profile, profile_factory):
        self.profile_factory = profile_factory
        self.row = {"status": profile.status, "bio": profile.bio}
        self.template = profile
        self.lock = asyncio.Lock()
        self.events: list[str] = []

    def session(self, name):
        return FakeSession(self, name)

    async def _locked_read(self, db):
        await self.lock.acquire()
        db.holds_lock = True
        db.profile = self.profile_factory(self.row["status"], owner_id=self.template.user_id)
        db.profile.id = self.template.id
        db.profile.bio = self.row["bio"]
        self.events.append(f"{db.name}:read:{self.row['status'].value}")
        return db.profile

    async def get_by_id_for_update(self, db, profile_id):
        return await self._locked_read(db)

    async def get_by_user_id_for_update(self, db, user_id):
        return await self._locked_read(db)

    async def update_fields(self, db, profile, values):
        for key, value in values.items():
            setattr(profile, key, value)
        await asyncio.sleep(0)
        return profile

    async def update_status(self, db, profile, status, **kwargs):
        profile.status = status
        return profile

    async def apply_decision(self, db, profile, status, *, admin_comment, reviewed_by):
        profile.status = status
        # Give the owner's edit a chance to run while the decision is open
        for _ in range(5):
            await asyncio.sleep(0)
        return profile


class FakeSession:
    def __init__(self, store, name):
        self.store = store
        self.name = name
        self.profile = None
        self.holds_lock = False

    async def commit(self):
        if self.profile is not None:
            self.store.row = {"status": self.profile.status, "bio": self.profile.bio}
            self.store.events.append(f"{self.name}:commit:{self.profile.status.value}")
        self._release()

    async def rollback(self):
        self._release()

    async def flush(self):
        pass

    def _release(self):
        if self.holds_lock:
            self.holds_lock = False
            self.store.lock.release()


class TestEditDuringDecision:
    @pytest.mark.asyncio
    async def test_rejection_committed_mid_edit_still_requeues(
        self, admin, principal_factory, profile_factory, pending_profile
    ):
        """An edit that waits on a rejection re-reads it and goes back to PENDING."""
        store = LockingProfileStore(pending_profile, profile_factory)
        owner = principal_factory(UserRole.APPLIED_ALUMNI, id=pending_profile.user_id)

        with patch(f"{SERVICE}.repository", new=store):
            decision, edited = await asyncio.gather(
                decide_profile(
                    store.session("admin"),
                    admin,
                    pending_profile.id,
                    ProfileDecision.REJECT,
                    notify=False,
                ),
                submit_or_update_profile(
                    store.session("owner"), owner, ProfileUpdateRequest(bio="v2 resubmitted")
                ),
            )

        assert decision.profile.status == ProfileStatus.REJECTED
        assert store.events == [
            "admin:read:pending",
            "admin:commit:rejected",
            "owner:read:rejected",
            "owner:commit:pending",
        ]
        assert store.row == {"status": ProfileStatus.PENDING, "bio": "v2 resubmitted"}
        assert edited.status == ProfileStatus.PENDING

    @pytest.mark.asyncio
    async def test_edit_reads_profile_under_lock(self, mock_db, principal_factory, pending_profile):
        owner = principal_factory(UserRole.APPLIED_ALUMNI, id=pending_profile.user_id)

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_user_id_for_update = AsyncMock(return_value=pending_profile)
            mock_repo.get_by_user_id = AsyncMock()
            mock_repo.update_fields = AsyncMock()
            mock_repo.update_status = AsyncMock()

            await submit_or_update_profile(mock_db, owner, ProfileUpdateRequest(bio="v2"))

        mock_repo.get_by_user_id_for_update.assert_awaited_once_with(mock_db, owner.id)
        mock_repo.get_by_user_id.assert_not_awaited()
