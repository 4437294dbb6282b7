"""
Unit tests for the alumni profile repository.

These tests focus on the status state machine and the row-locking reads.
"""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.dialects import postgresql

from alumni_portal.modules.alumni_profiles.models import AlumniProfile, ProfileStatus
from alumni_portal.modules.alumni_profiles.repository import (
    VALID_STATUS_TRANSITIONS,
    InvalidStatusTransitionError,
    apply_decision,
    get_by_id_for_update,
    get_by_user_id_for_update,
    update_status,
)


class TestStatusTransitions:
    """Tests for the profile status state machine."""

    def test_every_status_has_an_entry(self):
        assert set(VALID_STATUS_TRANSITIONS) == set(ProfileStatus)

    def test_pending_can_be_decided(self):
        valid = VALID_STATUS_TRANSITIONS[ProfileStatus.PENDING]
        assert valid == {ProfileStatus.APPROVED, ProfileStatus.REJECTED}

    def test_rejected_only_returns_to_pending(self):
        valid = VALID_STATUS_TRANSITIONS[ProfileStatus.REJECTED]
        assert valid == {ProfileStatus.PENDING}
        assert ProfileStatus.APPROVED not in valid

    def test_approved_is_terminal(self):
        assert VALID_STATUS_TRANSITIONS[ProfileStatus.APPROVED] == set()

    def test_error_message_lists_valid_transitions(self):
        error = InvalidStatusTransitionError(ProfileStatus.REJECTED, ProfileStatus.APPROVED)
        assert "rejected -> approved" in str(error)
        assert "pending" in str(error)
        assert error.current_status == ProfileStatus.REJECTED


class TestUpdateStatus:
    @pytest.fixture
    def db(self):
        db = AsyncMock()
        db.flush = AsyncMock()
        return db

    def _profile(self, status):
        profile = MagicMock(spec=AlumniProfile)
        profile.status = status
        return profile

    @pytest.mark.asyncio
    async def test_valid_transition(self, db):
        profile = self._profile(ProfileStatus.PENDING)
        await update_status(db, profile, ProfileStatus.APPROVED, admin_comment="ok")
        assert profile.status == ProfileStatus.APPROVED
        assert profile.admin_comment == "ok"
        db.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_invalid_transition_raises(self, db):
        profile = self._profile(ProfileStatus.APPROVED)
        with pytest.raises(InvalidStatusTransitionError):
            await update_status(db, profile, ProfileStatus.REJECTED)
        assert profile.status == ProfileStatus.APPROVED
        db.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_apply_decision_records_reviewer(self, db):
        profile = self._profile(ProfileStatus.PENDING)
        reviewer = MagicMock()
        await apply_decision(db, profile, ProfileStatus.REJECTED, admin_comment="no", reviewed_by=reviewer)
        assert profile.status == ProfileStatus.REJECTED
        assert profile.reviewed_by is reviewer
        assert profile.reviewed_at is not None


class TestLockedReads:
    @pytest.fixture
    def db(self):
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        db = AsyncMock()
        db.execute = AsyncMock(return_value=result)
        return db

    def _sql(self, db) -> str:
        statement = db.execute.call_args.args[0]
        return str(statement.compile(dialect=postgresql.dialect()))

    @pytest.mark.asyncio
    async def test_owner_read_locks_row(self, db):
        await get_by_user_id_for_update(db, uuid4())

        sql = self._sql(db)
        assert "alumni_profiles.user_id" in sql
        assert sql.rstrip().endswith("FOR UPDATE")

    @pytest.mark.asyncio
    async def test_owner_read_refreshes_loaded_instance(self, db):
        await get_by_user_id_for_update(db, uuid4())

        statement = db.execute.call_args.args[0]
        assert statement.get_execution_options()["populate_existing"] is True

    @pytest.mark.asyncio
    async def test_decision_read_locks_row(self, db):
        await get_by_id_for_update(db, uuid4())

        assert self._sql(db).rstrip().endswith("FOR UPDATE")
