"""
Tests for messaging service functions.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from alumni_portal.core.exceptions import ForbiddenError
from alumni_portal.modules.messages import repository
from alumni_portal.modules.messages.models import Message
from alumni_portal.modules.messages.schemas import MessageCreate
from alumni_portal.modules.messages.service import (
    MessageNotFoundError,
    RecipientNotFoundError,
    get_message,
    mark_read,
    send_message,
)
from alumni_portal.modules.users.models import User

SERVICE = "alumni_portal.modules.messages.service"


def build_message(sender_id, recipient_id):
    message = MagicMock(spec=Message)
    message.id = uuid4()
    message.sender_id = sender_id
    message.recipient_id = recipient_id
    message.is_read = False
    message.read_at = None
    return message


@pytest.fixture
def message(alumnus, other_alumnus):
    """A message from ``alumnus`` to ``other_alumnus``."""
    return build_message(alumnus.id, other_alumnus.id)


class TestSendMessage:
    @pytest.mark.asyncio
    async def test_registered_alumni_can_send(self, mock_db, alumnus):
        recipient = MagicMock(spec=User)
        recipient.id = uuid4()
        recipient.is_active = True
        created = build_message(alumnus.id, recipient.id)

        with (
            patch(f"{SERVICE}.UserRepository") as mock_users,
            patch(f"{SERVICE}.repository") as mock_repo,
        ):
            mock_users.get_by_id = AsyncMock(return_value=recipient)
            mock_repo.create = AsyncMock(return_value=created)

            result = await send_message(
                mock_db, alumnus, MessageCreate(recipient_id=recipient.id, subject="Hi", body="Hello")
            )

        assert result is created
        mock_repo.create.assert_awaited_once_with(
            mock_db, sender_id=alumnus.id, recipient_id=recipient.id, subject="Hi", body="Hello"
        )
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_applied_alumni_cannot_send(self, mock_db, applicant):
        with pytest.raises(ForbiddenError) as exc_info:
            await send_message(
                mock_db, applicant, MessageCreate(recipient_id=uuid4(), subject="Hi", body="Hello")
            )

        assert exc_info.value.error_code == "ROLE_NOT_PERMITTED"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("active", [None, False])
    async def test_missing_or_inactive_recipient(self, mock_db, alumnus, active):
        recipient = None
        if active is not None:
            recipient = MagicMock(spec=User)
            recipient.is_active = active

        with patch(f"{SERVICE}.UserRepository") as mock_users:
            mock_users.get_by_id = AsyncMock(return_value=recipient)

            with pytest.raises(RecipientNotFoundError):
                await send_message(
                    mock_db, alumnus, MessageCreate(recipient_id=uuid4(), subject="Hi", body="Hello")
                )

        mock_db.commit.assert_not_awaited()


class TestReadingMessages:
    @pytest.mark.asyncio
    async def test_admin_can_view(self, mock_db, admin, message):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=message)
            assert await get_message(mock_db, admin, message.id) is message

    @pytest.mark.asyncio
    async def test_third_party_cannot_view(self, mock_db, principal_factory, message):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=message)

            with pytest.raises(ForbiddenError):
                await get_message(mock_db, principal_factory(), message.id)

    @pytest.mark.asyncio
    async def test_unknown_message(self, mock_db, alumnus):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(MessageNotFoundError):
                await get_message(mock_db, alumnus, uuid4())

    @pytest.mark.asyncio
    async def test_recipient_marks_read(self, mock_db, other_alumnus, message):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=message)
            mock_repo.mark_read = AsyncMock(return_value=message)

            await mark_read(mock_db, other_alumnus, message.id)

        mock_repo.mark_read.assert_awaited_once_with(mock_db, message)
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_sender_cannot_mark_read(self, mock_db, alumnus, message):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=message)
            mock_repo.mark_read = AsyncMock()

            with pytest.raises(ForbiddenError):
                await mark_read(mock_db, alumnus, message.id)

        mock_repo.mark_read.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_admin_cannot_mark_read(self, mock_db, admin, message):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=message)
            mock_repo.mark_read = AsyncMock()

            with pytest.raises(ForbiddenError) as exc_info:
                await mark_read(mock_db, admin, message.id)

        assert exc_info.value.error_code == "NOT_RESOURCE_OWNER"


class TestMarkReadRepository:
    @pytest.mark.asyncio
    async def test_first_read_time_is_kept(self, mock_db):
        first_read = datetime(2026, 1, 5, 9, 30, tzinfo=UTC)
        message = Message(sender_id=uuid4(), recipient_id=uuid4(), subject="Hi", body="Hello")
        message.is_read = True
        message.read_at = first_read

        await repository.mark_read(mock_db, message)

        assert message.read_at == first_read

    @pytest.mark.asyncio
    async def test_unread_message_gets_read_time(self, mock_db):
        message = Message(sender_id=uuid4(), recipient_id=uuid4(), subject="Hi", body="Hello")
        message.is_read = False

        await repository.mark_read(mock_db, message)

        assert message.is_read is True
        assert message.read_at is not None
