"""
Message Service Layer

Direct messaging between users. Any signed-in user can read their own
inbox; only registered alumni can send.
"""

import logging
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from alumni_portal.core.exceptions import NotFoundError
from alumni_portal.core.policy import Action, enforce
from alumni_portal.modules.messages import repository
from alumni_portal.modules.messages.models import Message
from alumni_portal.modules.messages.schemas import MessageCreate
from alumni_portal.modules.users.repository import UserRepository

if TYPE_CHECKING:
    from alumni_portal.core.auth import Principal

logger = logging.getLogger(__name__)


class MessageNotFoundError(NotFoundError):
    def __init__(self, message_id: UUID):
        super().__init__(message=f"Message {message_id} not found", error_code="MESSAGE_NOT_FOUND")


class RecipientNotFoundError(NotFoundError):
    def __init__(self, recipient_id: UUID):
        super().__init__(
            message=f"Recipient {recipient_id} not found",
            error_code="RECIPIENT_NOT_FOUND",
        )


async def _get_message_or_404(db: AsyncSession, message_id: UUID) -> Message:
    message = await repository.get_by_id(db, message_id)
    if message is None:
        raise MessageNotFoundError(message_id)
    return message


async def list_inbox(db: AsyncSession, principal: "Principal", *, skip: int = 0, limit: int = 50) -> list[Message]:
    enforce(principal, Action.MESSAGE_LIST)
    return await repository.list_inbox(db, principal.id, skip=skip, limit=limit)


async def list_sent(db: AsyncSession, principal: "Principal", *, skip: int = 0, limit: int = 50) -> list[Message]:
    enforce(principal, Action.MESSAGE_LIST)
    return await repository.list_sent(db, principal.id, skip=skip, limit=limit)


async def unread_count(db: AsyncSession, principal: "Principal") -> int:
    enforce(principal, Action.MESSAGE_LIST)
    return await repository.count_unread(db, principal.id)


async def send_message(db: AsyncSession, principal: "Principal", data: MessageCreate) -> Message:
    """
    Send a message.

    Raises:
        ForbiddenError: If the sender is not registered alumni
        RecipientNotFoundError: If the recipient doesn't exist or is inactive
    """
    enforce(principal, Action.MESSAGE_SEND)

    recipient = await UserRepository.get_by_id(db, data.recipient_id)
    if recipient is None or not recipient.is_active:
        raise RecipientNotFoundError(data.recipient_id)

    message = await repository.create(
        db,
        sender_id=principal.id,
        recipient_id=recipient.id,
        subject=data.subject,
        body=data.body,
    )
    await db.commit()

    logger.info(f"Message {message.id} sent from {principal.id} to {recipient.id}")
    return message


async def get_message(db: AsyncSession, principal: "Principal", message_id: UUID) -> Message:
    """Sender, recipient or an administrator."""
    message = await _get_message_or_404(db, message_id)
    enforce(principal, Action.MESSAGE_VIEW, message)
    return message


async def mark_read(db: AsyncSession, principal: "Principal", message_id: UUID) -> Message:
    """Recipient only; administrators cannot mark others' messages read."""
    message = await _get_message_or_404(db, message_id)
    enforce(principal, Action.MESSAGE_MARK_READ, message)

    await repository.mark_read(db, message)
    await db.commit()
    return message


async def delete_message(db: AsyncSession, principal: "Principal", message_id: UUID) -> None:
    message = await _get_message_or_404(db, message_id)
    enforce(principal, Action.MESSAGE_DELETE, message)

    await repository.delete(db, message)
    await db.commit()

    logger.info(f"Message {message_id} deleted by {principal.id}")
