"""Message database operations. Functions flush but never commit."""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Message


async def create(
    db: AsyncSession,
    *,
    sender_id: UUID,
    recipient_id: UUID,
    subject: str,
    body: str,
) -> Message:
    message = Message(
        sender_id=sender_id,
        recipient_id=recipient_id,
        subject=subject,
        body=body,
        is_read=False,
    )

    db.add(message)
    await db.flush()
    await db.refresh(message)

    return message


async def get_by_id(db: AsyncSession, message_id: UUID) -> Message | None:
    return await db.get(Message, message_id)


async def list_inbox(db: AsyncSession, user_id: UUID, *, skip: int = 0, limit: int = 50) -> list[Message]:
    result = await db.execute(
        select(Message)
        .where(Message.recipient_id == user_id)
        .order_by(desc(Message.created_at))
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all())


async def list_sent(db: AsyncSession, user_id: UUID, *, skip: int = 0, limit: int = 50) -> list[Message]:
    result = await db.execute(
        select(Message)
        .where(Message.sender_id == user_id)
        .order_by(desc(Message.created_at))
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all())


async def count_unread(db: AsyncSession, user_id: UUID) -> int:
    result = await db.execute(
        select(func.count(Message.id)).where(
            Message.recipient_id == user_id,
            Message.is_read == False,  # noqa: E712
        )
    )
    return result.scalar() or 0


async def mark_read(db: AsyncSession, message: Message) -> Message:
    """Mark read once; the first read time is kept."""
    if not message.is_read:
        message.is_read = True
        message.read_at = datetime.now(UTC)
        await db.flush()
    return message


async def delete(db: AsyncSession, message: Message) -> None:
    await db.delete(message)
    await db.flush()
