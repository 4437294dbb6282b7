"""
Message Router

Endpoints:
- GET    /messages/inbox - Received messages
- GET    /messages/sent - Sent messages
- GET    /messages/unread-count - Unread count for the caller
- POST   /messages - Send (registered alumni, rate limited)
- GET    /messages/{id} - View (sender, recipient or admin)
- DELETE /messages/{id} - Delete (sender, recipient or admin)
- POST   /messages/{id}/read - Mark read (recipient only)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from alumni_portal.core.auth import Principal, get_current_principal
from alumni_portal.core.database import get_db
from alumni_portal.core.exceptions import ServiceError, to_http_exception
from alumni_portal.core.rate_limit import RATE_LIMIT_MESSAGE_SEND, enforce_rate_limit
from alumni_portal.modules.messages import service
from alumni_portal.modules.messages.models import Message
from alumni_portal.modules.messages.schemas import (
    MessageCreate,
    MessageResponse,
    UnreadCountResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_response(message: Message) -> MessageResponse:
    return MessageResponse(
        id=message.id,
        sender_id=message.sender_id,
        sender_name=message.sender.full_name if message.sender is not None else None,
        recipient_id=message.recipient_id,
        recipient_name=message.recipient.full_name if message.recipient is not None else None,
        subject=message.subject,
        body=message.body,
        is_read=message.is_read,
        read_at=message.read_at,
        created_at=message.created_at,
    )


@router.get("/inbox", response_model=list[MessageResponse], summary="Inbox")
async def get_inbox(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> list[MessageResponse]:
    try:
        messages = await service.list_inbox(db, principal, skip=skip, limit=limit)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return [_to_response(m) for m in messages]


@router.get("/sent", response_model=list[MessageResponse], summary="Sent Messages")
async def get_sent(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> list[MessageResponse]:
    try:
        messages = await service.list_sent(db, principal, skip=skip, limit=limit)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return [_to_response(m) for m in messages]


@router.get("/unread-count", response_model=UnreadCountResponse, summary="Unread Count")
async def get_unread_count(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> UnreadCountResponse:
    try:
        count = await service.unread_count(db, principal)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return UnreadCountResponse(unread_count=count)


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send Message",
    responses={
        403: {"description": "Only registered alumni can send messages"},
        404: {"description": "Recipient not found"},
        429: {"description": "Too many messages"},
    },
)
async def send_message(
    data: MessageCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> MessageResponse:
    await enforce_rate_limit(principal.id, "message:send", *RATE_LIMIT_MESSAGE_SEND)

    try:
        message = await service.send_message(db, principal, data)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error sending message: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "INTERNAL_ERROR",
                "message": "An unexpected error occurred.",
            },
        ) from e
    return _to_response(message)


@router.get(
    "/{message_id}",
    response_model=MessageResponse,
    summary="Get Message",
    responses={403: {"description": "Not a participant"}, 404: {"description": "Message not found"}},
)
async def get_message(
    message_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> MessageResponse:
    try:
        message = await service.get_message(db, principal, message_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return _to_response(message)


@router.delete(
    "/{message_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Message",
    responses={403: {"description": "Not a participant"}, 404: {"description": "Message not found"}},
)
async def delete_message(
    message_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> None:
    try:
        await service.delete_message(db, principal, message_id)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.post(
    "/{message_id}/read",
    response_model=MessageResponse,
    summary="Mark Read",
    responses={403: {"description": "Not the recipient"}, 404: {"description": "Message not found"}},
)
async def mark_read(
    message_id: UUID,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> MessageResponse:
    try:
        message = await service.mark_read(db, principal, message_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return _to_response(message)
