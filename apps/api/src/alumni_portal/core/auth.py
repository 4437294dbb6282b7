"""
Authentication Dependencies

Resolves the bearer token on a request into a ``Principal``: the explicit,
request-scoped identity passed into every service call. Services never look
up the current user on their own.

The user row is loaded on every request so a role change (profile approval)
takes effect without re-issuing tokens.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from alumni_portal.core.database import get_db
from alumni_portal.core.security import ACCESS_TOKEN_TYPE, decode_token
from alumni_portal.modules.users.models import User, UserRole
from alumni_portal.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

# auto_error=False so a missing header yields our own 401 payload
security = HTTPBearer(
    auto_error=False,
    description="JWT Bearer token for authentication",
)


@dataclass(frozen=True)
class Principal:
    """
    The authenticated identity making a request.

    Attributes:
        id: User's UUID
        role: Current role, read from the database
        username: Login name
        email: Email address (notification recipient)
        name: Display name
        school_id: School affiliation, if any
    """

    id: UUID
    role: UserRole
    username: str
    email: str
    name: str | None = None
    school_id: UUID | None = None

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(
            id=user.id,
            role=user.role,
            username=user.username,
            email=user.email,
            name=user.full_name,
            school_id=user.school_id,
        )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMINISTRATIVE

    def __str__(self) -> str:
        return f"Principal(id={self.id}, username={self.username}, role={self.role.value})"


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _resolve_principal(token: str, db: AsyncSession) -> Principal:
    """
    Validate an access token and load the user it names.

    Raises:
        HTTPException 401: If the token is invalid, expired, of the wrong type,
            or names a missing or inactive user
    """
    payload = decode_token(token)

    if payload is None:
        logger.warning("Invalid or expired JWT token")
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired authentication token.")

    token_type = payload.get("type", ACCESS_TOKEN_TYPE)
    if token_type != ACCESS_TOKEN_TYPE:
        logger.warning(f"Invalid token type: {token_type}")
        raise _unauthorized("INVALID_TOKEN_TYPE", "This endpoint requires an access token.")

    try:
        user_id = UUID(payload["sub"])
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Invalid token claims: {e}")
        raise _unauthorized(
            "INVALID_TOKEN_CLAIMS", "Token contains invalid or missing claims."
        ) from e

    user = await UserRepository.get_by_id(db, user_id)
    if user is None or not user.is_active:
        logger.warning(f"Token for unknown or inactive user: {user_id}")
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired authentication token.")

    return Principal.from_user(user)


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> Principal:
    """
    FastAPI dependency requiring an authenticated caller.

    Usage:
        @router.get("/me")
        async def me(principal: Principal = Depends(get_current_principal)):
            ...

    Raises:
        HTTPException 401: If the token is missing or invalid
    """
    if credentials is None:
        raise _unauthorized("AUTHENTICATION_REQUIRED", "You must be logged in to perform this action.")

    principal = await _resolve_principal(credentials.credentials, db)
    logger.debug(f"Authenticated {principal}")
    return principal


async def get_optional_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> Principal | None:
    """
    Optional authentication for public endpoints.

    Returns None when no token is sent. A token that is sent but invalid is
    still rejected with 401.
    """
    if credentials is None:
        return None
    return await _resolve_principal(credentials.credentials, db)


__all__ = [
    "Principal",
    "get_current_principal",
    "get_optional_principal",
]
