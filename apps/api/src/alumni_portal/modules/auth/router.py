"""Authentication router."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from alumni_portal.core.auth import Principal, get_current_principal
from alumni_portal.core.database import get_db
from alumni_portal.core.security import (
    create_access_token,
    create_refresh_token,
    hash_password,
    verify_password,
)
from alumni_portal.modules.auth.schemas import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    UserResponse,
)
from alumni_portal.modules.users.models import User, UserRole
from alumni_portal.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

router = APIRouter()


def _user_exists() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={
            "error": "USER_EXISTS",
            "message": "That username or email is already registered.",
        },
    )


def _issue_tokens(user: User) -> LoginResponse:
    additional_claims = {
        "username": user.username,
        "role": user.role.value,
        "name": user.full_name,
    }

    return LoginResponse(
        access_token=create_access_token(
            subject=str(user.id),
            additional_claims=additional_claims,
        ),
        refresh_token=create_refresh_token(subject=str(user.id)),
        token_type="bearer",
        user=UserResponse.model_validate(user),
    )


@router.post("/register", response_model=LoginResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """
    Create an account and return JWT tokens.

    New accounts get the ``applied_alumni`` role; it changes only when an
    administrator approves the user's alumni profile.

    Raises:
        HTTPException 409: Username or email already registered
    """
    if await UserRepository.username_or_email_exists(db, data.username, data.email):
        logger.warning(f"Registration with existing username or email: {data.username}")
        raise _user_exists()

    contact = data.model_dump(
        include={"address", "city", "country", "zipcode", "mobile", "birth_date"},
        exclude_none=True,
    )

    try:
        user = await UserRepository.create(
            db,
            username=data.username,
            email=data.email,
            password_hash=hash_password(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            role=UserRole.APPLIED_ALUMNI,
            school_id=data.school_id,
            **contact,
        )
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Concurrent registration for {data.username}")
        raise _user_exists() from e

    logger.info(f"User registered: {user.username} (role: {user.role.value})")
    return _issue_tokens(user)


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """
    Authenticate by username or email and return JWT tokens.

    Raises:
        HTTPException 401: Invalid credentials
        HTTPException 403: Account inactive
    """
    user = await UserRepository.get_by_login(db, credentials.login)

    if not user or not verify_password(credentials.password, user.password_hash):
        logger.warning(f"Failed login for: {credentials.login}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "INVALID_CREDENTIALS",
                "message": "Invalid username, email or password.",
            },
        )

    if not user.is_active:
        logger.warning(f"Login attempt for inactive account: {credentials.login}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "ACCOUNT_INACTIVE",
                "message": "Your account has been deactivated.",
            },
        )

    logger.info(f"User logged in: {user.username} (role: {user.role.value})")
    return _issue_tokens(user)


@router.get("/me", response_model=UserResponse)
async def me(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> UserResponse:
    """Current user, with the role as stored now."""
    user = await UserRepository.get_by_id(db, principal.id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "USER_NOT_FOUND", "message": "User not found."},
        )
    return UserResponse.model_validate(user)
