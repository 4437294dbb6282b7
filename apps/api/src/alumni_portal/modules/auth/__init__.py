"""Authentication module."""

from alumni_portal.modules.auth.router import router
from alumni_portal.modules.auth.schemas import LoginRequest, LoginResponse, RegisterRequest

__all__ = ["router", "LoginRequest", "LoginResponse", "RegisterRequest"]
