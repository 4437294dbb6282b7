"""
Users module - Accounts, roles and the user repository.
"""

from alumni_portal.modules.users.models import User, UserRole
from alumni_portal.modules.users.repository import UserRepository

__all__ = ["User", "UserRole", "UserRepository"]
