"""
Messages module - Direct messages between users.
"""

from alumni_portal.modules.messages.router import router

__all__ = ["router"]
