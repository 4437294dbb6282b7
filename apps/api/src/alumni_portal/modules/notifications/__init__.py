"""Notification preferences module."""

from alumni_portal.modules.notifications.router import router

__all__ = ["router"]
