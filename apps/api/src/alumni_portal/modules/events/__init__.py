"""
Events module - Alumni events and registrations.
"""

from alumni_portal.modules.events.router import router

__all__ = ["router"]
