"""
Schools module - Schools and faculties used for profiles and directory grouping.
"""

from alumni_portal.modules.schools.router import router

__all__ = ["router"]
