"""
Shared module - Base model and helpers used across feature modules.
"""

from alumni_portal.modules.shared.models import BaseModel

__all__ = ["BaseModel"]
