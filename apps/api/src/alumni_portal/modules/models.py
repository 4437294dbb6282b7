"""
Model registry.

Imports every ORM model so relationships resolve and ``Base.metadata``
knows all tables before ``create_all`` runs.
"""

from alumni_portal.modules.alumni_profiles.models import AlumniProfile
from alumni_portal.modules.events.models import Event, EventRegistration
from alumni_portal.modules.jobs.models import JobApplication, JobPosting
from alumni_portal.modules.messages.models import Message
from alumni_portal.modules.notifications.models import NotificationPreference
from alumni_portal.modules.schools.models import School
from alumni_portal.modules.users.models import User

__all__ = [
    "AlumniProfile",
    "Event",
    "EventRegistration",
    "JobApplication",
    "JobPosting",
    "Message",
    "NotificationPreference",
    "School",
    "User",
]
