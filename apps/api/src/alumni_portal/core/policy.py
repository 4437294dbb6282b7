"""
Authorization Policy

Maps (principal, action, resource) to an allow/deny decision. Rules are
evaluated in order:

1. Public reads are allowed for everyone, including anonymous callers.
   Every other action requires a principal.
2. The principal's role must grant the action (ROLE_PERMISSIONS covers every
   UserRole member; a missing role fails at import time).
3. Ownership-scoped actions additionally require the principal to own the
   resource. Administrators bypass ownership except for OWNER_ONLY_ACTIONS.

Services call ``enforce`` which raises UnauthenticatedError / ForbiddenError.
"""

import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from alumni_portal.core.exceptions import ForbiddenError, UnauthenticatedError
from alumni_portal.modules.users.models import UserRole

if TYPE_CHECKING:
    from alumni_portal.core.auth import Principal

logger = logging.getLogger(__name__)


class Action(str, enum.Enum):
    """Every action the policy decides on."""

    # Public reads
    SCHOOL_LIST = "school:list"
    DIRECTORY_VIEW = "directory:view"
    JOB_LIST = "job:list"
    JOB_VIEW = "job:view"
    EVENT_LIST = "event:list"
    EVENT_VIEW = "event:view"

    # Profiles
    PROFILE_SUBMIT = "profile:submit"
    PROFILE_EDIT_OWN = "profile:edit_own"
    PROFILE_VIEW = "profile:view"
    PROFILE_LIST_ALL = "profile:list_all"
    PROFILE_DECIDE = "profile:decide"
    CONTACT_LIST = "contact:list"

    # Jobs and applications
    JOB_CREATE = "job:create"
    JOB_UPDATE = "job:update"
    JOB_DELETE = "job:delete"
    JOB_APPLY = "job:apply"
    APPLICATION_LIST_FOR_JOB = "application:list_for_job"
    APPLICATION_LIST_RECEIVED = "application:list_received"
    APPLICATION_LIST_ALL = "application:list_all"
    APPLICATION_DECIDE = "application:decide"

    # Events
    EVENT_CREATE = "event:create"
    EVENT_UPDATE = "event:update"
    EVENT_DELETE = "event:delete"
    EVENT_REGISTER = "event:register"
    EVENT_REGISTRATIONS_VIEW = "event:registrations_view"

    # Messages
    MESSAGE_LIST = "message:list"
    MESSAGE_SEND = "message:send"
    MESSAGE_VIEW = "message:view"
    MESSAGE_DELETE = "message:delete"
    MESSAGE_MARK_READ = "message:mark_read"

    # Preferences
    PREFERENCES_MANAGE = "preferences:manage"


class DenyReason(str, enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    ROLE_NOT_PERMITTED = "role_not_permitted"
    NOT_OWNER = "not_owner"


@dataclass(frozen=True)
class Decision:
    """Result of an authorization check."""

    allowed: bool
    reason: DenyReason | None = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenyReason) -> "Decision":
        return cls(allowed=False, reason=reason)


PUBLIC_ACTIONS: frozenset[Action] = frozenset(
    {
        Action.SCHOOL_LIST,
        Action.DIRECTORY_VIEW,
        Action.JOB_LIST,
        Action.JOB_VIEW,
        Action.EVENT_LIST,
        Action.EVENT_VIEW,
    }
)

# Granted to every signed-in role
_AUTHENTICATED: frozenset[Action] = frozenset(
    {
        Action.PROFILE_SUBMIT,
        Action.PROFILE_EDIT_OWN,
        Action.PROFILE_VIEW,
        Action.CONTACT_LIST,
        Action.MESSAGE_LIST,
        Action.MESSAGE_VIEW,
        Action.MESSAGE_DELETE,
        Action.MESSAGE_MARK_READ,
        Action.PREFERENCES_MANAGE,
    }
)

# Owner-scoped management shared by alumni (own resources) and admins (any)
_MANAGE: frozenset[Action] = frozenset(
    {
        Action.JOB_UPDATE,
        Action.JOB_DELETE,
        Action.APPLICATION_LIST_FOR_JOB,
        Action.APPLICATION_DECIDE,
        Action.EVENT_UPDATE,
        Action.EVENT_DELETE,
        Action.EVENT_REGISTRATIONS_VIEW,
    }
)

ROLE_PERMISSIONS: dict[UserRole, frozenset[Action]] = {
    UserRole.VISITOR: _AUTHENTICATED,
    UserRole.APPLIED_ALUMNI: _AUTHENTICATED,
    UserRole.REGISTERED_ALUMNI: _AUTHENTICATED
    | _MANAGE
    | {
        Action.JOB_CREATE,
        Action.JOB_APPLY,
        Action.APPLICATION_LIST_RECEIVED,
        Action.EVENT_CREATE,
        Action.EVENT_REGISTER,
        Action.MESSAGE_SEND,
    },
    UserRole.ADMINISTRATIVE: _AUTHENTICATED
    | _MANAGE
    | {
        Action.PROFILE_LIST_ALL,
        Action.PROFILE_DECIDE,
        Action.APPLICATION_LIST_ALL,
        Action.APPLICATION_LIST_RECEIVED,
    },
}

_unmapped = set(UserRole) - set(ROLE_PERMISSIONS)
if _unmapped:
    raise RuntimeError(f"ROLE_PERMISSIONS missing roles: {sorted(r.value for r in _unmapped)}")

# Resource attributes holding the owner id(s) for ownership-scoped actions
OWNERSHIP_RULES: dict[Action, tuple[str, ...]] = {
    Action.PROFILE_EDIT_OWN: ("user_id",),
    Action.JOB_UPDATE: ("alumni_id",),
    Action.JOB_DELETE: ("alumni_id",),
    Action.APPLICATION_LIST_FOR_JOB: ("alumni_id",),
    Action.APPLICATION_DECIDE: ("alumni_id",),
    Action.EVENT_UPDATE: ("organizer_id",),
    Action.EVENT_DELETE: ("organizer_id",),
    Action.EVENT_REGISTRATIONS_VIEW: ("organizer_id",),
    Action.MESSAGE_VIEW: ("sender_id", "recipient_id"),
    Action.MESSAGE_DELETE: ("sender_id", "recipient_id"),
    Action.MESSAGE_MARK_READ: ("recipient_id",),
}

# Ownership checks administrators do not bypass
OWNER_ONLY_ACTIONS: frozenset[Action] = frozenset(
    {
        Action.PROFILE_EDIT_OWN,
        Action.MESSAGE_MARK_READ,
    }
)


def _owner_ids(resource: Any, attributes: tuple[str, ...]) -> set[Any]:
    return {getattr(resource, attr, None) for attr in attributes} - {None}


def authorize(
    principal: "Principal | None",
    action: Action,
    resource: Any = None,
) -> Decision:
    """
    Decide whether ``principal`` may perform ``action`` on ``resource``.

    Args:
        principal: The caller, or None for anonymous requests
        action: The action being attempted
        resource: The target record for ownership-scoped actions (a job
            posting for application decisions)

    Returns:
        Decision.allow() or Decision.deny(reason)
    """
    if action in PUBLIC_ACTIONS:
        return Decision.allow()

    if principal is None:
        return Decision.deny(DenyReason.UNAUTHENTICATED)

    if action not in ROLE_PERMISSIONS[principal.role]:
        return Decision.deny(DenyReason.ROLE_NOT_PERMITTED)

    owner_attributes = OWNERSHIP_RULES.get(action)
    if owner_attributes is None:
        return Decision.allow()

    if principal.role == UserRole.ADMINISTRATIVE and action not in OWNER_ONLY_ACTIONS:
        return Decision.allow()

    if resource is not None and principal.id in _owner_ids(resource, owner_attributes):
        return Decision.allow()

    return Decision.deny(DenyReason.NOT_OWNER)


def enforce(
    principal: "Principal | None",
    action: Action,
    resource: Any = None,
) -> None:
    """
    Raise unless ``authorize`` allows the action.

    Raises:
        UnauthenticatedError: If there is no principal
        ForbiddenError: If the policy denies the action
    """
    decision = authorize(principal, action, resource)
    if decision.allowed:
        return

    if decision.reason == DenyReason.UNAUTHENTICATED:
        raise UnauthenticatedError()

    logger.warning(f"Policy denied {action.value} for {principal}: {decision.reason.value}")
    if decision.reason == DenyReason.NOT_OWNER:
        raise ForbiddenError(
            "You can only perform this action on your own records.",
            error_code="NOT_RESOURCE_OWNER",
        )
    raise ForbiddenError(
        f"Your role does not permit this action ({action.value}).",
        error_code="ROLE_NOT_PERMITTED",
    )


__all__ = [
    "Action",
    "Decision",
    "DenyReason",
    "OWNERSHIP_RULES",
    "PUBLIC_ACTIONS",
    "ROLE_PERMISSIONS",
    "authorize",
    "enforce",
]
