"""
Alumni Profile Service Layer

Business logic for the profile approval workflow.

This module implements:
1. Submission and self-edit:
   - One profile per user (unique user_id; concurrent inserts map to 409)
   - Self-edits keep APPROVED status, otherwise reset to PENDING
2. Administrator decisions:
   - Row-locked, single-transaction approve/reject
   - Approval promotes the owner to REGISTERED_ALUMNI in the same commit
   - Best-effort notification after commit, reported as ``email_sent``
3. Viewing:
   - Full profile for owner, admins, and approved profiles
   - Redacted subset for everyone else (200, not an error)
4. Directory and contact listings
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from alumni_portal.core.email import EmailTemplate, dispatch_notification
from alumni_portal.core.exceptions import (
    ConflictError,
    NotFoundError,
    ServiceError,
    ServiceFailureError,
)
from alumni_portal.core.policy import Action, enforce
from alumni_portal.modules.alumni_profiles import repository
from alumni_portal.modules.alumni_profiles.repository import InvalidStatusTransitionError
from alumni_portal.modules.alumni_profiles.helpers import (
    can_view_full_profile,
    next_status_on_self_edit,
    to_profile_response,
    to_redacted_response,
)
from alumni_portal.modules.alumni_profiles.models import (
    AlumniProfile,
    ProfileDecision,
    ProfileStatus,
)
from alumni_portal.modules.alumni_profiles.schemas import (
    DirectoryEntry,
    DirectorySchoolGroup,
    ProfileResponse,
    ProfileSubmitRequest,
    ProfileUpdateRequest,
    RedactedProfileResponse,
)
from alumni_portal.modules.notifications.service import should_notify
from alumni_portal.modules.users.models import User
from alumni_portal.modules.users.repository import UserRepository

if TYPE_CHECKING:
    from alumni_portal.core.auth import Principal

logger = logging.getLogger(__name__)

DECISION_STATUS: dict[ProfileDecision, ProfileStatus] = {
    ProfileDecision.APPROVE: ProfileStatus.APPROVED,
    ProfileDecision.REJECT: ProfileStatus.REJECTED,
}

DECISION_TEMPLATE: dict[ProfileDecision, EmailTemplate] = {
    ProfileDecision.APPROVE: EmailTemplate.PROFILE_APPROVED,
    ProfileDecision.REJECT: EmailTemplate.PROFILE_REJECTED,
}

UNAFFILIATED_SCHOOL = "Unaffiliated"


class ProfileNotFoundError(NotFoundError):
    """Raised when a profile is not found."""

    def __init__(self, profile_id: UUID | None = None):
        message = f"Profile {profile_id} not found" if profile_id else "Profile not found"
        super().__init__(message=message, error_code="PROFILE_NOT_FOUND")


class ProfileExistsError(ConflictError):
    """Raised when a user submits a second profile."""

    def __init__(self):
        super().__init__(
            message="Profile already exists. Edit your existing profile instead.",
            error_code="PROFILE_EXISTS",
        )


class EmailInUseError(ConflictError):
    def __init__(self):
        super().__init__(
            message="That email address is already used by another account.",
            error_code="EMAIL_IN_USE",
        )


class ProfileAlreadyDecidedError(ConflictError):
    """Raised when a decided profile receives the opposite decision."""

    def __init__(self, current_status: ProfileStatus, decision: ProfileDecision):
        super().__init__(
            message=f"Cannot {decision.value} a profile in status: {current_status.value}. "
            "Only pending profiles can be decided.",
            error_code="PROFILE_ALREADY_DECIDED",
        )


class ProfileDecisionError(ServiceFailureError):
    """Raised when the decision transaction fails and is rolled back."""

    def __init__(self, profile_id: UUID):
        super().__init__(
            message=f"Failed to record decision for profile {profile_id}. No changes were made.",
            error_code="PROFILE_DECISION_FAILED",
        )


@dataclass
class ProfileDecisionResult:
    """Outcome of ``decide_profile``."""

    profile: AlumniProfile
    email_sent: bool
    changed: bool
    # Owner turned off profile_updates; nothing was attempted
    email_opted_out: bool = False


# ============================================
# Submission and self-edit
# ============================================


async def _update_contact_fields(
    db: AsyncSession,
    principal: "Principal",
    contact: dict,
) -> None:
    if not contact:
        return

    user = await UserRepository.get_by_id(db, principal.id)
    if user is None:
        raise NotFoundError(f"User {principal.id} not found", error_code="USER_NOT_FOUND")

    new_email = contact.get("email")
    if new_email and new_email != user.email:
        existing = await UserRepository.get_by_email(db, new_email)
        if existing is not None and existing.id != user.id:
            raise EmailInUseError()

    await UserRepository.update_contact_fields(db, user, **contact)


async def submit_profile(
    db: AsyncSession,
    principal: "Principal",
    data: ProfileSubmitRequest,
) -> AlumniProfile:
    """
    Create the caller's profile in PENDING status.

    Raises:
        ProfileExistsError: If the caller already has a profile
    """
    enforce(principal, Action.PROFILE_SUBMIT)

    if await repository.get_by_user_id(db, principal.id) is not None:
        raise ProfileExistsError()

    try:
        profile = await repository.create(db, principal.id, data.profile_values())
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Concurrent profile submission for user {principal.id}")
        raise ProfileExistsError() from e

    logger.info(f"User {principal.id} submitted profile {profile.id}")
    return profile


async def submit_or_update_profile(
    db: AsyncSession,
    principal: "Principal",
    data: ProfileUpdateRequest,
) -> AlumniProfile:
    """
    Create or edit the caller's own profile.

    Editing an APPROVED profile keeps it approved; editing a PENDING or
    REJECTED profile (re)enters the review queue as PENDING. The request body
    cannot set the status.

    The existing profile row is locked for the transaction, so a concurrent
    administrator decision is applied either fully before or fully after
    the edit.

    Args:
        db: Database session
        principal: The profile owner
        data: Profile fields plus optional contact fields

    Returns:
        The created or updated profile

    Raises:
        ProfileExistsError: If a concurrent submission created the profile first
        EmailInUseError: If the new email belongs to another account
    """
    enforce(principal, Action.PROFILE_SUBMIT)

    profile = await repository.get_by_user_id_for_update(db, principal.id)
    creating = profile is None

    try:
        if creating:
            profile = await repository.create(db, principal.id, data.profile_values())
            logger.info(f"User {principal.id} submitted profile {profile.id}")
        else:
            enforce(principal, Action.PROFILE_EDIT_OWN, profile)
            new_status = next_status_on_self_edit(profile.status)
            await repository.update_fields(db, profile, data.profile_values())
            if new_status != profile.status:
                await repository.update_status(db, profile, new_status)
                logger.info(f"Profile {profile.id} resubmitted for review")

        await _update_contact_fields(db, principal, data.contact_values())
        await db.commit()
    except ServiceError:
        await db.rollback()
        raise
    except IntegrityError as e:
        await db.rollback()
        if creating:
            logger.warning(f"Concurrent profile submission for user {principal.id}")
            raise ProfileExistsError() from e
        raise ConflictError("Profile update conflicts with existing data.") from e

    return profile


# ============================================
# Viewing
# ============================================


async def get_my_profile(db: AsyncSession, principal: "Principal") -> AlumniProfile:
    enforce(principal, Action.PROFILE_SUBMIT)

    profile = await repository.get_by_user_id(db, principal.id)
    if profile is None:
        raise ProfileNotFoundError()
    return profile


async def get_profile(
    db: AsyncSession,
    viewer: "Principal",
    profile_id: UUID,
) -> ProfileResponse | RedactedProfileResponse:
    """
    Get a profile as ``viewer`` is allowed to see it.

    Non-owner, non-admin viewers of a profile that is not approved get the
    redacted subset (name, school, graduation year, degree, status).

    Raises:
        ProfileNotFoundError: If the profile does not exist
    """
    enforce(viewer, Action.PROFILE_VIEW)

    profile = await repository.get_by_id(db, profile_id)
    if profile is None:
        raise ProfileNotFoundError(profile_id)

    if can_view_full_profile(profile, viewer):
        return to_profile_response(profile)

    logger.debug(f"Returning redacted profile {profile_id} to {viewer.id}")
    return to_redacted_response(profile)


# ============================================
# Administrator functions
# ============================================


async def admin_list_profiles(
    db: AsyncSession,
    principal: "Principal",
    *,
    status: ProfileStatus | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int = 20,
) -> dict:
    enforce(principal, Action.PROFILE_LIST_ALL)

    profiles, total = await repository.get_profiles_for_admin(
        db,
        status=status,
        search=search,
        skip=skip,
        limit=limit,
    )
    return {"profiles": profiles, "total": total, "skip": skip, "limit": limit}


async def _notify_decision(
    db: AsyncSession,
    profile: AlumniProfile,
    decision: ProfileDecision,
    comment: str | None,
) -> bool:
    """Send the decision email. Returns whether it was delivered; never raises."""
    try:
        owner = profile.user
        result = await dispatch_notification(
            DECISION_TEMPLATE[decision],
            owner.email if owner is not None else None,
            {"name": owner.full_name if owner is not None else None, "comment": comment},
        )
        if not result.success:
            logger.warning(f"Decision email for profile {profile.id} not delivered: {result.error}")
        return result.success
    except Exception as e:
        logger.error(f"Failed to send decision email for profile {profile.id}: {e}", exc_info=True)
        return False


async def decide_profile(
    db: AsyncSession,
    principal: "Principal",
    profile_id: UUID,
    decision: ProfileDecision,
    comment: str | None = None,
    notify: bool = True,
) -> ProfileDecisionResult:
    """
    Approve or reject a pending profile.

    The profile row is locked for the duration of the transaction. On
    approval the owner's role is promoted in the same transaction, so either
    both writes commit or neither does. Repeating the decision a profile
    already has is a no-op; the opposite decision is a conflict.

    The email is sent after commit and its failure only sets
    ``email_sent=False``.

    Args:
        db: Database session
        principal: Administrator making the decision
        profile_id: Profile to decide
        decision: APPROVE or REJECT
        comment: Stored as admin_comment and included in the email
        notify: Whether to email the owner

    Returns:
        ProfileDecisionResult

    Raises:
        ForbiddenError: If the principal is not an administrator
        ProfileNotFoundError: If the profile doesn't exist
        ProfileAlreadyDecidedError: If the profile already has the other decision
        ProfileDecisionError: If persisting the decision failed (rolled back)
    """
    enforce(principal, Action.PROFILE_DECIDE)

    target_status = DECISION_STATUS[decision]
    logger.info(f"Admin {principal.id} deciding profile {profile_id}: {decision.value}")

    try:
        # ============================================
        # ATOMIC TRANSACTION: status + role promotion
        # ============================================
        profile = await repository.get_by_id_for_update(db, profile_id)

        if profile is None:
            logger.warning(f"Profile not found: {profile_id}")
            raise ProfileNotFoundError(profile_id)

        if profile.status == target_status:
            # Releases the row lock; nothing was written
            await db.commit()
            logger.info(f"Profile {profile_id} already {target_status.value}; no change")
            return ProfileDecisionResult(profile=profile, email_sent=False, changed=False)

        if profile.status != ProfileStatus.PENDING:
            raise ProfileAlreadyDecidedError(profile.status, decision)

        await repository.apply_decision(
            db,
            profile,
            target_status,
            admin_comment=comment,
            reviewed_by=principal.id,
        )

        if decision == ProfileDecision.APPROVE:
            await UserRepository.promote_to_registered_alumni(db, profile.user_id)

        await db.commit()
        # ============================================
        # END ATOMIC TRANSACTION
        # ============================================

    except ServiceError:
        await db.rollback()
        raise
    except InvalidStatusTransitionError as e:
        await db.rollback()
        logger.error(f"Status transition error during profile decision: {e}")
        raise ProfileAlreadyDecidedError(e.current_status, decision) from e
    except Exception as e:
        await db.rollback()
        logger.error(f"Profile decision failed for {profile_id}: {e}", exc_info=True)
        raise ProfileDecisionError(profile_id) from e

    logger.info(f"Profile {profile_id} {target_status.value} by admin {principal.id}")

    email_sent = False
    email_opted_out = False
    if notify:
        if await should_notify(db, profile.user_id, "profile_updates"):
            email_sent = await _notify_decision(db, profile, decision, comment)
        else:
            logger.info(f"User {profile.user_id} opted out of profile emails")
            email_opted_out = True

    return ProfileDecisionResult(
        profile=profile,
        email_sent=email_sent,
        changed=True,
        email_opted_out=email_opted_out,
    )


# ============================================
# Directory
# ============================================


async def list_directory(db: AsyncSession, viewer: "Principal | None") -> list[DirectorySchoolGroup]:
    """
    Approved alumni grouped by school, schools in alphabetical order.

    Public: anonymous viewers see the same listing.
    """
    enforce(viewer, Action.DIRECTORY_VIEW)

    profiles = await repository.get_approved_profiles(db)

    groups: dict[str, DirectorySchoolGroup] = {}
    for profile in profiles:
        school_name = profile.school.name if profile.school is not None else UNAFFILIATED_SCHOOL
        group = groups.get(school_name)
        if group is None:
            group = DirectorySchoolGroup(school_id=profile.school_id, school_name=school_name, alumni=[])
            groups[school_name] = group

        user = profile.user
        group.alumni.append(
            DirectoryEntry(
                user_id=profile.user_id,
                first_name=user.first_name if user is not None else "",
                last_name=user.last_name if user is not None else "",
                degree_earned=profile.degree_earned,
                graduation_year=profile.graduation_year,
                current_job_title=profile.current_job_title,
                current_company=profile.current_company,
                linkedin=profile.linkedin,
            )
        )

    return [groups[name] for name in sorted(groups)]


async def list_contacts(db: AsyncSession, principal: "Principal") -> list[User]:
    """Registered alumni the caller can message, excluding the caller."""
    enforce(principal, Action.CONTACT_LIST)
    return await UserRepository.list_registered_alumni(db, exclude_id=principal.id)
