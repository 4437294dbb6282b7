"""initial alumni portal schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18 12:00:00.000000

This migration creates:
1. schools and users (with the user_role enum)
2. alumni_profiles (one per user) with the profile_status enum
3. job_postings and job_applications, unique per (job, applicant)
4. events and event_registrations, unique per (event, alumnus)
5. messages and notification_preferences

The unique constraints are what the services rely on to turn concurrent
duplicate inserts into conflicts.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

ENUMS = {
    "user_role": ("visitor", "applied_alumni", "registered_alumni", "administrative"),
    "profile_status": ("pending", "approved", "rejected"),
    "application_status": ("submitted", "accepted", "rejected"),
}


def _enum(name: str) -> postgresql.ENUM:
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def _base_columns() -> list[sa.Column]:
    """Primary key and timestamps (from BaseModel)."""
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def _user_fk(column: str, ondelete: str = "CASCADE") -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint([column], ["users.id"], ondelete=ondelete)


def upgrade() -> None:
    """Create every portal table."""
    for name in ENUMS:
        _enum(name).create(op.get_bind(), checkfirst=True)

    op.create_table(
        "schools",
        *_base_columns(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("code", sa.String(length=20), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_schools_name"), "schools", ["name"], unique=True)

    op.create_table(
        "users",
        *_base_columns(),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("role", _enum("user_role"), nullable=False, server_default="applied_alumni"),
        sa.Column("school_id", postgresql.UUID(as_uuid=True), nullable=True),
        # Contact details
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column("country", sa.String(length=100), nullable=True),
        sa.Column("zipcode", sa.String(length=20), nullable=True),
        sa.Column("mobile", sa.String(length=30), nullable=True),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["school_id"], ["schools.id"], ondelete="SET NULL"),
    )
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_school_id"), "users", ["school_id"], unique=False)

    op.create_table(
        "alumni_profiles",
        *_base_columns(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("school_id", postgresql.UUID(as_uuid=True), nullable=True),
        # Education
        sa.Column("graduation_year", sa.Integer(), nullable=True),
        sa.Column("degree_earned", sa.String(length=150), nullable=True),
        sa.Column("study_program", sa.String(length=150), nullable=True),
        # Employment
        sa.Column("current_job_title", sa.String(length=150), nullable=True),
        sa.Column("current_company", sa.String(length=150), nullable=True),
        sa.Column("employment_history", sa.Text(), nullable=True),
        # About
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("linkedin", sa.String(length=255), nullable=True),
        sa.Column("profile_image", sa.String(length=500), nullable=True),
        # Review
        sa.Column("status", _enum("profile_status"), nullable=False, server_default="pending"),
        sa.Column("admin_comment", sa.Text(), nullable=True),
        sa.Column("reviewed_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        _user_fk("user_id"),
        _user_fk("reviewed_by", ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["school_id"], ["schools.id"], ondelete="SET NULL"),
        sa.UniqueConstraint("user_id"),
    )
    op.create_index("ix_alumni_profiles_status", "alumni_profiles", ["status"], unique=False)
    op.create_index("ix_alumni_profiles_school_id", "alumni_profiles", ["school_id"], unique=False)

    op.create_table(
        "job_postings",
        *_base_columns(),
        sa.Column("alumni_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("company_name", sa.String(length=200), nullable=False),
        sa.Column("job_title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("requirements", sa.Text(), nullable=True),
        sa.Column("location", sa.String(length=200), nullable=True),
        sa.Column("is_remote", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("application_link", sa.String(length=500), nullable=True),
        sa.Column("contact_email", sa.String(length=255), nullable=True),
        sa.Column("expires_at", sa.Date(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        _user_fk("alumni_id"),
    )
    op.create_index("ix_job_postings_alumni_id", "job_postings", ["alumni_id"], unique=False)
    op.create_index("ix_job_postings_expires_at", "job_postings", ["expires_at"], unique=False)

    op.create_table(
        "job_applications",
        *_base_columns(),
        sa.Column("job_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("applicant_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("cover_letter", sa.Text(), nullable=True),
        sa.Column("resume_url", sa.String(length=500), nullable=True),
        sa.Column("status", _enum("application_status"), nullable=False, server_default="submitted"),
        sa.Column("decided_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("decided_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["job_id"], ["job_postings.id"], ondelete="CASCADE"),
        _user_fk("applicant_id"),
        _user_fk("decided_by", ondelete="SET NULL"),
        sa.UniqueConstraint("job_id", "applicant_id", name="uq_job_applications_job_applicant"),
    )
    op.create_index("ix_job_applications_status", "job_applications", ["status"], unique=False)

    op.create_table(
        "events",
        *_base_columns(),
        sa.Column("organizer_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("event_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=True),
        sa.Column("end_time", sa.Time(), nullable=True),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("is_virtual", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("meeting_link", sa.String(length=500), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        _user_fk("organizer_id"),
    )
    op.create_index("ix_events_event_date", "events", ["event_date"], unique=False)
    op.create_index("ix_events_organizer_id", "events", ["organizer_id"], unique=False)

    op.create_table(
        "event_registrations",
        *_base_columns(),
        sa.Column("event_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("alumni_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"], ondelete="CASCADE"),
        _user_fk("alumni_id"),
        sa.UniqueConstraint("event_id", "alumni_id", name="uq_event_registrations_event_alumni"),
    )

    op.create_table(
        "messages",
        *_base_columns(),
        sa.Column("sender_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("recipient_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("subject", sa.String(length=200), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        _user_fk("sender_id"),
        _user_fk("recipient_id"),
    )
    op.create_index("ix_messages_recipient_id_is_read", "messages", ["recipient_id", "is_read"], unique=False)
    op.create_index("ix_messages_sender_id", "messages", ["sender_id"], unique=False)

    op.create_table(
        "notification_preferences",
        *_base_columns(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("profile_updates", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("event_notifications", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("job_notifications", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("message_notifications", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
        _user_fk("user_id"),
        sa.UniqueConstraint("user_id"),
    )


def downgrade() -> None:
    """Drop every portal table and enum type."""
    op.drop_table("notification_preferences")

    op.drop_index("ix_messages_sender_id", table_name="messages")
    op.drop_index("ix_messages_recipient_id_is_read", table_name="messages")
    op.drop_table("messages")

    op.drop_table("event_registrations")
    op.drop_index("ix_events_organizer_id", table_name="events")
    op.drop_index("ix_events_event_date", table_name="events")
    op.drop_table("events")

    op.drop_index("ix_job_applications_status", table_name="job_applications")
    op.drop_table("job_applications")
    op.drop_index("ix_job_postings_expires_at", table_name="job_postings")
    op.drop_index("ix_job_postings_alumni_id", table_name="job_postings")
    op.drop_table("job_postings")

    op.drop_index("ix_alumni_profiles_school_id", table_name="alumni_profiles")
    op.drop_index("ix_alumni_profiles_status", table_name="alumni_profiles")
    op.drop_table("alumni_profiles")

    op.drop_index(op.f("ix_users_school_id"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_index(op.f("ix_users_username"), table_name="users")
    op.drop_table("users")

    op.drop_index(op.f("ix_schools_name"), table_name="schools")
    op.drop_table("schools")

    for name in reversed(list(ENUMS)):
        _enum(name).drop(op.get_bind(), checkfirst=True)
