"""initial_schema

Revision ID: 3f1c2a7b9d10
Revises:
Create Date: 2026-10-01 09:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "3f1c2a7b9d10"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("uuid", sa.UUID(), nullable=False),
        *_timestamps(),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("hashed_password", sa.String(length=255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column("notify_on_rsvp_changes", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "events",
        sa.Column("uuid", sa.UUID(), nullable=False),
        *_timestamps(),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("location", sa.String(length=500), nullable=True),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("rsvp_deadline", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reminder_schedule", sa.Text(), nullable=True),
        sa.Column("max_guests_per_invitee", sa.Integer(), nullable=True),
        sa.Column("host_id", sa.UUID(), nullable=False),
        sa.Column("reply_to", sa.String(length=255), nullable=True),
        sa.ForeignKeyConstraint(["host_id"], ["users.uuid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index(op.f("ix_events_slug"), "events", ["slug"], unique=True)
    op.create_index(op.f("ix_events_start_time"), "events", ["start_time"], unique=False)
    op.create_index(op.f("ix_events_host_id"), "events", ["host_id"], unique=False)

    op.create_table(
        "event_cohosts",
        sa.Column("uuid", sa.UUID(), nullable=False),
        *_timestamps(),
        sa.Column("event_id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("role", sa.String(length=50), nullable=False),
        sa.ForeignKeyConstraint(["event_id"], ["events.uuid"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.uuid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("uuid"),
        sa.UniqueConstraint("event_id", "user_id", name="uq_event_cohost"),
    )
    op.create_index(op.f("ix_event_cohosts_event_id"), "event_cohosts", ["event_id"], unique=False)
    op.create_index(op.f("ix_event_cohosts_user_id"), "event_cohosts", ["user_id"], unique=False)

    op.create_table(
        "guests",
        sa.Column("uuid", sa.UUID(), nullable=False),
        *_timestamps(),
        sa.Column("event_id", sa.UUID(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column(
            "status",
            sa.Enum("PENDING", "ATTENDING", "NOT_ATTENDING", "MAYBE", name="guest_status_enum"),
            nullable=False,
        ),
        sa.Column("dietary_notes", sa.Text(), nullable=True),
        sa.Column("notify_by_email", sa.Boolean(), nullable=False),
        sa.Column("notify_by_sms", sa.Boolean(), nullable=False),
        sa.Column("token", sa.String(length=36), nullable=False),
        sa.Column("invited_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reminder_sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("sms_reminder_sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("max_guests", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["event_id"], ["events.uuid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("uuid"),
        sa.UniqueConstraint("event_id", "email", name="uq_guest_event_email"),
    )
    op.create_index(op.f("ix_guests_event_id"), "guests", ["event_id"], unique=False)
    op.create_index(op.f("ix_guests_email"), "guests", ["email"], unique=False)
    op.create_index(op.f("ix_guests_status"), "guests", ["status"], unique=False)
    op.create_index(op.f("ix_guests_token"), "guests", ["token"], unique=True)

    op.create_table(
        "additional_guests",
        sa.Column("uuid", sa.UUID(), nullable=False),
        *_timestamps(),
        sa.Column("guest_id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["guest_id"], ["guests.uuid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index(
        op.f("ix_additional_guests_guest_id"), "additional_guests", ["guest_id"], unique=False
    )

    op.create_table(
        "email_logs",
        sa.Column("uuid", sa.UUID(), nullable=False),
        *_timestamps(),
        sa.Column("provider_email_id", sa.String(length=255), nullable=True),
        sa.Column("to_address", sa.String(length=255), nullable=False),
        sa.Column("from_address", sa.String(length=255), nullable=False),
        sa.Column("subject", sa.String(length=500), nullable=False),
        sa.Column("html_body", sa.Text(), nullable=True),
        sa.Column("text_body", sa.Text(), nullable=True),
        sa.Column(
            "email_type",
            sa.Enum(
                "invitation", "confirmation", "reminder", "rsvp_notification", name="email_type_enum"
            ),
            nullable=False,
        ),
        sa.Column("guest_id", sa.UUID(), nullable=True),
        sa.Column(
            "status",
            sa.Enum("pending", "sent", "failed", name="email_status_enum"),
            nullable=False,
        ),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["guest_id"], ["guests.uuid"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index(
        op.f("ix_email_logs_provider_email_id"), "email_logs", ["provider_email_id"], unique=True
    )
    op.create_index(op.f("ix_email_logs_to_address"), "email_logs", ["to_address"], unique=False)
    op.create_index(op.f("ix_email_logs_email_type"), "email_logs", ["email_type"], unique=False)
    op.create_index(op.f("ix_email_logs_guest_id"), "email_logs", ["guest_id"], unique=False)
    op.create_index(op.f("ix_email_logs_status"), "email_logs", ["status"], unique=False)


def downgrade() -> None:
    op.drop_table("email_logs")
    op.drop_table("additional_guests")
    op.drop_table("guests")
    op.drop_table("event_cohosts")
    op.drop_table("events")
    op.drop_table("users")
    sa.Enum(name="email_status_enum").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="email_type_enum").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="guest_status_enum").drop(op.get_bind(), checkfirst=True)
