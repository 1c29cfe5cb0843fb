"""init scaffold tracker tables

Revision ID: 202610160001
Revises:
Create Date: 2026-10-16
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "202610160001"
down_revision = None
branch_labels = None
depends_on = None

tag_color_enum = sa.Enum("GREEN", "YELLOW", "RED", name="tagcolor")


def upgrade() -> None:
    op.create_table(
        "events",
        sa.Column("event_id", sa.String(), nullable=False),
        sa.Column("event_type", sa.String(), nullable=False),
        sa.Column("inspector_id", sa.String(), nullable=True),
        sa.Column("ts", sa.DateTime(timezone=True), nullable=False),
        sa.Column("actor_id", sa.String(), nullable=True),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("event_id"),
    )
    op.create_index("ix_events_event_type", "events", ["event_type"])
    op.create_index("ix_events_inspector_id", "events", ["inspector_id"])
    op.create_index("ix_events_ts", "events", ["ts"])
    op.create_index("ix_events_actor_id", "events", ["actor_id"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("role", sa.String(), nullable=False),
        sa.Column("actor_id", sa.String(), nullable=True),
        sa.Column("action", sa.String(), nullable=False),
        sa.Column("resource", sa.String(), nullable=False),
        sa.Column("method", sa.String(), nullable=False),
        sa.Column("status_code", sa.Integer(), nullable=False),
        sa.Column("ts", sa.DateTime(timezone=True), nullable=False),
        sa.Column("detail", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_logs_role", "audit_logs", ["role"])
    op.create_index("ix_audit_logs_actor_id", "audit_logs", ["actor_id"])
    op.create_index("ix_audit_logs_ts", "audit_logs", ["ts"])

    op.create_table(
        "inspectors",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_inspectors_name", "inspectors", ["name"])
    op.create_index("ix_inspectors_created_at", "inspectors", ["created_at"])

    op.create_table(
        "scaffolds",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("inspector_id", sa.String(), nullable=False),
        sa.Column("unit", sa.String(length=200), nullable=False),
        sa.Column("location", sa.String(length=200), nullable=False),
        sa.Column("tag_number", sa.String(length=100), nullable=False),
        sa.Column("permit_number", sa.String(length=100), nullable=False),
        sa.Column("inspection_date", sa.DateTime(timezone=False), nullable=False),
        sa.Column("tag_color", tag_color_enum, nullable=False),
        sa.Column("checklist", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["inspector_id"], ["inspectors.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_scaffolds_inspector_id", "scaffolds", ["inspector_id"])
    op.create_index("ix_scaffolds_inspector_unit", "scaffolds", ["inspector_id", "unit"])
    op.create_index("ix_scaffolds_tag_number", "scaffolds", ["tag_number"])
    op.create_index("ix_scaffolds_inspection_date", "scaffolds", ["inspection_date"])
    op.create_index("ix_scaffolds_tag_color", "scaffolds", ["tag_color"])
    op.create_index("ix_scaffolds_created_at", "scaffolds", ["created_at"])

    op.create_table(
        "reminders",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("inspector_id", sa.String(), nullable=False),
        sa.Column("target_datetime", sa.DateTime(timezone=False), nullable=False),
        sa.Column("unit", sa.String(length=200), nullable=False),
        sa.Column("tag_number", sa.String(length=100), nullable=False),
        sa.Column("notes", sa.String(), nullable=False),
        sa.Column("is_completed", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["inspector_id"], ["inspectors.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_reminders_inspector_id", "reminders", ["inspector_id"])
    op.create_index("ix_reminders_inspector_completed", "reminders", ["inspector_id", "is_completed"])
    op.create_index("ix_reminders_target_datetime", "reminders", ["target_datetime"])
    op.create_index("ix_reminders_is_completed", "reminders", ["is_completed"])
    op.create_index("ix_reminders_created_at", "reminders", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_reminders_created_at", table_name="reminders")
    op.drop_index("ix_reminders_is_completed", table_name="reminders")
    op.drop_index("ix_reminders_target_datetime", table_name="reminders")
    op.drop_index("ix_reminders_inspector_completed", table_name="reminders")
    op.drop_index("ix_reminders_inspector_id", table_name="reminders")
    op.drop_table("reminders")

    op.drop_index("ix_scaffolds_created_at", table_name="scaffolds")
    op.drop_index("ix_scaffolds_tag_color", table_name="scaffolds")
    op.drop_index("ix_scaffolds_inspection_date", table_name="scaffolds")
    op.drop_index("ix_scaffolds_tag_number", table_name="scaffolds")
    op.drop_index("ix_scaffolds_inspector_unit", table_name="scaffolds")
    op.drop_index("ix_scaffolds_inspector_id", table_name="scaffolds")
    op.drop_table("scaffolds")
    tag_color_enum.drop(op.get_bind(), checkfirst=True)

    op.drop_index("ix_inspectors_created_at", table_name="inspectors")
    op.drop_index("ix_inspectors_name", table_name="inspectors")
    op.drop_table("inspectors")

    op.drop_index("ix_audit_logs_ts", table_name="audit_logs")
    op.drop_index("ix_audit_logs_actor_id", table_name="audit_logs")
    op.drop_index("ix_audit_logs_role", table_name="audit_logs")
    op.drop_table("audit_logs")

    op.drop_index("ix_events_actor_id", table_name="events")
    op.drop_index("ix_events_ts", table_name="events")
    op.drop_index("ix_events_inspector_id", table_name="events")
    op.drop_index("ix_events_event_type", table_name="events")
    op.drop_table("events")
