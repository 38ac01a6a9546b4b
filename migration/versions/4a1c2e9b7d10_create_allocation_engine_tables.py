"""create allocation engine tables

Revision ID: 4a1c2e9b7d10
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision = "4a1c2e9b7d10"
down_revision = None
branch_labels = None
depends_on = None


def _enum(name: str, *values: str) -> sa.Enum:
    return sa.Enum(*values, name=name)


def upgrade() -> None:
    op.create_table(
        "resource_allocations",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("organization_id", sa.String(), nullable=False),
        sa.Column("workspace_id", sa.String(), nullable=False),
        sa.Column("resource_id", sa.String(), nullable=False),
        sa.Column("project_id", sa.String(), nullable=False),
        sa.Column("type", _enum("allocationtype", "HARD", "SOFT", "GHOST"), nullable=False),
        sa.Column(
            "booking_source",
            _enum("bookingsource", "MANUAL", "AI", "IMPORTED"),
            nullable=False,
        ),
        sa.Column("allocation_percentage", sa.Float(), nullable=False),
        sa.Column("units_type", _enum("unitstype", "PERCENT", "HOURS"), nullable=False),
        sa.Column("hours_per_week", sa.Float(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("justification", sa.Text(), nullable=True),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_allocations_resource_range",
        "resource_allocations",
        ["resource_id", "start_date", "end_date"],
        unique=False,
    )
    op.create_index("idx_allocations_project", "resource_allocations", ["project_id"], unique=False)
    op.create_index("idx_allocations_workspace", "resource_allocations", ["workspace_id"], unique=False)

    op.create_table(
        "resource_policies",
        sa.Column("workspace_id", sa.String(), nullable=False),
        sa.Column("warning_threshold", sa.Float(), nullable=False, server_default=sa.text("80.0")),
        sa.Column("justification_threshold", sa.Float(), nullable=False, server_default=sa.text("100.0")),
        sa.Column("approval_threshold", sa.Float(), nullable=False, server_default=sa.text("120.0")),
        sa.Column("max_allocation", sa.Float(), nullable=False, server_default=sa.text("150.0")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.PrimaryKeyConstraint("workspace_id"),
    )

    op.create_table(
        "resource_booking_locks",
        sa.Column("resource_id", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("locked_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("resource_id"),
    )

    op.create_table(
        "resource_conflicts",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("organization_id", sa.String(), nullable=False),
        sa.Column("workspace_id", sa.String(), nullable=False),
        sa.Column("resource_id", sa.String(), nullable=False),
        sa.Column("allocation_id", sa.String(), nullable=False),
        sa.Column("window_start", sa.Date(), nullable=False),
        sa.Column("window_end", sa.Date(), nullable=False),
        sa.Column("total_load", sa.Float(), nullable=False),
        sa.Column(
            "classification",
            _enum(
                "conflictclassification",
                "NONE",
                "WARNING",
                "REQUIRES_JUSTIFICATION",
                "REQUIRES_APPROVAL",
                "OVER_CAP",
            ),
            nullable=False,
        ),
        sa.Column(
            "severity",
            _enum("conflictseverity", "LOW", "MEDIUM", "HIGH", "CRITICAL"),
            nullable=False,
        ),
        sa.Column("resolved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("resolved_by", sa.String(), nullable=True),
        sa.Column("resolution_note", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_conflicts_resource_window",
        "resource_conflicts",
        ["resource_id", "window_start"],
        unique=False,
    )
    op.create_index(
        "idx_conflicts_workspace_resolved",
        "resource_conflicts",
        ["workspace_id", "resolved"],
        unique=False,
    )

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("actor_user_id", sa.String(), nullable=True),
        sa.Column("actor_username", sa.String(length=128), nullable=True),
        sa.Column("action", sa.String(length=64), nullable=False),
        sa.Column("entity_type", sa.String(length=64), nullable=False),
        sa.Column("entity_id", sa.String(), nullable=False),
        sa.Column("workspace_id", sa.String(), nullable=True),
        sa.Column("resource_id", sa.String(), nullable=True),
        sa.Column("details_json", sa.Text(), nullable=False, server_default=sa.text("'{}'")),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_audit_logs_occurred_at", "audit_logs", ["occurred_at"], unique=False)
    op.create_index("idx_audit_logs_workspace", "audit_logs", ["workspace_id"], unique=False)
    op.create_index("idx_audit_logs_entity", "audit_logs", ["entity_type", "entity_id"], unique=False)


def downgrade() -> None:
    op.drop_index("idx_audit_logs_entity", table_name="audit_logs")
    op.drop_index("idx_audit_logs_workspace", table_name="audit_logs")
    op.drop_index("idx_audit_logs_occurred_at", table_name="audit_logs")
    op.drop_table("audit_logs")

    op.drop_index("idx_conflicts_workspace_resolved", table_name="resource_conflicts")
    op.drop_index("idx_conflicts_resource_window", table_name="resource_conflicts")
    op.drop_table("resource_conflicts")

    op.drop_table("resource_booking_locks")
    op.drop_table("resource_policies")

    op.drop_index("idx_allocations_workspace", table_name="resource_allocations")
    op.drop_index("idx_allocations_project", table_name="resource_allocations")
    op.drop_index("idx_allocations_resource_range", table_name="resource_allocations")
    op.drop_table("resource_allocations")
