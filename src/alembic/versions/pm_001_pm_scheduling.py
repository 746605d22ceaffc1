"""Create PM templates, schedules and completions

Revision ID: pm_001
Revises:
Create Date: 2025-01-06 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel

from alembic import op

revision: str = "pm_001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _entity_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "pm_templates",
        *_entity_columns(),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(length=200), nullable=False),
        sa.Column("description", sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        sa.Column("category", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column("checklist", sa.JSON(), nullable=True),
        sa.Column("estimated_duration_hours", sa.Numeric(precision=4, scale=2), nullable=True),
        sa.Column("default_vendor_id", sa.Uuid(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_pm_templates_tenant_id", "pm_templates", ["tenant_id"], unique=False)
    op.create_index("ix_pm_templates_name", "pm_templates", ["name"], unique=False)

    op.create_table(
        "pm_schedules",
        *_entity_columns(),
        sa.Column("template_id", sa.Uuid(), nullable=True),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(length=200), nullable=False),
        sa.Column("description", sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        sa.Column("asset_id", sa.Uuid(), nullable=True),
        sa.Column("location_id", sa.Uuid(), nullable=True),
        sa.Column("frequency", sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=True),
        sa.Column("day_of_month", sa.Integer(), nullable=True),
        sa.Column("month_of_year", sa.Integer(), nullable=True),
        sa.Column("assigned_to", sa.Uuid(), nullable=True),
        sa.Column("vendor_id", sa.Uuid(), nullable=True),
        sa.Column("estimated_cost", sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column("next_due_date", sa.Date(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("last_generated_at", sa.DateTime(), nullable=True),
        sa.Column("generated_ticket_id", sa.Uuid(), nullable=True),
        sa.Column("generated_for_date", sa.Date(), nullable=True),
        sa.ForeignKeyConstraint(["template_id"], ["pm_templates.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "(asset_id IS NULL) <> (location_id IS NULL)",
            name="ck_pm_schedules_asset_xor_location",
        ),
    )
    op.create_index("ix_pm_schedules_tenant_id", "pm_schedules", ["tenant_id"], unique=False)
    op.create_index("ix_pm_schedules_template_id", "pm_schedules", ["template_id"], unique=False)
    op.create_index("ix_pm_schedules_asset_id", "pm_schedules", ["asset_id"], unique=False)
    op.create_index("ix_pm_schedules_location_id", "pm_schedules", ["location_id"], unique=False)
    op.create_index(
        "ix_pm_schedules_next_due_date", "pm_schedules", ["next_due_date"], unique=False
    )

    op.create_table(
        "pm_completions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("schedule_id", sa.Uuid(), nullable=False),
        sa.Column("ticket_id", sa.Uuid(), nullable=False),
        sa.Column("scheduled_date", sa.Date(), nullable=False),
        sa.Column("completed_date", sa.Date(), nullable=False),
        sa.Column("completed_by", sa.Uuid(), nullable=False),
        sa.Column("checklist_results", sa.JSON(), nullable=True),
        sa.Column("notes", sqlmodel.sql.sqltypes.AutoString(length=2000), nullable=True),
        sa.ForeignKeyConstraint(["schedule_id"], ["pm_schedules.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "schedule_id", "scheduled_date", name="uq_pm_completions_schedule_date"
        ),
    )
    op.create_index(
        "ix_pm_completions_schedule_id", "pm_completions", ["schedule_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_pm_completions_schedule_id", table_name="pm_completions")
    op.drop_table("pm_completions")

    op.drop_index("ix_pm_schedules_next_due_date", table_name="pm_schedules")
    op.drop_index("ix_pm_schedules_location_id", table_name="pm_schedules")
    op.drop_index("ix_pm_schedules_asset_id", table_name="pm_schedules")
    op.drop_index("ix_pm_schedules_template_id", table_name="pm_schedules")
    op.drop_index("ix_pm_schedules_tenant_id", table_name="pm_schedules")
    op.drop_table("pm_schedules")

    op.drop_index("ix_pm_templates_name", table_name="pm_templates")
    op.drop_index("ix_pm_templates_tenant_id", table_name="pm_templates")
    op.drop_table("pm_templates")
