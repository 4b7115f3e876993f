"""create routing tables

Revision ID: 3c1d7a52e0f4
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c1d7a52e0f4"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "roles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
    )
    op.create_index("ix_roles_company_id", "roles", ["company_id"])

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column(
            "role_id",
            sa.Integer(),
            sa.ForeignKey("roles.id", ondelete="SET NULL"),
        ),
        sa.Column(
            "is_active", sa.Boolean(), nullable=False, server_default=sa.true()
        ),
        *_timestamps(),
    )
    # candidate roster: active users of a company, optionally by role
    op.create_index(
        "ix_users_company_active_role", "users", ["company_id", "is_active", "role_id"]
    )

    op.create_table(
        "states",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
    )
    op.create_table(
        "areas",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "state_id",
            sa.Integer(),
            sa.ForeignKey("states.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(150), nullable=False),
    )

    op.create_table(
        "leads",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(255)),
        sa.Column("phone", sa.String(30)),
        sa.Column("activity_source_id", sa.Integer()),
        sa.Column("property_type", sa.String(50)),
        sa.Column("interest_type", sa.String(50)),
        sa.Column("min_price", sa.Numeric(15, 2)),
        sa.Column("max_price", sa.Numeric(15, 2)),
        sa.Column("status_id", sa.Integer()),
        sa.Column(
            "assigned_to",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
        ),
        *_timestamps(),
        sa.CheckConstraint(
            "min_price IS NULL OR max_price IS NULL OR min_price <= max_price",
            name="ck_leads_price_range",
        ),
    )
    # workload aggregates: leads per assignee, optionally without status
    op.create_index(
        "ix_leads_company_assigned_status",
        "leads",
        ["company_id", "assigned_to", "status_id"],
    )

    op.create_table(
        "lead_preferred_areas",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "lead_id",
            sa.Integer(),
            sa.ForeignKey("leads.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "area_id",
            sa.Integer(),
            sa.ForeignKey("areas.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.UniqueConstraint("lead_id", "area_id", name="uq_lead_preferred_area"),
    )

    op.create_table(
        "lead_followups",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column(
            "lead_id",
            sa.Integer(),
            sa.ForeignKey("leads.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("next_followup_date", sa.DateTime(timezone=True)),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
    )
    op.create_index(
        "ix_lead_followups_lead_next_date",
        "lead_followups",
        ["lead_id", "next_followup_date"],
    )

    op.create_table(
        "lead_routing_rules",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("rule_name", sa.String(150), nullable=False),
        sa.Column("priority", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "is_active", sa.Boolean(), nullable=False, server_default=sa.true()
        ),
        sa.Column("conditions", sa.Text(), nullable=False, server_default="{}"),
        sa.Column("assignment_type", sa.String(30), nullable=False),
        sa.Column(
            "assigned_user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
        ),
        sa.Column(
            "assigned_role_id",
            sa.Integer(),
            sa.ForeignKey("roles.id", ondelete="SET NULL"),
        ),
        *_timestamps(),
        sa.CheckConstraint(
            "assignment_type IN ('specific_user', 'round_robin', 'load_balance', 'role_based')",
            name="ck_routing_rule_assignment_type",
        ),
    )
    op.create_index(
        "ix_routing_rules_company_active_priority",
        "lead_routing_rules",
        ["company_id", "is_active", "priority"],
    )


def downgrade() -> None:
    op.drop_index(
        "ix_routing_rules_company_active_priority", table_name="lead_routing_rules"
    )
    op.drop_table("lead_routing_rules")
    op.drop_index("ix_lead_followups_lead_next_date", table_name="lead_followups")
    op.drop_table("lead_followups")
    op.drop_table("lead_preferred_areas")
    op.drop_index("ix_leads_company_assigned_status", table_name="leads")
    op.drop_table("leads")
    op.drop_table("areas")
    op.drop_table("states")
    op.drop_index("ix_users_company_active_role", table_name="users")
    op.drop_table("users")
    op.drop_index("ix_roles_company_id", table_name="roles")
    op.drop_table("roles")
