"""Initial schema — locations, categories, agents, decisions, settings.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY, JSONB

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

DEFAULT_SETTINGS = [
    {
        "key": "scoring.weights",
        "category": "scoring",
        "value": {
            "skillOverlap": 0.30,
            "levelCloseness": 0.25,
            "loadBalance": 0.25,
            "locationFit": 0.10,
            "vipAffinity": 0.10,
        },
    },
    {
        "key": "workload.ageWeights",
        "category": "workload",
        "value": {"fresh": 2.0, "recent": 1.2, "stale": 0.5, "abandoned": 0.1},
    },
    {"key": "assignment.autoAssignEnabled", "category": "assignment", "value": False},
    {"key": "assignment.maxSuggestionsCount", "category": "assignment", "value": 3},
    {"key": "assignment.minScoreThreshold", "category": "assignment", "value": 0.5},
    {"key": "eligibility.workloadLimit", "category": "eligibility", "value": 5},
    {"key": "eligibility.maxLoadPercentage", "category": "eligibility", "value": 0.9},
    {
        "key": "eligibility.locationMatching",
        "category": "eligibility",
        "value": {"mode": "disabled", "matchTimezone": True, "allowRemoteForOnsite": False},
    },
]


def upgrade() -> None:
    # Locations
    op.create_table(
        "locations",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("external_id", sa.String(50), unique=True, nullable=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("timezone", sa.String(64), nullable=True),
        sa.Column("support_types", ARRAY(sa.String(20)), nullable=False, server_default="{}"),
    )

    # Categories
    op.create_table(
        "categories",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("external_id", sa.String(50), unique=True, nullable=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("required_skills", ARRAY(sa.String(100)), nullable=False, server_default="{}"),
        sa.Column("priority_level", sa.String(20), nullable=True),
        sa.Column("average_resolution_time", sa.Float, nullable=True),
        sa.Column("requires_onsite", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("requires_specialization", sa.Boolean, nullable=False, server_default=sa.false()),
    )

    # Agents
    op.create_table(
        "agents",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("external_id", sa.String(50), unique=True, nullable=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(200), nullable=True),
        sa.Column("level", sa.String(20), nullable=False, server_default="L1"),
        sa.Column("is_available", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("manually_deactivated", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("skills", ARRAY(sa.String(100)), nullable=False, server_default="{}"),
        sa.Column("category_skills", ARRAY(sa.String(100)), nullable=False, server_default="{}"),
        sa.Column("auto_detected_skills", ARRAY(sa.String(100)), nullable=False, server_default="{}"),
        sa.Column("skill_metadata", JSONB, nullable=False, server_default="{}"),
        sa.Column(
            "location_id", sa.Integer,
            sa.ForeignKey("locations.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("is_remote", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("current_ticket_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("weighted_ticket_count", sa.Numeric(10, 2), nullable=True),
        sa.Column("ticket_workload_breakdown", JSONB, nullable=False, server_default="{}"),
        sa.Column("last_workload_sync", sa.DateTime(timezone=True), nullable=True),
        sa.Column("max_concurrent_tickets", sa.Integer, nullable=False, server_default="5"),
        sa.Column("total_assignments", sa.Integer, nullable=False, server_default="0"),
        sa.Column("satisfaction_score", sa.Float, nullable=True),
        sa.Column("average_resolution_time", sa.Float, nullable=True),
        sa.Column("is_pto", sa.Boolean, nullable=False, server_default=sa.false()),
    )
    op.create_index("idx_agents_location", "agents", ["location_id"])

    # Agent specialisations
    op.create_table(
        "agent_categories",
        sa.Column(
            "agent_id", sa.Integer,
            sa.ForeignKey("agents.id", ondelete="CASCADE"), primary_key=True,
        ),
        sa.Column(
            "category_id", sa.Integer,
            sa.ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True,
        ),
    )

    # Decisions
    op.create_table(
        "decisions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("ticket_id", sa.String(50), nullable=False),
        sa.Column("ticket_subject", sa.Text, nullable=True),
        sa.Column(
            "agent_id", sa.Integer,
            sa.ForeignKey("agents.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column(
            "category_id", sa.Integer,
            sa.ForeignKey("categories.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("score", sa.Float, nullable=False),
        sa.Column("score_breakdown", JSONB, nullable=False, server_default="{}"),
        sa.Column("alternatives", JSONB, nullable=False, server_default="[]"),
        sa.Column("was_accepted", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("overridden_by", sa.String(200), nullable=True),
        sa.Column("override_reason", sa.Text, nullable=True),
        sa.Column("override_agent_id", sa.Integer, nullable=True),
        sa.Column("feedback_score", sa.Integer, nullable=True),
        sa.Column("feedback_comments", sa.Text, nullable=True),
        sa.Column("context_data", JSONB, nullable=False, server_default="{}"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("feedback_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("idx_decisions_ticket", "decisions", ["ticket_id"])
    op.create_index("idx_decisions_agent", "decisions", ["agent_id"])
    op.create_index("idx_decisions_created", "decisions", ["created_at"])

    # Settings
    settings_table = op.create_table(
        "settings",
        sa.Column("key", sa.String(100), primary_key=True),
        sa.Column("value", JSONB, nullable=True),
        sa.Column("category", sa.String(50), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.bulk_insert(settings_table, DEFAULT_SETTINGS)


def downgrade() -> None:
    op.drop_table("settings")
    op.drop_table("decisions")
    op.drop_table("agent_categories")
    op.drop_table("agents")
    op.drop_table("categories")
    op.drop_table("locations")
