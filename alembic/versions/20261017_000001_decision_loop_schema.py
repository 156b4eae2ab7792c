"""Decision loop schema.

Creates decisions, options, outcomes and daily health snapshots.
One outcome per decision and one snapshot per user per day are enforced
with unique constraints.

Revision ID: 20261017_000001
Revises:
Create Date: 2026-10-17 00:00:01
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261017_000001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all decision loop tables."""
    # Decisions table (status is derived, not stored)
    op.create_table(
        "dl_decisions",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("decision_date", sa.Date(), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("category", sa.String(50), nullable=False, server_default="other"),
        sa.Column("context", sa.Text(), nullable=False, server_default=""),
        sa.Column("success_outcome", sa.Text(), nullable=True),
        sa.Column("constraints", sa.Text(), nullable=True),
        sa.Column("risky_assumption", sa.Text(), nullable=True),
        sa.Column("chosen_option_id", sa.String(36), nullable=True),
        sa.Column("decided_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("confidence", sa.Integer(), nullable=True),
        sa.Column("next_action", sa.Text(), nullable=True),
        sa.Column("next_action_due_date", sa.Date(), nullable=True),
        sa.Column("decision_rationale", sa.Text(), nullable=True),
        sa.Column("predicted_outcome_positive", sa.Text(), nullable=True),
        sa.Column("predicted_outcome_negative", sa.Text(), nullable=True),
        sa.Column("commitment_confirmed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("outcome_id", sa.String(36), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("confidence IS NULL OR (confidence >= 0 AND confidence <= 100)",
                           name="ck_dl_decisions_confidence"),
    )
    op.create_index("ix_dl_decisions_user_created", "dl_decisions", ["user_id", "created_at"])

    # Options table
    op.create_table(
        "dl_options",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("decision_id", sa.String(36), nullable=False),
        sa.Column("label", sa.String(500), nullable=False, server_default=""),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("impact", sa.Integer(), nullable=False),
        sa.Column("effort", sa.Integer(), nullable=False),
        sa.Column("risk", sa.Integer(), nullable=False),
        sa.Column("total_score", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["decision_id"], ["dl_decisions.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_dl_options_decision", "dl_options", ["decision_id"])

    # Outcomes table (one per decision)
    op.create_table(
        "dl_outcomes",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("decision_id", sa.String(36), nullable=False),
        sa.Column("outcome_score", sa.Integer(), nullable=False),
        sa.Column("outcome_reflection", sa.Text(), nullable=False, server_default=""),
        sa.Column("learning_reflection", sa.Text(), nullable=False, server_default=""),
        sa.Column("learning_confidence", sa.Integer(), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("temporal_anchor", sa.String(20), nullable=True),
        sa.Column("counterfactual_reflection", sa.Text(), nullable=True),
        sa.Column("self_reflection", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["decision_id"], ["dl_decisions.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("decision_id", name="uq_dl_outcomes_decision"),
        sa.CheckConstraint("outcome_score IN (-1, 0, 1)", name="ck_dl_outcomes_score"),
    )

    # Daily health snapshots (append-only)
    op.create_table(
        "dl_health_snapshots",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("health_score", sa.Integer(), nullable=False),
        sa.Column("win_rate", sa.Float(), nullable=False),
        sa.Column("avg_calibration_gap", sa.Float(), nullable=False),
        sa.Column("completion_rate", sa.Float(), nullable=False),
        sa.Column("streak_length", sa.Integer(), nullable=False),
        sa.Column("snapshot_date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "snapshot_date", name="uq_dl_health_snapshots_user_day"),
    )
    op.create_index(
        "ix_dl_health_snapshots_user_date", "dl_health_snapshots", ["user_id", "snapshot_date"]
    )


def downgrade() -> None:
    """Drop all decision loop tables."""
    op.drop_index("ix_dl_health_snapshots_user_date", table_name="dl_health_snapshots")
    op.drop_table("dl_health_snapshots")
    op.drop_table("dl_outcomes")
    op.drop_index("ix_dl_options_decision", table_name="dl_options")
    op.drop_table("dl_options")
    op.drop_index("ix_dl_decisions_user_created", table_name="dl_decisions")
    op.drop_table("dl_decisions")
