"""
Decision loop SQLAlchemy models.

Four tables. Decision status is not stored anywhere; it is derived from
the commit columns and ``outcome_id`` at read time.

Storage-level invariants:
- one outcome per decision: UNIQUE(dl_outcomes.decision_id)
- one health snapshot per user per day: UNIQUE(user_id, snapshot_date)
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from decisionloop.db.compat import UTCDateTime
from decisionloop.db.engine import Base


class DecisionRecord(Base):
    __tablename__ = "dl_decisions"
    __table_args__ = (
        Index("ix_dl_decisions_user_created", "user_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    decision_date: Mapped[date] = mapped_column(Date, nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False, default="other")
    context: Mapped[str] = mapped_column(Text, nullable=False, default="")

    success_outcome: Mapped[Optional[str]] = mapped_column(Text)
    constraints: Mapped[Optional[str]] = mapped_column(Text)
    risky_assumption: Mapped[Optional[str]] = mapped_column(Text)

    chosen_option_id: Mapped[Optional[str]] = mapped_column(String(36))
    decided_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime())
    confidence: Mapped[Optional[int]] = mapped_column(Integer)
    next_action: Mapped[Optional[str]] = mapped_column(Text)
    next_action_due_date: Mapped[Optional[date]] = mapped_column(Date)
    decision_rationale: Mapped[Optional[str]] = mapped_column(Text)
    predicted_outcome_positive: Mapped[Optional[str]] = mapped_column(Text)
    predicted_outcome_negative: Mapped[Optional[str]] = mapped_column(Text)
    commitment_confirmed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    outcome_id: Mapped[Optional[str]] = mapped_column(String(36))
    completed_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime())


class OptionRecord(Base):
    __tablename__ = "dl_options"
    __table_args__ = (
        Index("ix_dl_options_decision", "decision_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    decision_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("dl_decisions.id", ondelete="CASCADE"), nullable=False
    )
    label: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    notes: Mapped[Optional[str]] = mapped_column(Text)
    impact: Mapped[int] = mapped_column(Integer, nullable=False)
    effort: Mapped[int] = mapped_column(Integer, nullable=False)
    risk: Mapped[int] = mapped_column(Integer, nullable=False)
    total_score: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)


class OutcomeRecord(Base):
    __tablename__ = "dl_outcomes"
    __table_args__ = (
        UniqueConstraint("decision_id", name="uq_dl_outcomes_decision"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    decision_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("dl_decisions.id", ondelete="CASCADE"), nullable=False
    )
    outcome_score: Mapped[int] = mapped_column(Integer, nullable=False)
    outcome_reflection: Mapped[str] = mapped_column(Text, nullable=False, default="")
    learning_reflection: Mapped[str] = mapped_column(Text, nullable=False, default="")
    learning_confidence: Mapped[Optional[int]] = mapped_column(Integer)
    completed_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    temporal_anchor: Mapped[Optional[str]] = mapped_column(String(20))
    counterfactual_reflection: Mapped[Optional[str]] = mapped_column(Text)
    self_reflection: Mapped[Optional[str]] = mapped_column(Text)


class HealthSnapshotRecord(Base):
    """Append-only: rows are never updated once written."""

    __tablename__ = "dl_health_snapshots"
    __table_args__ = (
        UniqueConstraint("user_id", "snapshot_date", name="uq_dl_health_snapshots_user_day"),
        Index("ix_dl_health_snapshots_user_date", "user_id", "snapshot_date"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    health_score: Mapped[int] = mapped_column(Integer, nullable=False)
    win_rate: Mapped[float] = mapped_column(Float, nullable=False)
    avg_calibration_gap: Mapped[float] = mapped_column(Float, nullable=False)
    completion_rate: Mapped[float] = mapped_column(Float, nullable=False)
    streak_length: Mapped[int] = mapped_column(Integer, nullable=False)
    snapshot_date: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
