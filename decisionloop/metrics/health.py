"""
Decision Health — composite 0-100 score and its daily trend.

    health = win% × 0.35
           + (100 − min(calibration_gap, 100)) × 0.25
           + completion% × 0.25
           + min(streak / 30, 1) × 100 × 0.15

Calibration gap = |confidence at decision − learning confidence after the
outcome|, averaged over decisions that have both.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from decisionloop.lifecycle.status import is_closed_loop
from decisionloop.numeric import round_half_up
from decisionloop.metrics.outcomes import index_outcomes, matched_pairs
from decisionloop.schemas.decision import Decision
from decisionloop.schemas.outcome import Outcome, OutcomeScore
from decisionloop.schemas.snapshot import DecisionHealthSnapshot

# ── Configuration ─────────────────────────────────────────────────────────

WEIGHT_WIN_RATE: float = 0.35
WEIGHT_CALIBRATION: float = 0.25
WEIGHT_COMPLETION: float = 0.25
WEIGHT_STREAK: float = 0.15

STREAK_TARGET_DAYS: int = 30
MAX_CALIBRATION_GAP: float = 100.0
TREND_THRESHOLD: float = 2.0


@dataclass(frozen=True)
class DecisionHealth:
    """Health score with its components (percentages are 0-100)."""
    health_score: int
    win_rate: float
    avg_calibration_gap: float
    completion_rate: float
    streak_length: int

    def to_dict(self) -> dict:
        return {
            "health_score": self.health_score,
            "win_rate": self.win_rate,
            "avg_calibration_gap": self.avg_calibration_gap,
            "completion_rate": self.completion_rate,
            "streak_length": self.streak_length,
        }


@dataclass(frozen=True)
class HealthTrend:
    trend: str          # "up" | "down" | "stable"
    change: int


def calculate_calibration_gap(
    decisions: Sequence[Decision],
    outcomes: Sequence[Outcome],
) -> float:
    """Mean |decision confidence − learning confidence|; 0 without pairs."""
    gaps = [
        abs(d.confidence - o.learning_confidence)
        for d, o in matched_pairs(decisions, outcomes)
        if d.confidence is not None and o.learning_confidence is not None
    ]
    if not gaps:
        return 0.0
    return sum(gaps) / len(gaps)


def calculate_decision_health(
    decisions: Sequence[Decision],
    outcomes: Sequence[Outcome],
    streak_length: int,
    streak_target_days: int = STREAK_TARGET_DAYS,
) -> DecisionHealth:
    """
    Composite decision health.

    Args:
        decisions: All of the user's decisions
        outcomes: All of the user's outcomes
        streak_length: Consecutive active days, computed by the caller
        streak_target_days: Streak length that counts as 100%

    Returns:
        DecisionHealth with the rounded, clamped score
    """
    total_outcomes = len(outcomes)
    wins = sum(1 for o in outcomes if o.outcome_score == OutcomeScore.WIN)
    win_rate = (wins / total_outcomes) * 100 if total_outcomes else 0.0

    avg_gap = calculate_calibration_gap(decisions, outcomes)

    by_decision = index_outcomes(outcomes)
    total_decisions = len(decisions)
    completed = sum(1 for d in decisions if is_closed_loop(d, by_decision.get(d.id)))
    completion_rate = (completed / total_decisions) * 100 if total_decisions else 0.0

    normalized_streak = min(max(streak_length, 0) / streak_target_days, 1.0) * 100

    raw = (
        win_rate * WEIGHT_WIN_RATE
        + (100 - min(avg_gap, MAX_CALIBRATION_GAP)) * WEIGHT_CALIBRATION
        + completion_rate * WEIGHT_COMPLETION
        + normalized_streak * WEIGHT_STREAK
    )
    health_score = max(0, min(100, round_half_up(raw)))

    return DecisionHealth(
        health_score=health_score,
        win_rate=round(win_rate, 2),
        avg_calibration_gap=round(avg_gap, 2),
        completion_rate=round(completion_rate, 2),
        streak_length=streak_length,
    )


def decision_health_trend(
    current_health: float,
    previous_health: Optional[float],
    threshold: float = TREND_THRESHOLD,
) -> HealthTrend:
    """Current health against the snapshot from 7 days earlier."""
    if previous_health is None:
        return HealthTrend(trend="stable", change=0)

    change = current_health - previous_health
    if change > threshold:
        return HealthTrend(trend="up", change=round_half_up(change))
    if change < -threshold:
        return HealthTrend(trend="down", change=round_half_up(change))
    return HealthTrend(trend="stable", change=0)


def calculate_activity_streak(activity_dates: Iterable[date], today: date) -> int:
    """
    Consecutive active days ending today.

    Activity is any check-in, decision creation or outcome completion the
    caller collected. A day without activity ends the streak; no activity
    today means a streak of 0.
    """
    active = set(activity_dates)
    streak = 0
    day = today
    while day in active:
        streak += 1
        day -= timedelta(days=1)
    return streak


def build_health_snapshot(
    user_id: str,
    health: DecisionHealth,
    snapshot_date: date,
) -> DecisionHealthSnapshot:
    """Freeze a health computation as the day's snapshot."""
    return DecisionHealthSnapshot(
        user_id=user_id,
        health_score=health.health_score,
        win_rate=health.win_rate,
        avg_calibration_gap=health.avg_calibration_gap,
        completion_rate=health.completion_rate,
        streak_length=health.streak_length,
        snapshot_date=snapshot_date,
    )
