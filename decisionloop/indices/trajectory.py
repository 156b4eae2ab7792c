"""
Decision Trajectory — where judgment is heading.

Implements:
- Domain Strength Index per category (0-100)
- Prediction calibration curve (five confidence bands)
- Health trend: least-squares slope over daily snapshots
- Momentum index from three health points
- Full trajectory assembly (DHI + TMS + the above)
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence

import structlog

from decisionloop.indices.dhi import (
    DHIComponents,
    TrajectoryMomentum,
    calculate_dhi,
    calculate_tms,
)
from decisionloop.metrics.judgment import (
    calculate_follow_through_rate,
    calculate_growth_momentum,
    calculate_prediction_accuracy,
    calculate_risk_intelligence,
)
from decisionloop.metrics.outcomes import index_outcomes, outcome_probability
from decisionloop.numeric import round_half_up
from decisionloop.schemas.category import DecisionCategory
from decisionloop.schemas.decision import Decision
from decisionloop.schemas.outcome import Outcome, OutcomeScore

logger = structlog.get_logger(__name__)

# ── Configuration ─────────────────────────────────────────────────────────

DOMAIN_WEIGHT_WIN_RATE: float = 0.40
DOMAIN_WEIGHT_FOLLOW_THROUGH: float = 0.30
DOMAIN_WEIGHT_PREDICTION_ACCURACY: float = 0.30

CALIBRATION_BUCKETS: tuple[int, ...] = (20, 40, 60, 80, 100)
BUCKET_WIDTH: int = 20

MOMENTUM_THRESHOLD: float = 2.0
MIN_OUTCOMES_FOR_TRAJECTORY: int = 5


@dataclass(frozen=True)
class DomainStrength:
    category: DecisionCategory
    score: int                  # 0-100
    win_rate: float             # 0-1
    follow_through: float       # 0-1
    prediction_accuracy: float  # 0-1


@dataclass(frozen=True)
class CalibrationBucket:
    """One confidence band of the calibration curve."""
    confidence_bucket: int          # band ceiling: 20, 40, 60, 80, 100
    predicted_frequency: float      # ceiling as probability
    actual_frequency: float         # share of wins among band outcomes
    gap: float                      # |predicted − actual|
    calibration_error: float        # mean |confidence − outcome probability|
    count: int = 0                  # decisions in the band with an outcome


@dataclass(frozen=True)
class HealthTrendLine:
    slope: float                    # health points per day
    message: str
    is_improving: bool


@dataclass(frozen=True)
class MomentumIndex:
    value: float
    status: str                     # "accelerating" | "stable" | "slowing"
    message: str


@dataclass(frozen=True)
class DecisionTrajectory:
    dhi: int
    components: DHIComponents
    tms: TrajectoryMomentum
    health_trend: HealthTrendLine
    domain_strengths: list[DomainStrength] = field(default_factory=list)
    calibration_curve: list[CalibrationBucket] = field(default_factory=list)


def calculate_domain_strength(
    category: DecisionCategory,
    decisions: Sequence[Decision],
    outcomes: Sequence[Outcome],
) -> DomainStrength:
    """
    Domain Strength Index, restricted to one category.

        score = 100 × (0.40·win_rate + 0.30·FT + 0.30·PA)
    """
    in_category = [d for d in decisions if d.category == category]
    if not in_category:
        return DomainStrength(DecisionCategory(category), 0, 0.0, 0.0, 0.0)

    by_decision = index_outcomes(outcomes)
    category_outcomes = [by_decision[d.id] for d in in_category if d.id in by_decision]

    wins = sum(1 for o in category_outcomes if o.outcome_score == OutcomeScore.WIN)
    win_rate = wins / len(category_outcomes) if category_outcomes else 0.0
    follow_through = calculate_follow_through_rate(in_category, category_outcomes)
    prediction_accuracy = calculate_prediction_accuracy(in_category, category_outcomes)

    raw = (
        win_rate * DOMAIN_WEIGHT_WIN_RATE
        + follow_through * DOMAIN_WEIGHT_FOLLOW_THROUGH
        + prediction_accuracy * DOMAIN_WEIGHT_PREDICTION_ACCURACY
    )
    return DomainStrength(
        category=DecisionCategory(category),
        score=round_half_up(raw * 100),
        win_rate=win_rate,
        follow_through=follow_through,
        prediction_accuracy=prediction_accuracy,
    )


def _in_bucket(confidence: int, ceiling: int) -> bool:
    lower = 0 if ceiling == BUCKET_WIDTH else ceiling - BUCKET_WIDTH
    return lower <= confidence <= ceiling


def calculate_calibration_curve(
    decisions: Sequence[Decision],
    outcomes: Sequence[Outcome],
) -> list[CalibrationBucket]:
    """
    Predicted vs. actual success per confidence band.

    Bands are [0,20], [20,40], ..., [80,100] with inclusive bounds, so a
    confidence on a boundary lands in both neighbouring bands. Empty bands
    report zeros.
    """
    by_decision = index_outcomes(outcomes)
    curve: list[CalibrationBucket] = []

    for ceiling in CALIBRATION_BUCKETS:
        band = [
            d for d in decisions
            if d.confidence is not None and _in_bucket(d.confidence, ceiling)
        ]
        if not band:
            curve.append(CalibrationBucket(ceiling, 0.0, 0.0, 0.0, 0.0))
            continue

        predicted = ceiling / 100
        band_pairs = [(d, by_decision[d.id]) for d in band if d.id in by_decision]
        wins = sum(1 for _, o in band_pairs if o.outcome_score == OutcomeScore.WIN)
        actual = wins / len(band_pairs) if band_pairs else 0.0

        errors = [
            abs(d.confidence / 100 - outcome_probability(o.outcome_score))
            for d, o in band_pairs
        ]
        calibration_error = sum(errors) / len(errors) if errors else 0.0

        curve.append(CalibrationBucket(
            confidence_bucket=ceiling,
            predicted_frequency=predicted,
            actual_frequency=actual,
            gap=abs(predicted - actual),
            calibration_error=calibration_error,
            count=len(band_pairs),
        ))

    return curve


def calculate_health_trend(health_series: Sequence[float]) -> HealthTrendLine:
    """
    Least-squares slope of an evenly spaced (daily) health series.

    Needs at least two points.
    """
    n = len(health_series)
    if n < 2:
        return HealthTrendLine(0.0, "Not enough data to calculate trend", False)

    sum_x = sum(range(n))
    sum_y = sum(health_series)
    sum_xy = sum(i * y for i, y in enumerate(health_series))
    sum_x2 = sum(i * i for i in range(n))
    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)

    if slope > 0:
        message = f"Judgment is steadily improving (+{slope:.2f} per day)"
    elif slope < 0:
        message = f"Judgment is declining ({slope:.2f} per day)"
    else:
        message = "Judgment is stable"
    return HealthTrendLine(slope=slope, message=message, is_improving=slope > 0)


def calculate_momentum_index(
    current_health: float,
    health_7_days_ago: Optional[float],
    health_14_days_ago: Optional[float],
    threshold: float = MOMENTUM_THRESHOLD,
) -> MomentumIndex:
    """(avg of today and 7 days ago) − (avg of 7 and 14 days ago)."""
    if health_7_days_ago is None or health_14_days_ago is None:
        return MomentumIndex(0.0, "stable", "Not enough data to calculate momentum")

    last_week = (current_health + health_7_days_ago) / 2
    previous_week = (health_7_days_ago + health_14_days_ago) / 2
    momentum = last_week - previous_week

    if momentum > threshold:
        return MomentumIndex(momentum, "accelerating", f"Growth speed: Accelerating (+{momentum:.1f})")
    if momentum < -threshold:
        return MomentumIndex(momentum, "slowing", f"Growth speed: Slowing ({momentum:.1f})")
    return MomentumIndex(momentum, "stable", "Growth speed: Stable")


def generate_trajectory(
    decisions: Sequence[Decision],
    outcomes: Sequence[Outcome],
    current_health: float,
    health_7_days_ago: Optional[float] = None,
    health_14_days_ago: Optional[float] = None,
    health_series: Sequence[float] = (),
    option_risks: Optional[Mapping[str, Any]] = None,
    min_outcomes: int = MIN_OUTCOMES_FOR_TRAJECTORY,
) -> Optional[DecisionTrajectory]:
    """
    Assemble the full trajectory view.

    Returns None with fewer than ``min_outcomes`` outcomes.
    ``health_series`` is the ordered daily health history used for the
    trend line.
    """
    if len(outcomes) < min_outcomes:
        logger.debug("trajectory_insufficient_outcomes", n_outcomes=len(outcomes), required=min_outcomes)
        return None

    components = DHIComponents(
        prediction_accuracy=calculate_prediction_accuracy(decisions, outcomes),
        follow_through_rate=calculate_follow_through_rate(decisions, outcomes),
        risk_intelligence=calculate_risk_intelligence(decisions, outcomes, option_risks),
        growth_momentum=calculate_growth_momentum(current_health, health_14_days_ago),
    )
    dhi = calculate_dhi(components)

    last_week = current_health if health_7_days_ago is not None else None
    previous_week = (
        (health_7_days_ago + health_14_days_ago) / 2
        if health_7_days_ago is not None and health_14_days_ago is not None
        else None
    )
    tms = calculate_tms(last_week, previous_week)

    strengths = [
        calculate_domain_strength(category, decisions, outcomes)
        for category in DecisionCategory
    ]
    strengths = sorted((s for s in strengths if s.score > 0), key=lambda s: s.score, reverse=True)

    trajectory = DecisionTrajectory(
        dhi=dhi,
        components=components,
        tms=tms,
        health_trend=calculate_health_trend(health_series),
        domain_strengths=strengths,
        calibration_curve=calculate_calibration_curve(decisions, outcomes),
    )

    logger.info(
        "trajectory_generated",
        dhi=dhi,
        tms=round(tms.score, 2),
        tms_status=tms.status.value,
        n_domains=len(strengths),
    )
    return trajectory
