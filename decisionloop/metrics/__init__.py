"""
Calibration & Health Metrics.

Pure aggregations over already-fetched decision/outcome collections.
Every function returns a defined neutral value on empty input.

Components:
- outcomes: outcome ratios, DQI, judgment growth, confidence correlation
- judgment: prediction accuracy, follow-through, risk intelligence, growth momentum
- health: calibration gap, decision health score, trend, activity streak
"""

from decisionloop.metrics.health import (
    DecisionHealth,
    HealthTrend,
    build_health_snapshot,
    calculate_activity_streak,
    calculate_calibration_gap,
    calculate_decision_health,
    decision_health_trend,
)
from decisionloop.metrics.judgment import (
    calculate_follow_through_rate,
    calculate_growth_momentum,
    calculate_prediction_accuracy,
    calculate_risk_intelligence,
)
from decisionloop.metrics.outcomes import (
    OutcomeRatios,
    calculate_category_dqi,
    calculate_confidence_correlation,
    calculate_dqi,
    calculate_judgment_growth,
    calculate_outcome_ratios,
    confidence_accuracy,
    judgment_growth_for_windows,
    outcomes_in_range,
)

__all__ = [
    "DecisionHealth",
    "HealthTrend",
    "OutcomeRatios",
    "build_health_snapshot",
    "calculate_activity_streak",
    "calculate_calibration_gap",
    "calculate_category_dqi",
    "calculate_confidence_correlation",
    "calculate_decision_health",
    "calculate_dqi",
    "calculate_follow_through_rate",
    "calculate_growth_momentum",
    "calculate_judgment_growth",
    "calculate_outcome_ratios",
    "calculate_prediction_accuracy",
    "calculate_risk_intelligence",
    "confidence_accuracy",
    "decision_health_trend",
    "judgment_growth_for_windows",
    "outcomes_in_range",
]
