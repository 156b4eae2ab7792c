"""
Composite Indices.

Components:
- dhi: Decision Health Index and Trajectory Momentum Score
- trajectory: domain strength, calibration curve, health trend, full trajectory
"""

from decisionloop.indices.dhi import (
    DHIComponents,
    MomentumStatus,
    TrajectoryMomentum,
    calculate_dhi,
    calculate_tms,
    normalize_growth_momentum,
    normalize_risk_intelligence,
)
from decisionloop.indices.trajectory import (
    CalibrationBucket,
    DecisionTrajectory,
    DomainStrength,
    HealthTrendLine,
    MomentumIndex,
    calculate_calibration_curve,
    calculate_domain_strength,
    calculate_health_trend,
    calculate_momentum_index,
    generate_trajectory,
)

__all__ = [
    "CalibrationBucket",
    "DHIComponents",
    "DecisionTrajectory",
    "DomainStrength",
    "HealthTrendLine",
    "MomentumIndex",
    "MomentumStatus",
    "TrajectoryMomentum",
    "calculate_calibration_curve",
    "calculate_dhi",
    "calculate_domain_strength",
    "calculate_health_trend",
    "calculate_momentum_index",
    "calculate_tms",
    "generate_trajectory",
    "normalize_growth_momentum",
    "normalize_risk_intelligence",
]
