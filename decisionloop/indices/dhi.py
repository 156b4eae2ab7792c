"""
Decision Health Index (DHI) and Trajectory Momentum Score (TMS).

    DHI = 100 × (0.45·PA + 0.30·FT + 0.15·RI_norm + 0.10·GM_norm)

    RI_norm = clamp((RI + 1) / 2, 0, 1)
    GM_norm = clamp((GM + 1) / 2, 0, 1)

    TMS = avg DHI (last 7 days) − avg DHI (previous 7 days)
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

from decisionloop.numeric import clamp, round_half_up

# ── Configuration ─────────────────────────────────────────────────────────

WEIGHT_PREDICTION_ACCURACY: float = 0.45
WEIGHT_FOLLOW_THROUGH: float = 0.30
WEIGHT_RISK_INTELLIGENCE: float = 0.15
WEIGHT_GROWTH_MOMENTUM: float = 0.10

TMS_THRESHOLD: float = 3.0


class MomentumStatus(StrEnum):
    ACCELERATING = "accelerating"
    STABLE = "stable"
    DECLINING = "declining"


@dataclass(frozen=True)
class DHIComponents:
    prediction_accuracy: float     # 0-1
    follow_through_rate: float     # 0-1
    risk_intelligence: float       # -1..1
    growth_momentum: float         # unbounded, usually -1..1

    def to_dict(self) -> dict:
        return {
            "prediction_accuracy": round(self.prediction_accuracy, 4),
            "follow_through_rate": round(self.follow_through_rate, 4),
            "risk_intelligence": round(self.risk_intelligence, 4),
            "growth_momentum": round(self.growth_momentum, 4),
        }


@dataclass(frozen=True)
class TrajectoryMomentum:
    score: float
    status: MomentumStatus
    message: str


def normalize_risk_intelligence(ri: float) -> float:
    return clamp((ri + 1) / 2)


def normalize_growth_momentum(gm: float) -> float:
    return clamp((gm + 1) / 2)


def calculate_dhi(components: DHIComponents) -> int:
    """Decision Health Index, 0-100."""
    pa = clamp(components.prediction_accuracy)
    ft = clamp(components.follow_through_rate)
    ri = normalize_risk_intelligence(components.risk_intelligence)
    gm = normalize_growth_momentum(components.growth_momentum)

    dhi = (
        WEIGHT_PREDICTION_ACCURACY * pa
        + WEIGHT_FOLLOW_THROUGH * ft
        + WEIGHT_RISK_INTELLIGENCE * ri
        + WEIGHT_GROWTH_MOMENTUM * gm
    )
    return round_half_up(dhi * 100)


def _momentum_message(score: float, status: MomentumStatus) -> str:
    if status == MomentumStatus.ACCELERATING:
        return f"Accelerating (+{score:.1f})"
    if status == MomentumStatus.DECLINING:
        return f"Declining ({score:.1f})"
    return "Stable"


def calculate_tms(
    dhi_last_7_days: Optional[float],
    dhi_prev_7_days: Optional[float],
    threshold: float = TMS_THRESHOLD,
) -> TrajectoryMomentum:
    """
    Week-over-week DHI delta.

    accelerating if ≥ +3, declining if ≤ −3, stable otherwise or when
    either average is unavailable.
    """
    if dhi_last_7_days is None or dhi_prev_7_days is None:
        return TrajectoryMomentum(0.0, MomentumStatus.STABLE, "Stable")

    tms = dhi_last_7_days - dhi_prev_7_days
    if tms >= threshold:
        status = MomentumStatus.ACCELERATING
    elif tms <= -threshold:
        status = MomentumStatus.DECLINING
    else:
        status = MomentumStatus.STABLE
    return TrajectoryMomentum(tms, status, _momentum_message(tms, status))
