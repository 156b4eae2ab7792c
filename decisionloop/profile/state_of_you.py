"""
"State of You": a short, personalised reading of the user's history.

Collects strengths, weaknesses and growth areas from five signals:

1. Category DQI: strongest category > 0.6, weakest < 0.4
2. Calibration gap (0-100): < 15 well calibrated, > 30 poorly calibrated
3. Completion rate: < 60% drags, > 80% is a strength
4. Per-category calibration gaps above 20 points
5. Win rate of the 5 most recent outcomes vs the 5 before them

and stitches them into one paragraph.
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence

import structlog

from decisionloop.metrics.health import calculate_calibration_gap
from decisionloop.metrics.judgment import calculate_follow_through_rate
from decisionloop.metrics.outcomes import calculate_category_dqi
from decisionloop.patterns.detector import calculate_category_calibration
from decisionloop.schemas.category import DecisionCategory, format_category
from decisionloop.schemas.decision import Decision
from decisionloop.schemas.outcome import Outcome, OutcomeScore

logger = structlog.get_logger(__name__)

# ── Configuration ─────────────────────────────────────────────────────────

MIN_OUTCOMES: int = 3
STRONG_CATEGORY_DQI: float = 0.6
WEAK_CATEGORY_DQI: float = 0.4
WELL_CALIBRATED_GAP: float = 15.0
POORLY_CALIBRATED_GAP: float = 30.0
LOW_COMPLETION_PCT: float = 60.0
HIGH_COMPLETION_PCT: float = 80.0
PROBLEM_CATEGORY_GAP: float = 20.0
PROBLEM_CATEGORY_MIN_SAMPLES: int = 3
TREND_WINDOW: int = 5
TREND_MIN_SAMPLES: int = 3
TREND_MARGIN: float = 0.1


@dataclass(frozen=True)
class StateOfYou:
    text: str
    strengths: list[str] = field(default_factory=list)
    weaknesses: list[str] = field(default_factory=list)
    growth_areas: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "strengths": list(self.strengths),
            "weaknesses": list(self.weaknesses),
            "growth_areas": list(self.growth_areas),
        }


def _win_rate(outcomes: Sequence[Outcome]) -> float:
    return sum(1 for o in outcomes if o.outcome_score == OutcomeScore.WIN) / len(outcomes)


def _compose_text(
    strengths: list[str],
    weaknesses: list[str],
    growth_areas: list[str],
    completion_pct: float,
    calibration_gap: float,
) -> str:
    parts: list[str] = []

    if strengths:
        parts.append(f"You're strongest in {strengths[0]} decisions")
    else:
        parts.append("You're building your decision-making practice")

    if weaknesses:
        parts.append(f"inconsistent in {' and '.join(weaknesses)}")

    if completion_pct < LOW_COMPLETION_PCT:
        parts.append("and your follow-through is your biggest drag on growth")
    elif completion_pct < HIGH_COMPLETION_PCT:
        parts.append("and your follow-through could be more consistent")

    if calibration_gap > POORLY_CALIBRATED_GAP:
        parts.append(
            "Your confidence is improving, but you still overestimate outcomes in long-term choices"
        )
    elif calibration_gap > WELL_CALIBRATED_GAP:
        parts.append("Your confidence is improving, but there's room to be more realistic")
    else:
        parts.append("Your confidence is well-calibrated")

    if 0 < len(growth_areas) <= 2:
        parts.append(f"Focus on {growth_areas[0]}")

    return ". ".join(parts) + "."


def generate_state_of_you(
    decisions: Sequence[Decision],
    outcomes: Sequence[Outcome],
) -> Optional[StateOfYou]:
    """None without decisions or with fewer than 3 outcomes."""
    if not decisions or len(outcomes) < MIN_OUTCOMES:
        logger.debug(
            "state_of_you_insufficient_data",
            n_decisions=len(decisions),
            n_outcomes=len(outcomes),
        )
        return None

    strengths: list[str] = []
    weaknesses: list[str] = []
    growth_areas: list[str] = []

    # 1. Category intelligence (stable sort: ties keep declaration order)
    by_dqi = sorted(
        ((c, calculate_category_dqi(c, decisions, outcomes)) for c in DecisionCategory),
        key=lambda pair: pair[1],
        reverse=True,
    )
    strongest, weakest = by_dqi[0], by_dqi[-1]
    if strongest[1] > STRONG_CATEGORY_DQI:
        strengths.append(format_category(strongest[0]))
    if weakest[1] < WEAK_CATEGORY_DQI:
        weaknesses.append(format_category(weakest[0]))

    # 2. Calibration
    calibration_gap = calculate_calibration_gap(decisions, outcomes)
    if calibration_gap < WELL_CALIBRATED_GAP:
        strengths.append("well-calibrated confidence")
    elif calibration_gap > POORLY_CALIBRATED_GAP:
        weaknesses.append("confidence calibration")
        growth_areas.append("being more realistic about your predictions")

    # 3. Completion
    completion_pct = calculate_follow_through_rate(decisions, outcomes) * 100
    if completion_pct < LOW_COMPLETION_PCT:
        weaknesses.append("follow-through")
        growth_areas.append("closing decision loops by logging outcomes")
    elif completion_pct > HIGH_COMPLETION_PCT:
        strengths.append("consistent follow-through")

    # 4. Category-specific calibration
    problematic = [
        c for c in calculate_category_calibration(decisions, outcomes)
        if c.avg_calibration_gap > PROBLEM_CATEGORY_GAP
        and c.sample_size >= PROBLEM_CATEGORY_MIN_SAMPLES
    ]
    if problematic:
        names = ", ".join(format_category(c.category) for c in problematic)
        growth_areas.append(f"improving confidence accuracy in {names}")

    # 5. Trend: newest outcomes first
    newest_first = sorted(outcomes, key=lambda o: o.completed_at, reverse=True)
    recent = newest_first[:TREND_WINDOW]
    older = newest_first[TREND_WINDOW:TREND_WINDOW * 2]
    if len(recent) >= TREND_MIN_SAMPLES and len(older) >= TREND_MIN_SAMPLES:
        recent_rate, older_rate = _win_rate(recent), _win_rate(older)
        if recent_rate > older_rate + TREND_MARGIN:
            strengths.append("improving judgment")
        elif recent_rate < older_rate - TREND_MARGIN:
            growth_areas.append("recent decision quality")

    text = _compose_text(strengths, weaknesses, growth_areas, completion_pct, calibration_gap)
    return StateOfYou(
        text=text,
        strengths=strengths,
        weaknesses=weaknesses,
        growth_areas=growth_areas,
    )
