"""
Option Scoring — expected value of the future an option creates.

    DecisionScore = Impact × 0.5 + (11 − Effort) × 0.3 + (11 − Risk) × 0.2

Effort and risk are inverted so that low effort / low risk score high.
The result (1-10, one decimal) is stored as an integer × 10 so it survives
integer columns without loss: 6.9 → 69.
"""

from typing import TYPE_CHECKING, Optional, Sequence

from decisionloop.numeric import round_half_up

if TYPE_CHECKING:
    from decisionloop.schemas.option import Option

# ── Configuration ─────────────────────────────────────────────────────────

IMPACT_WEIGHT: float = 0.5
EFFORT_WEIGHT: float = 0.3
RISK_WEIGHT: float = 0.2

RATING_MIN: int = 1
RATING_MAX: int = 10
STORAGE_SCALE: int = 10


def _clamp_rating(value: int) -> int:
    return max(RATING_MIN, min(RATING_MAX, int(value)))


def calculate_option_score(impact: int, effort: int, risk: int) -> int:
    """
    Stored expected-value score for an option.

    Args:
        impact: How much life improves (1-10, higher is better)
        effort: Cost / effort required (1-10, lower is better)
        risk: Downside risk (1-10, lower is better)

    Returns:
        Integer in [10, 100]: the 1-10 expected value × 10.
    """
    impact = _clamp_rating(impact)
    effort_score = (RATING_MAX + 1) - _clamp_rating(effort)
    risk_score = (RATING_MAX + 1) - _clamp_rating(risk)

    expected_value = (
        impact * IMPACT_WEIGHT
        + effort_score * EFFORT_WEIGHT
        + risk_score * RISK_WEIGHT
    )
    expected_value = max(float(RATING_MIN), min(float(RATING_MAX), expected_value))

    # The product is an integer up to float noise
    return round_half_up(expected_value * STORAGE_SCALE)


def format_score_for_display(stored_score: int) -> float:
    """Stored integer score → display value with one decimal (69 → 6.9)."""
    return round(stored_score / STORAGE_SCALE, 1)


def _has_label(option: "Option") -> bool:
    return bool(option.label and option.label.strip())


def rank_options(options: Sequence["Option"]) -> list["Option"]:
    """Labelled options, best score first. Stable for equal scores."""
    labelled = [o for o in options if _has_label(o)]
    return sorted(labelled, key=lambda o: o.total_score, reverse=True)


def get_suggested_option(options: Sequence["Option"]) -> Optional["Option"]:
    """
    The recommended option: highest stored score among labelled options.

    Options without a label are incomplete and never suggested. Ties go to
    the option encountered first. The user still chooses manually.
    """
    best: Optional["Option"] = None
    for option in options:
        if not _has_label(option):
            continue
        if best is None or option.total_score > best.total_score:
            best = option
    return best
