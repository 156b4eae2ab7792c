"""
Judgment metrics — the four inputs of the Decision Health Index.

- Prediction Accuracy (PA):  how closely confidence matched reality, [0, 1]
- Follow-Through (FT):       share of decisions carried to an outcome, [0, 1]
- Risk Intelligence (RI):    whether risk-taking paid off, [−1, 1]
- Growth Momentum (GM):      daily slope of the health score over 14 days
"""

from typing import Any, Mapping, Optional, Sequence

import structlog

from decisionloop.lifecycle.status import is_closed_loop
from decisionloop.metrics.outcomes import index_outcomes, matched_pairs, outcome_probability
from decisionloop.schemas.decision import Decision
from decisionloop.schemas.outcome import Outcome, OutcomeScore

logger = structlog.get_logger(__name__)

# ── Configuration ─────────────────────────────────────────────────────────

PREDICTION_ACCURACY_WINDOW: int = 30
RISK_INTELLIGENCE_WINDOW: int = 20
GROWTH_MOMENTUM_DAYS: int = 14
NEUTRAL_PREDICTION_ACCURACY: float = 0.5

# Chosen option risk below this is "low", at or above is "high"
HIGH_RISK_THRESHOLD: int = 5

# (risk level, outcome) → score. Not symmetric: high+win is half of low+win
# and high+loss stays positive. Neutral outcomes are absent (score 0).
RISK_INTELLIGENCE_TABLE: dict[tuple[str, OutcomeScore], float] = {
    ("low", OutcomeScore.WIN): 1.0,
    ("low", OutcomeScore.LOSS): -1.0,
    ("high", OutcomeScore.WIN): 0.5,
    ("high", OutcomeScore.LOSS): 0.2,
}


def calculate_prediction_accuracy(
    decisions: Sequence[Decision],
    outcomes: Sequence[Outcome],
    window: int = PREDICTION_ACCURACY_WINDOW,
) -> float:
    """
    Prediction Accuracy.

        PA = 1 − |confidence / 100 − outcome_probability|

    averaged over the most recent ``window`` decisions that have both a
    confidence and an outcome. 0.5 when there are none.
    """
    pairs = matched_pairs(decisions, outcomes, require_confidence=True)
    if not pairs:
        return NEUTRAL_PREDICTION_ACCURACY

    recent = pairs[-window:]
    accuracies = [
        1.0 - abs(d.confidence / 100 - outcome_probability(o.outcome_score))
        for d, o in recent
    ]
    return sum(accuracies) / len(accuracies)


def calculate_follow_through_rate(
    decisions: Sequence[Decision],
    outcomes: Optional[Sequence[Outcome]] = None,
) -> float:
    """
    Follow-Through rate: completed decisions / ALL decisions.

    Open and decided decisions both count against it. ``outcomes`` is
    optional; when given, a decision whose outcome is present counts as
    completed even if its ``outcome_id`` has not been stamped yet.
    """
    if not decisions:
        return 0.0
    by_decision = index_outcomes(outcomes or [])
    completed = sum(1 for d in decisions if is_closed_loop(d, by_decision.get(d.id)))
    return completed / len(decisions)


def _option_risk(entry: Any) -> Optional[int]:
    if entry is None:
        return None
    if isinstance(entry, (int, float)):
        return int(entry)
    return getattr(entry, "risk", None)


def calculate_risk_intelligence(
    decisions: Sequence[Decision],
    outcomes: Sequence[Outcome],
    option_risks: Optional[Mapping[str, Any]] = None,
    window: int = RISK_INTELLIGENCE_WINDOW,
) -> float:
    """
    Risk Intelligence from the chosen option's risk rating and the outcome.

    ``option_risks`` maps option id → risk rating (an int, or any object
    with a ``risk`` attribute such as an Option). Neutral outcomes score 0.
    Averaged over the most recent ``window`` qualifying decisions; 0 when
    there is no risk data or nothing qualifies.
    """
    if not outcomes or not option_risks:
        return 0.0

    scores: list[float] = []
    for decision, outcome in matched_pairs(decisions, outcomes):
        if decision.chosen_option_id is None:
            continue
        risk = _option_risk(option_risks.get(decision.chosen_option_id))
        if risk is None:
            continue
        level = "low" if risk < HIGH_RISK_THRESHOLD else "high"
        scores.append(RISK_INTELLIGENCE_TABLE.get((level, OutcomeScore(outcome.outcome_score)), 0.0))

    if not scores:
        logger.debug("risk_intelligence_no_qualifying_decisions", n_outcomes=len(outcomes))
        return 0.0

    recent = scores[-window:]
    return sum(recent) / len(recent)


def calculate_growth_momentum(
    current_health: float,
    health_14_days_ago: Optional[float],
    days: int = GROWTH_MOMENTUM_DAYS,
) -> float:
    """(health today − health 14 days ago) / 14; 0 without the older snapshot."""
    if health_14_days_ago is None:
        return 0.0
    return (current_health - health_14_days_ago) / days
