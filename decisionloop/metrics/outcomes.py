"""
Outcome-level metrics.

Computes:
- Outcome ratios (win / neutral / loss)
- Decision Quality Index (DQI): normalized win/loss balance, [0, 1]
- Judgment growth: DQI(recent window) − DQI(previous window)
- Confidence correlation: mean of confidence × outcome score, [−1, 1]
- Category DQI

Confidence correlation is NOT a calibration error. It is positive when
confidence tends to go with success. The calibration GAP (absolute
difference between decision-time and post-hoc confidence) lives in
``metrics.health``.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence

from decisionloop.schemas.decision import Decision
from decisionloop.schemas.outcome import Outcome, OutcomeScore

# ── Configuration ─────────────────────────────────────────────────────────

NEUTRAL_DQI: float = 0.5
DEFAULT_GROWTH_WINDOW_DAYS: int = 14

# Outcome as a probability of "it went well"
_OUTCOME_PROBABILITY: dict[int, float] = {
    OutcomeScore.WIN: 1.0,
    OutcomeScore.NEUTRAL: 0.5,
    OutcomeScore.LOSS: 0.0,
}


@dataclass(frozen=True)
class OutcomeRatios:
    """Share of each ternary outcome. Rates are fractions in [0, 1]."""
    win_rate: float
    neutral_rate: float
    loss_rate: float
    wins: int
    neutrals: int
    losses: int
    total: int

    def to_dict(self) -> dict:
        return {
            "win_rate": round(self.win_rate, 4),
            "neutral_rate": round(self.neutral_rate, 4),
            "loss_rate": round(self.loss_rate, 4),
            "wins": self.wins,
            "neutrals": self.neutrals,
            "losses": self.losses,
            "total": self.total,
        }


# ── Pairing helpers ───────────────────────────────────────────────────────


def index_outcomes(outcomes: Iterable[Outcome]) -> dict[str, Outcome]:
    """decision_id → outcome. A later duplicate would win, but storage forbids them."""
    return {o.decision_id: o for o in outcomes}


def outcome_probability(score: int) -> float:
    """Win = 1.0, neutral = 0.5, loss = 0.0."""
    return _OUTCOME_PROBABILITY.get(int(score), 0.5)


def matched_pairs(
    decisions: Iterable[Decision],
    outcomes: Iterable[Outcome],
    require_confidence: bool = False,
) -> list[tuple[Decision, Outcome]]:
    """
    (decision, outcome) pairs in chronological decision order.

    Ordering by ``created_at`` (stable) is what the "most recent N"
    sliding windows rely on.
    """
    by_decision = index_outcomes(outcomes)
    pairs: list[tuple[Decision, Outcome]] = []
    for decision in decisions:
        outcome = by_decision.get(decision.id)
        if outcome is None:
            continue
        if require_confidence and decision.confidence is None:
            continue
        pairs.append((decision, outcome))
    pairs.sort(key=lambda pair: pair[0].created_at)
    return pairs


# ── Metrics ───────────────────────────────────────────────────────────────


def calculate_outcome_ratios(outcomes: Sequence[Outcome]) -> OutcomeRatios:
    total = len(outcomes)
    if total == 0:
        return OutcomeRatios(0.0, 0.0, 0.0, 0, 0, 0, 0)

    wins = sum(1 for o in outcomes if o.outcome_score == OutcomeScore.WIN)
    neutrals = sum(1 for o in outcomes if o.outcome_score == OutcomeScore.NEUTRAL)
    losses = sum(1 for o in outcomes if o.outcome_score == OutcomeScore.LOSS)

    return OutcomeRatios(
        win_rate=wins / total,
        neutral_rate=neutrals / total,
        loss_rate=losses / total,
        wins=wins,
        neutrals=neutrals,
        losses=losses,
        total=total,
    )


def calculate_dqi(outcomes: Sequence[Outcome]) -> float:
    """
    Decision Quality Index.

        DQI = (Σ outcome_score / N + 1) / 2

    0.5 when there are no outcomes.
    """
    if not outcomes:
        return NEUTRAL_DQI
    mean_score = sum(int(o.outcome_score) for o in outcomes) / len(outcomes)
    return max(0.0, min(1.0, (mean_score + 1) / 2))


def calculate_judgment_growth(
    recent_outcomes: Sequence[Outcome],
    previous_outcomes: Sequence[Outcome],
) -> float:
    """DQI(recent) − DQI(previous). Windows are chosen by the caller."""
    return calculate_dqi(recent_outcomes) - calculate_dqi(previous_outcomes)


def outcomes_in_range(
    outcomes: Iterable[Outcome],
    start: datetime,
    end: datetime,
) -> list[Outcome]:
    """Outcomes completed within [start, end] (inclusive)."""
    return [o for o in outcomes if start <= o.completed_at <= end]


def judgment_growth_for_windows(
    outcomes: Sequence[Outcome],
    now: datetime,
    window_days: int = DEFAULT_GROWTH_WINDOW_DAYS,
) -> float:
    """Growth of the trailing window against the window just before it."""
    window = timedelta(days=window_days)
    recent_start = now - window
    recent = outcomes_in_range(outcomes, recent_start, now)
    previous = outcomes_in_range(
        outcomes, recent_start - window, recent_start - timedelta(microseconds=1)
    )
    return calculate_judgment_growth(recent, previous)


def confidence_accuracy(confidence: Optional[int], outcome_score: int) -> float:
    """(confidence / 100) × outcome score; 0 without a confidence."""
    if confidence is None:
        return 0.0
    return (confidence / 100) * int(outcome_score)


def calculate_confidence_correlation(
    decisions: Sequence[Decision],
    outcomes: Sequence[Outcome],
) -> float:
    """
    Signed confidence/outcome indicator in [−1, 1].

    Average of ``confidence_accuracy`` over decisions with both a recorded
    confidence and an outcome. 0 when there are none.
    """
    pairs = matched_pairs(decisions, outcomes, require_confidence=True)
    if not pairs:
        return 0.0
    total = sum(confidence_accuracy(d.confidence, o.outcome_score) for d, o in pairs)
    return total / len(pairs)


def calculate_category_dqi(
    category: str,
    decisions: Sequence[Decision],
    outcomes: Sequence[Outcome],
) -> float:
    """DQI over one category's decisions; 0.5 when the category is empty."""
    in_category = [d for d in decisions if d.category == category]
    if not in_category:
        return NEUTRAL_DQI
    by_decision = index_outcomes(outcomes)
    category_outcomes = [by_decision[d.id] for d in in_category if d.id in by_decision]
    return calculate_dqi(category_outcomes)
