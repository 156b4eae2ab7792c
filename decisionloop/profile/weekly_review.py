"""
Weekly review: one pass over a week's decisions and outcomes.

Produces a cognitive-pattern sentence, the single biggest miscalibration,
the best and worst decision, and one "thinking upgrade" suggestion.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Optional, Sequence

from decisionloop.metrics.outcomes import index_outcomes, outcome_probability
from decisionloop.schemas.category import format_category
from decisionloop.schemas.decision import Decision
from decisionloop.schemas.outcome import Outcome, OutcomeScore

# ── Configuration ─────────────────────────────────────────────────────────

HIGH_AVG_CONFIDENCE: float = 70.0
LOW_AVG_CONFIDENCE: float = 40.0
CONSISTENT_COMPLETION: float = 0.8
WEAK_COMPLETION: float = 0.5
UPGRADE_COMPLETION: float = 0.7
OVERCONFIDENT_AT: int = 80

NO_PATTERN_TEXT = "Not enough data to identify patterns yet. Keep logging decisions."
NO_MISCALIBRATION_TEXT = "Not enough data to identify miscalibrations yet."
NO_OUTCOMES_TEXT = "No outcomes logged yet."
MISSING_DECISION_TEXT = "Could not find decision data."

_OVERCONFIDENT_WORDS = {
    OutcomeScore.WIN: "well",
    OutcomeScore.NEUTRAL: "neutral",
    OutcomeScore.LOSS: "badly",
}
_UNDERCONFIDENT_WORDS = {
    OutcomeScore.WIN: "better than expected",
    OutcomeScore.NEUTRAL: "neutral",
    OutcomeScore.LOSS: "worse than expected",
}


@dataclass(frozen=True)
class ReviewHighlight:
    """A decision singled out by the review, with a one-line description."""
    decision: Optional[Decision]
    outcome: Optional[Outcome]
    description: str

    def to_dict(self) -> dict:
        return {
            "decision_id": self.decision.id if self.decision else None,
            "outcome_id": self.outcome.id if self.outcome else None,
            "description": self.description,
        }


@dataclass(frozen=True)
class WeeklyReview:
    cognitive_pattern: str
    biggest_miscalibration: ReviewHighlight
    best_decision: ReviewHighlight
    worst_decision: ReviewHighlight
    thinking_upgrade: str

    def to_dict(self) -> dict:
        return {
            "cognitive_pattern": self.cognitive_pattern,
            "biggest_miscalibration": self.biggest_miscalibration.to_dict(),
            "best_decision": self.best_decision.to_dict(),
            "worst_decision": self.worst_decision.to_dict(),
            "thinking_upgrade": self.thinking_upgrade,
        }


def _completion_rate(decisions: Sequence[Decision], outcomes: Sequence[Outcome]) -> float:
    if not decisions:
        return 0.0
    return len(outcomes) / len(decisions)


def cognitive_pattern(decisions: Sequence[Decision], outcomes: Sequence[Outcome]) -> str:
    if not decisions:
        return NO_PATTERN_TEXT

    patterns: list[str] = []

    confidences = [d.confidence for d in decisions if d.confidence is not None]
    avg_confidence = sum(confidences) / len(confidences) if confidences else None
    if avg_confidence is not None and avg_confidence >= HIGH_AVG_CONFIDENCE:
        patterns.append("You tend to be highly confident in your decisions")
    elif avg_confidence is not None and avg_confidence <= LOW_AVG_CONFIDENCE:
        patterns.append("You tend to be cautious in your decisions")
    else:
        patterns.append("You show balanced confidence in your decisions")

    completion = _completion_rate(decisions, outcomes)
    if completion >= CONSISTENT_COMPLETION:
        patterns.append("and you consistently follow through on your commitments")
    elif completion < WEAK_COMPLETION:
        patterns.append("but you struggle to complete the feedback loop")
    else:
        patterns.append("and you usually complete the feedback loop")

    # most_common keeps first-seen order among ties
    top_category, _ = Counter(d.category for d in decisions).most_common(1)[0]
    patterns.append(f"Most of your decisions this week were in {format_category(top_category)}")

    return ". ".join(patterns) + "."


def biggest_miscalibration(
    decisions: Sequence[Decision],
    outcomes: Sequence[Outcome],
) -> ReviewHighlight:
    """Largest |confidence − outcome probability|; the first one wins ties."""
    by_decision = index_outcomes(outcomes)
    max_gap = 0.0
    found: Optional[tuple[Decision, Outcome]] = None

    for decision in decisions:
        outcome = by_decision.get(decision.id)
        if outcome is None or decision.confidence is None:
            continue
        gap = abs(decision.confidence / 100 - outcome_probability(outcome.outcome_score))
        if gap > max_gap:
            max_gap = gap
            found = (decision, outcome)

    if found is None:
        return ReviewHighlight(None, None, NO_MISCALIBRATION_TEXT)

    decision, outcome = found
    score = OutcomeScore(outcome.outcome_score)
    overconfident = decision.confidence / 100 > outcome_probability(score)
    words = _OVERCONFIDENT_WORDS if overconfident else _UNDERCONFIDENT_WORDS
    return ReviewHighlight(
        decision,
        outcome,
        f"You were {decision.confidence}% confident but it went {words[score]}.",
    )


def _highlight_for(outcome: Outcome, decisions: Sequence[Decision], description: str) -> ReviewHighlight:
    decision = next((d for d in decisions if d.id == outcome.decision_id), None)
    if decision is None:
        return ReviewHighlight(None, None, MISSING_DECISION_TEXT)
    return ReviewHighlight(decision, outcome, description)


def best_decision(decisions: Sequence[Decision], outcomes: Sequence[Outcome]) -> ReviewHighlight:
    if not outcomes:
        return ReviewHighlight(None, None, NO_OUTCOMES_TEXT)
    best = max(outcomes, key=lambda o: o.outcome_score)
    verdict = "better than expected" if best.outcome_score == OutcomeScore.WIN else "as expected"
    return _highlight_for(best, decisions, f"This decision turned out {verdict}.")


def worst_decision(decisions: Sequence[Decision], outcomes: Sequence[Outcome]) -> ReviewHighlight:
    if not outcomes:
        return ReviewHighlight(None, None, NO_OUTCOMES_TEXT)
    worst = min(outcomes, key=lambda o: o.outcome_score)
    return _highlight_for(worst, decisions, "This decision turned out worse than expected.")


def thinking_upgrade(
    decisions: Sequence[Decision],
    outcomes: Sequence[Outcome],
    miscalibration: ReviewHighlight,
    worst: ReviewHighlight,
) -> str:
    """The single most important suggestion, in priority order."""
    if _completion_rate(decisions, outcomes) < UPGRADE_COMPLETION:
        return "Focus on closing the loop: log outcomes for every decision you make."

    if miscalibration.decision is not None:
        confident_loss = (
            (miscalibration.decision.confidence or 0) >= OVERCONFIDENT_AT
            and miscalibration.outcome is not None
            and miscalibration.outcome.outcome_score == OutcomeScore.LOSS
        )
        if confident_loss:
            return "When you feel highly confident, pause and consider what could go wrong."
        return "Trust your judgment more when you have clear evidence."

    if worst.decision is not None:
        label = format_category(worst.decision.category)
        return f"Review your {label} decisions more carefully before committing."

    return "Keep logging outcomes consistently to build your judgment profile."


def generate_weekly_review(
    decisions: Sequence[Decision],
    outcomes: Sequence[Outcome],
) -> WeeklyReview:
    miscalibration = biggest_miscalibration(decisions, outcomes)
    worst = worst_decision(decisions, outcomes)
    return WeeklyReview(
        cognitive_pattern=cognitive_pattern(decisions, outcomes),
        biggest_miscalibration=miscalibration,
        best_decision=best_decision(decisions, outcomes),
        worst_decision=worst,
        thinking_upgrade=thinking_upgrade(decisions, outcomes, miscalibration, worst),
    )
