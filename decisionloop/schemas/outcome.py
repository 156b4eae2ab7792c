"""
Outcome record — the single closure record for a decision.

Created exactly once per decision. Only the learning pair
(learning_reflection, learning_confidence) may change afterwards.
"""

import uuid
from datetime import datetime, timezone
from enum import IntEnum, StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class OutcomeScore(IntEnum):
    """Ternary outcome: how it turned out versus expectations."""

    LOSS = -1
    NEUTRAL = 0
    WIN = 1


class TemporalAnchor(StrEnum):
    """How long after the decision the outcome is being judged."""

    ONE_DAY = "1_day"
    ONE_WEEK = "1_week"
    ONE_MONTH = "1_month"
    THREE_MONTHS = "3_months"


LEARNING_FIELDS: frozenset[str] = frozenset({"learning_reflection", "learning_confidence"})

_STATUS_TO_SCORE: dict[str, OutcomeScore] = {
    "won": OutcomeScore.WIN,
    "neutral": OutcomeScore.NEUTRAL,
    "lost": OutcomeScore.LOSS,
}


class Outcome(BaseModel):
    """What actually happened after a decision."""

    model_config = ConfigDict(str_strip_whitespace=True, from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    decision_id: str
    outcome_score: OutcomeScore
    outcome_reflection: str = ""
    learning_reflection: str = ""
    learning_confidence: Optional[int] = Field(default=None, ge=0, le=100)
    completed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Reflection prompts
    temporal_anchor: Optional[TemporalAnchor] = None
    counterfactual_reflection: Optional[str] = None
    self_reflection: Optional[str] = None

    @property
    def is_win(self) -> bool:
        return self.outcome_score == OutcomeScore.WIN

    @property
    def is_loss(self) -> bool:
        return self.outcome_score == OutcomeScore.LOSS


def outcome_status_to_score(status: str) -> OutcomeScore:
    """Legacy textual status (won/neutral/lost) to score; unknown → neutral."""
    return _STATUS_TO_SCORE.get(status, OutcomeScore.NEUTRAL)


def outcome_score_to_status(score: int) -> str:
    if score == OutcomeScore.WIN:
        return "won"
    if score == OutcomeScore.LOSS:
        return "lost"
    return "neutral"
