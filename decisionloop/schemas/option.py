"""Option record — one candidate considered for a decision."""

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from decisionloop.scoring.engine import calculate_option_score


class Option(BaseModel):
    """
    A scored candidate. Ratings are 1-10; ``total_score`` is the stored
    integer expected value (display value × 10). Immutable after creation.
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    decision_id: str
    label: str = ""
    notes: Optional[str] = None
    impact: int = Field(ge=1, le=10)
    effort: int = Field(ge=1, le=10)
    risk: int = Field(ge=1, le=10)
    total_score: int = Field(ge=10, le=100)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create(
        cls,
        decision_id: str,
        label: str,
        impact: int,
        effort: int,
        risk: int,
        notes: Optional[str] = None,
        **extra,
    ) -> "Option":
        """Build an option, clamping ratings and fixing its score."""
        impact, effort, risk = (max(1, min(10, v)) for v in (impact, effort, risk))
        return cls(
            decision_id=decision_id,
            label=label,
            notes=notes,
            impact=impact,
            effort=effort,
            risk=risk,
            total_score=calculate_option_score(impact, effort, risk),
            **extra,
        )
