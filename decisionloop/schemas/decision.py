"""
Decision record — one user-initiated choice event.

Status is deliberately NOT a field: it is derived from the commit fields
and the outcome reference by ``decisionloop.lifecycle.compute_status``.
"""

import uuid
from datetime import date, datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from decisionloop.schemas.category import DecisionCategory


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Decision(BaseModel):
    """
    A decision and everything captured about it up to commit time.

    Invariants enforced at construction:
    - chosen_option_id and decided_at are set together or not at all
    - outcome_id only once the decision has been committed
    """

    model_config = ConfigDict(str_strip_whitespace=True, from_attributes=True)

    id: str = Field(default_factory=_new_id)
    user_id: str
    created_at: datetime = Field(default_factory=_utcnow)
    decision_date: date = Field(default_factory=lambda: _utcnow().date())
    title: str = Field(min_length=1, max_length=500)
    category: DecisionCategory = DecisionCategory.OTHER
    context: str = ""

    # Framing
    success_outcome: Optional[str] = None
    constraints: Optional[str] = None
    risky_assumption: Optional[str] = None

    # Commit
    chosen_option_id: Optional[str] = None
    decided_at: Optional[datetime] = None
    confidence: Optional[int] = Field(default=None, ge=0, le=100)
    next_action: Optional[str] = None
    next_action_due_date: Optional[date] = None
    decision_rationale: Optional[str] = None
    predicted_outcome_positive: Optional[str] = None
    predicted_outcome_negative: Optional[str] = None
    commitment_confirmed: bool = False

    # Closure
    outcome_id: Optional[str] = None
    completed_at: Optional[datetime] = None

    @model_validator(mode="after")
    def check_commit_fields(self) -> "Decision":
        """Commit fields travel together; outcome requires a commit."""
        committed = self.chosen_option_id is not None
        if committed != (self.decided_at is not None):
            raise ValueError("chosen_option_id and decided_at must be set together")
        if self.outcome_id is not None and not committed:
            raise ValueError("outcome_id requires chosen_option_id and decided_at")
        return self

    @property
    def is_committed(self) -> bool:
        return self.chosen_option_id is not None and self.decided_at is not None
