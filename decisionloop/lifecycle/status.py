"""
Decision status computation.

State machine: OPEN → DECIDED → COMPLETED (strictly forward, no cycles)

- OPEN:      decided_at or chosen_option_id missing
- DECIDED:   both commit fields set, no outcome
- COMPLETED: an outcome is attached (outcome_id set or Outcome supplied)
"""

from enum import StrEnum
from typing import Optional

import structlog

from decisionloop.schemas.decision import Decision
from decisionloop.schemas.outcome import Outcome

logger = structlog.get_logger(__name__)


class DecisionStatus(StrEnum):
    OPEN = "open"
    DECIDED = "decided"
    COMPLETED = "completed"


# Forward edges only; identity transitions are always allowed on top of these
ALLOWED_TRANSITIONS: dict[DecisionStatus, frozenset[DecisionStatus]] = {
    DecisionStatus.OPEN: frozenset({DecisionStatus.DECIDED, DecisionStatus.COMPLETED}),
    DecisionStatus.DECIDED: frozenset({DecisionStatus.COMPLETED}),
    DecisionStatus.COMPLETED: frozenset(),
}

_BADGE_TEXT: dict[DecisionStatus, str] = {
    DecisionStatus.OPEN: "Open",
    DecisionStatus.DECIDED: "Outcome due",
    DecisionStatus.COMPLETED: "Completed",
}


def compute_status(decision: Decision, outcome: Optional[Outcome] = None) -> DecisionStatus:
    """Derive the current status from stored fields. Total over all inputs."""
    if decision.decided_at is None or decision.chosen_option_id is None:
        return DecisionStatus.OPEN
    if decision.outcome_id is not None or outcome is not None:
        return DecisionStatus.COMPLETED
    return DecisionStatus.DECIDED


def is_closed_loop(decision: Decision, outcome: Optional[Outcome] = None) -> bool:
    """True once the decision has an attached outcome."""
    return compute_status(decision, outcome) == DecisionStatus.COMPLETED


def can_transition(current: DecisionStatus, target: DecisionStatus) -> bool:
    """
    Whether a status change is legal.

    Forbidden: completed → decided, completed → open, decided → open.
    """
    current = DecisionStatus(current)
    target = DecisionStatus(target)
    if current == target:
        return True
    return target in ALLOWED_TRANSITIONS[current]


def status_badge_text(status: DecisionStatus) -> str:
    return _BADGE_TEXT.get(DecisionStatus(status), "Open")


def log_illegal_transition(
    decision_id: str,
    current: DecisionStatus,
    attempted: DecisionStatus,
) -> None:
    """Record an illegal transition attempt with the allowed edges."""
    logger.warning(
        "illegal_state_transition",
        decision_id=decision_id,
        current_status=str(current),
        attempted_status=str(attempted),
        allowed_transitions={
            str(k): sorted(str(s) for s in v) for k, v in ALLOWED_TRANSITIONS.items()
        },
    )
