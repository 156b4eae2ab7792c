"""
Decision Lifecycle State Machine.

The ONE place decision status is derived. Server rendering, background
jobs and services call ``compute_status`` instead of re-deriving
"decided" / "completed" from fields locally.

Components:
- status: status computation, transition table, badge text
- errors: GuardResult + LifecycleError taxonomy
- guards: outcome / completion / mutation guards and validate_update
"""

from decisionloop.lifecycle.errors import GuardResult, LifecycleError
from decisionloop.lifecycle.guards import (
    apply_update,
    can_log_outcome,
    can_mark_completed,
    can_modify_field,
    validate_update,
)
from decisionloop.lifecycle.status import (
    ALLOWED_TRANSITIONS,
    DecisionStatus,
    can_transition,
    compute_status,
    is_closed_loop,
    log_illegal_transition,
    status_badge_text,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "DecisionStatus",
    "GuardResult",
    "LifecycleError",
    "apply_update",
    "can_log_outcome",
    "can_mark_completed",
    "can_modify_field",
    "can_transition",
    "compute_status",
    "is_closed_loop",
    "log_illegal_transition",
    "status_badge_text",
    "validate_update",
]
