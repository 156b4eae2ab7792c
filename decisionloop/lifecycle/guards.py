"""
Lifecycle guards — the authoritative gate for every decision write path.

Each guard returns a GuardResult; none raise. ``validate_update`` composes
them and must pass before any Decision mutation is persisted. Guards only
see a point-in-time snapshot: the one-outcome-per-decision rule is also
backed by a unique index on the outcomes table (see db.models).
"""

from typing import Any, Mapping, Optional

import structlog

from decisionloop.lifecycle.errors import GuardResult, LifecycleError
from decisionloop.lifecycle.status import (
    DecisionStatus,
    can_transition,
    compute_status,
    log_illegal_transition,
)
from decisionloop.schemas.decision import Decision
from decisionloop.schemas.outcome import LEARNING_FIELDS, Outcome

logger = structlog.get_logger(__name__)

COMMIT_FIELDS: tuple[str, ...] = ("decided_at", "chosen_option_id")

STATUS_KEY = "status"
_MISSING = object()


def _must_be_decided(action: str, status: DecisionStatus) -> GuardResult:
    return GuardResult.fail(
        LifecycleError.PREREQUISITE_STATE_VIOLATION,
        f"Cannot {action} decision in {status} state. Must be DECIDED.",
    )


def _immutable(field_name: str) -> GuardResult:
    return GuardResult.fail(
        LifecycleError.IMMUTABLE_FIELD_VIOLATION,
        f"Cannot modify {field_name} for COMPLETED decision. "
        "Only learning notes can be updated.",
    )


def _missing_outcome() -> GuardResult:
    return GuardResult.fail(
        LifecycleError.MISSING_OUTCOME_FOR_COMPLETION,
        "Cannot mark decision as COMPLETED without an outcome record",
    )


def can_log_outcome(decision: Decision, existing_outcome: Optional[Outcome]) -> GuardResult:
    """
    Whether an outcome may be attached to this decision.

    Enforces the 1:1 decision/outcome rule at the business-logic layer.
    """
    status = compute_status(decision, existing_outcome)

    if status == DecisionStatus.COMPLETED:
        if existing_outcome is not None:
            return GuardResult.fail(
                LifecycleError.DUPLICATE_OUTCOME,
                "Cannot log multiple outcomes for the same decision",
            )
        return GuardResult.fail(
            LifecycleError.DUPLICATE_OUTCOME, "Decision is already completed"
        )

    if status != DecisionStatus.DECIDED:
        return _must_be_decided("log outcome for", status)

    if existing_outcome is not None:
        return GuardResult.fail(
            LifecycleError.DUPLICATE_OUTCOME,
            "An outcome already exists for this decision",
        )

    return GuardResult.ok()


def can_mark_completed(decision: Decision, candidate_outcome: Optional[Outcome]) -> GuardResult:
    """Whether the decision may move to COMPLETED backed by ``candidate_outcome``."""
    # Status from stored fields only; the candidate must not count
    status = compute_status(decision, None)

    if status == DecisionStatus.COMPLETED:
        return GuardResult.fail(
            LifecycleError.DUPLICATE_OUTCOME, "Decision is already completed"
        )

    if status != DecisionStatus.DECIDED:
        return _must_be_decided("complete", status)

    if candidate_outcome is None:
        return _missing_outcome()

    return GuardResult.ok()


def can_modify_field(
    decision: Decision,
    outcome: Optional[Outcome],
    field_name: str,
) -> GuardResult:
    """COMPLETED decisions accept edits to the learning notes only."""
    if compute_status(decision, outcome) == DecisionStatus.COMPLETED:
        if field_name not in LEARNING_FIELDS:
            return _immutable(field_name)
    return GuardResult.ok()


def _reject(decision: Decision, result: GuardResult, **context: Any) -> GuardResult:
    logger.warning(
        "illegal_decision_update",
        decision_id=decision.id,
        code=result.code.value if result.code else None,
        reason=result.error,
        **context,
    )
    return result


def validate_update(
    current_decision: Decision,
    current_outcome: Optional[Outcome],
    patch: Mapping[str, Any],
) -> GuardResult:
    """
    Validate a proposed decision patch against the state machine.

    ``patch`` holds the changed fields and may carry a ``status`` key
    requesting a transition. Rejects, in order:
    1. illegal status transitions
    2. COMPLETED without a backing outcome
    3. changes to anything but learning notes on a COMPLETED decision
    4. clearing decided_at / chosen_option_id once past OPEN
    5. a half-set commit, or an outcome_id without a commit
    """
    status = compute_status(current_decision, current_outcome)

    # ── 1. Status transition ──────────────────────────────────────────
    target: Optional[DecisionStatus] = None
    if patch.get(STATUS_KEY) is not None:
        try:
            target = DecisionStatus(patch[STATUS_KEY])
        except ValueError:
            return _reject(
                current_decision,
                GuardResult.fail(
                    LifecycleError.INVALID_STATE_TRANSITION,
                    f"Invalid state transition: {status} → {patch[STATUS_KEY]}",
                ),
            )
        if not can_transition(status, target):
            log_illegal_transition(current_decision.id, status, target)
            return _reject(
                current_decision,
                GuardResult.fail(
                    LifecycleError.INVALID_STATE_TRANSITION,
                    f"Invalid state transition: {status} → {target}",
                ),
                current_status=str(status),
                target_status=str(target),
            )

    # ── 2. Completion needs an outcome ────────────────────────────────
    if target == DecisionStatus.COMPLETED or patch.get("outcome_id"):
        has_backing = (
            current_outcome is not None
            or current_decision.outcome_id is not None
            or bool(patch.get("outcome_id"))
        )
        if not has_backing:
            return _reject(current_decision, _missing_outcome())

    # ── 3. Everything but learning notes is locked on COMPLETED ───────
    if status == DecisionStatus.COMPLETED:
        for field_name, value in patch.items():
            if field_name == STATUS_KEY:
                continue
            if value == getattr(current_decision, field_name, _MISSING):
                continue
            result = can_modify_field(current_decision, current_outcome, field_name)
            if not result:
                return _reject(current_decision, result, field=field_name)

    # ── 4. Commit fields cannot be cleared ────────────────────────────
    if status != DecisionStatus.OPEN:
        for field_name in COMMIT_FIELDS:
            if field_name in patch and patch[field_name] is None:
                return _reject(
                    current_decision,
                    GuardResult.fail(
                        LifecycleError.PREREQUISITE_STATE_VIOLATION,
                        f"Cannot remove decided_at or chosen_option_id from {status} decision",
                    ),
                    field=field_name,
                )

    # ── 5. The result must still be a consistent commit ───────────────
    merged = {
        name: patch.get(name, getattr(current_decision, name))
        for name in (*COMMIT_FIELDS, "outcome_id")
    }
    committed = [merged[name] is not None for name in COMMIT_FIELDS]
    if any(committed) and not all(committed):
        return _reject(
            current_decision,
            GuardResult.fail(
                LifecycleError.PREREQUISITE_STATE_VIOLATION,
                "decided_at and chosen_option_id must be set together",
            ),
        )
    if merged["outcome_id"] is not None and not all(committed):
        return _reject(
            current_decision,
            GuardResult.fail(
                LifecycleError.PREREQUISITE_STATE_VIOLATION,
                f"Cannot attach an outcome to a {status} decision. Must be DECIDED.",
            ),
        )

    return GuardResult.ok()


def apply_update(
    current_decision: Decision,
    current_outcome: Optional[Outcome],
    patch: Mapping[str, Any],
) -> tuple[GuardResult, Optional[Decision]]:
    """
    Validate and apply a patch.

    Returns (result, updated_decision); updated_decision is None when the
    patch is rejected. The ``status`` pseudo-field is never copied onto the
    record since status is always computed. The merged record is
    re-validated, so a patch that breaks a model invariant raises
    ``pydantic.ValidationError``.
    """
    result = validate_update(current_decision, current_outcome, patch)
    if not result:
        return result, None

    changes = {k: v for k, v in patch.items() if k != STATUS_KEY}
    updated = Decision.model_validate({**current_decision.model_dump(), **changes})
    return result, updated
