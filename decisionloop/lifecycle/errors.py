"""
Lifecycle rule violations.

These are business-rule outcomes expected during normal use (a user
double-submitting a form), so guards RETURN them instead of raising.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional


class LifecycleError(StrEnum):
    INVALID_STATE_TRANSITION = "invalid_state_transition"
    MISSING_OUTCOME_FOR_COMPLETION = "missing_outcome_for_completion"
    DUPLICATE_OUTCOME = "duplicate_outcome"
    IMMUTABLE_FIELD_VIOLATION = "immutable_field_violation"
    PREREQUISITE_STATE_VIOLATION = "prerequisite_state_violation"


@dataclass(frozen=True)
class GuardResult:
    """Outcome of a guard: valid, or a code plus a human-readable message."""

    valid: bool
    error: Optional[str] = None
    code: Optional[LifecycleError] = None

    @classmethod
    def ok(cls) -> "GuardResult":
        return cls(valid=True)

    @classmethod
    def fail(cls, code: LifecycleError, message: str) -> "GuardResult":
        return cls(valid=False, error=message, code=code)

    def __bool__(self) -> bool:
        return self.valid

    def to_dict(self) -> dict:
        result: dict = {"valid": self.valid}
        if self.error is not None:
            result["error"] = self.error
        if self.code is not None:
            result["code"] = self.code.value
        return result
