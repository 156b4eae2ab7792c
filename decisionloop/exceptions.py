"""
Exceptions raised at the storage/service boundary.

Lifecycle rule violations are NOT exceptions; guards return a
GuardResult (see ``decisionloop.lifecycle.errors``). These cover the
cases where the caller asked for something that does not exist.
"""

from typing import Any, Dict, Optional


class DecisionLoopError(Exception):
    """Base exception for the decision loop."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": type(self).__name__, "message": self.message, "details": self.details}


class NotFoundError(DecisionLoopError):
    """Resource not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            message=f"{resource} not found: {identifier}",
            details={"resource": resource, "identifier": identifier},
        )


class DecisionNotFoundError(NotFoundError):
    def __init__(self, decision_id: str):
        super().__init__("Decision", decision_id)


class OutcomeNotFoundError(NotFoundError):
    def __init__(self, outcome_id: str):
        super().__init__("Outcome", outcome_id)
