"""
Record schemas consumed by the lifecycle and analytics core.

The surrounding application fetches these from storage (already scoped to
one user) and passes them in; nothing here talks to a database.
"""

from decisionloop.schemas.category import DecisionCategory, all_category_labels, format_category
from decisionloop.schemas.decision import Decision
from decisionloop.schemas.option import Option
from decisionloop.schemas.outcome import (
    LEARNING_FIELDS,
    Outcome,
    OutcomeScore,
    TemporalAnchor,
    outcome_score_to_status,
    outcome_status_to_score,
)
from decisionloop.schemas.snapshot import DecisionHealthSnapshot

__all__ = [
    "Decision",
    "DecisionCategory",
    "DecisionHealthSnapshot",
    "LEARNING_FIELDS",
    "Option",
    "Outcome",
    "OutcomeScore",
    "TemporalAnchor",
    "all_category_labels",
    "format_category",
    "outcome_score_to_status",
    "outcome_status_to_score",
]
