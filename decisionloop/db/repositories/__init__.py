"""Async repositories. Each returns pydantic records, never ORM rows."""

from decisionloop.db.repositories.decisions import DecisionRepository, decision_repo
from decisionloop.db.repositories.options import OptionRepository, option_repo
from decisionloop.db.repositories.outcomes import OutcomeRepository, outcome_repo
from decisionloop.db.repositories.snapshots import SnapshotRepository, snapshot_repo

__all__ = [
    "DecisionRepository",
    "OptionRepository",
    "OutcomeRepository",
    "SnapshotRepository",
    "decision_repo",
    "option_repo",
    "outcome_repo",
    "snapshot_repo",
]
