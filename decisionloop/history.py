"""
Ownership boundary for analytics input.

Every metric in this package is identity-agnostic: it trusts that the
records it receives belong to one user. ``scope_to_user`` is where that
trust is established. Anything that does not belong to the user is
dropped here (and logged), never passed downstream.

- decisions: kept when ``decision.user_id`` matches
- outcomes:  kept when they close one of the kept decisions
- options:   kept when they belong to one of the kept decisions
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

import structlog

from decisionloop.schemas.decision import Decision
from decisionloop.schemas.option import Option
from decisionloop.schemas.outcome import Outcome

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class UserHistory:
    """One user's decisions with their outcomes and options."""
    user_id: str
    decisions: list[Decision] = field(default_factory=list)
    outcomes: list[Outcome] = field(default_factory=list)
    options: list[Option] = field(default_factory=list)

    @property
    def option_risks(self) -> dict[str, int]:
        """option id → risk rating, the shape Risk Intelligence expects."""
        return {o.id: o.risk for o in self.options}

    def outcome_for(self, decision_id: str) -> Optional[Outcome]:
        return next((o for o in self.outcomes if o.decision_id == decision_id), None)


def scope_to_user(
    user_id: str,
    decisions: Iterable[Decision],
    outcomes: Iterable[Outcome] = (),
    options: Iterable[Option] = (),
) -> UserHistory:
    """Filter raw records down to what ``user_id`` owns."""
    all_decisions = list(decisions)
    owned = [d for d in all_decisions if d.user_id == user_id]
    owned_ids = {d.id for d in owned}

    all_outcomes = list(outcomes)
    owned_outcomes = [o for o in all_outcomes if o.decision_id in owned_ids]

    all_options = list(options)
    owned_options = [o for o in all_options if o.decision_id in owned_ids]

    dropped = {
        "decisions": len(all_decisions) - len(owned),
        "outcomes": len(all_outcomes) - len(owned_outcomes),
        "options": len(all_options) - len(owned_options),
    }
    if any(dropped.values()):
        logger.warning("foreign_records_dropped", user_id=user_id, **dropped)

    return UserHistory(
        user_id=user_id,
        decisions=owned,
        outcomes=owned_outcomes,
        options=owned_options,
    )
