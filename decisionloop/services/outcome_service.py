"""
Outcome Service — close a decision's loop.

    decision (DECIDED) ──log_outcome──▶ outcome row + decision stamped ──▶ COMPLETED

The guard runs first; the unique index on outcomes backs it up when two
submissions race past the guard together.
"""

from typing import Any, Mapping, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from decisionloop.db.repositories import decision_repo, outcome_repo
from decisionloop.exceptions import DecisionNotFoundError
from decisionloop.lifecycle.errors import GuardResult
from decisionloop.lifecycle.guards import can_log_outcome
from decisionloop.schemas.outcome import Outcome

logger = structlog.get_logger(__name__)


class OutcomeService:
    """Logs outcomes and their learning follow-ups."""

    async def log_outcome(
        self,
        session: AsyncSession,
        decision_id: str,
        payload: Mapping[str, Any],
    ) -> tuple[GuardResult, Optional[Outcome]]:
        """
        Attach an outcome to a decided decision.

        Args:
            session: Database session
            decision_id: Decision being closed
            payload: Outcome fields (outcome_score, reflections, ...)

        Returns:
            (guard result, stored outcome). The outcome is None when the
            guard or the storage uniqueness check rejected the write.

        Raises:
            DecisionNotFoundError: Unknown decision
            pydantic.ValidationError: Malformed payload
        """
        decision = await decision_repo.get(session, decision_id)
        if decision is None:
            raise DecisionNotFoundError(decision_id)

        existing = await outcome_repo.get_for_decision(session, decision_id)
        result = can_log_outcome(decision, existing)
        if not result:
            logger.warning(
                "outcome_rejected",
                decision_id=decision_id,
                code=result.code.value if result.code else None,
                reason=result.error,
            )
            return result, None

        outcome = Outcome(**{**payload, "decision_id": decision_id})
        result = await outcome_repo.add(session, outcome)
        if not result:
            return result, None

        result, _ = await decision_repo.mark_completed(session, decision_id, outcome)
        if not result:
            # The outcome row must not outlive a rejected completion
            await session.rollback()
            logger.warning(
                "outcome_rolled_back",
                decision_id=decision_id,
                code=result.code.value if result.code else None,
                reason=result.error,
            )
            return result, None

        logger.info(
            "outcome_logged",
            decision_id=decision_id,
            outcome_id=outcome.id,
            outcome_score=int(outcome.outcome_score),
        )
        return result, outcome

    async def update_learning(
        self,
        session: AsyncSession,
        outcome_id: str,
        learning_reflection: Optional[str] = None,
        learning_confidence: Optional[int] = None,
    ) -> Outcome:
        """Record hindsight on a logged outcome (the only post-completion edit)."""
        return await outcome_repo.update_learning(
            session,
            outcome_id,
            learning_reflection=learning_reflection,
            learning_confidence=learning_confidence,
        )
