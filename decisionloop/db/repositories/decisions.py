"""Decision repository. Every write goes through the lifecycle guard."""

from typing import Any, Mapping, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from decisionloop.db.models import DecisionRecord, OutcomeRecord
from decisionloop.db.repositories.base import BaseRepository
from decisionloop.exceptions import DecisionNotFoundError
from decisionloop.lifecycle.errors import GuardResult
from decisionloop.lifecycle.guards import apply_update, can_mark_completed
from decisionloop.schemas.decision import Decision
from decisionloop.schemas.outcome import Outcome

logger = structlog.get_logger(__name__)


class DecisionRepository(BaseRepository[DecisionRecord, Decision]):
    def __init__(self):
        super().__init__(DecisionRecord, Decision)

    async def list_for_user(self, db: AsyncSession, user_id: str) -> list[Decision]:
        """All of a user's decisions, oldest first."""
        result = await db.execute(
            select(DecisionRecord)
            .where(DecisionRecord.user_id == user_id)
            .order_by(DecisionRecord.created_at.asc())
        )
        return [self.to_schema(row) for row in result.scalars().all()]

    async def add(self, db: AsyncSession, decision: Decision) -> Decision:
        stored = await self._insert(db, decision)
        logger.info("decision_created", decision_id=stored.id, user_id=stored.user_id)
        return stored

    async def save(
        self,
        db: AsyncSession,
        decision_id: str,
        patch: Mapping[str, Any],
    ) -> tuple[GuardResult, Optional[Decision]]:
        """
        Apply a guarded patch to a stored decision.

        Returns the guard result and the updated decision (None when the
        patch was rejected; nothing is written in that case).

        Raises:
            DecisionNotFoundError: No decision with that id
        """
        row = await self._get_row(db, decision_id)
        if row is None:
            raise DecisionNotFoundError(decision_id)

        outcome_row = (
            await db.execute(select(OutcomeRecord).where(OutcomeRecord.decision_id == decision_id))
        ).scalar_one_or_none()
        outcome = Outcome.model_validate(outcome_row) if outcome_row is not None else None

        result, updated = apply_update(self.to_schema(row), outcome, patch)
        if updated is None:
            return result, None

        self._assign(row, updated.model_dump(exclude={"id"}))
        await db.flush()
        logger.info("decision_updated", decision_id=decision_id, fields=sorted(patch))
        return result, updated

    async def mark_completed(
        self,
        db: AsyncSession,
        decision_id: str,
        outcome: Outcome,
    ) -> tuple[GuardResult, Optional[Decision]]:
        """
        Stamp ``outcome_id`` and ``completed_at`` from a freshly stored outcome.

        Raises:
            DecisionNotFoundError: No decision with that id
        """
        row = await self._get_row(db, decision_id)
        if row is None:
            raise DecisionNotFoundError(decision_id)

        decision = self.to_schema(row)
        result = can_mark_completed(decision, outcome)
        if not result:
            return result, None

        row.outcome_id = outcome.id
        row.completed_at = outcome.completed_at
        await db.flush()
        logger.info("decision_completed", decision_id=decision_id, outcome_id=outcome.id)
        return result, self.to_schema(row)


decision_repo = DecisionRepository()
