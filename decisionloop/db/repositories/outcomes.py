"""
Outcome repository.

One outcome per decision is enforced twice: by ``can_log_outcome`` before
the write, and by UNIQUE(decision_id) at the storage level. The second
catches the race two concurrent submissions can win past the first.
"""

from typing import Optional, Sequence

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from decisionloop.db.models import OutcomeRecord
from decisionloop.db.repositories.base import BaseRepository
from decisionloop.exceptions import OutcomeNotFoundError
from decisionloop.lifecycle.errors import GuardResult, LifecycleError
from decisionloop.schemas.outcome import Outcome

logger = structlog.get_logger(__name__)

DUPLICATE_OUTCOME_MESSAGE = "Cannot log multiple outcomes for the same decision"


class OutcomeRepository(BaseRepository[OutcomeRecord, Outcome]):
    def __init__(self):
        super().__init__(OutcomeRecord, Outcome)

    async def get_for_decision(self, db: AsyncSession, decision_id: str) -> Optional[Outcome]:
        result = await db.execute(
            select(OutcomeRecord).where(OutcomeRecord.decision_id == decision_id)
        )
        row = result.scalar_one_or_none()
        return self.to_schema(row) if row is not None else None

    async def list_for_decisions(
        self,
        db: AsyncSession,
        decision_ids: Sequence[str],
    ) -> list[Outcome]:
        if not decision_ids:
            return []
        result = await db.execute(
            select(OutcomeRecord)
            .where(OutcomeRecord.decision_id.in_(list(decision_ids)))
            .order_by(OutcomeRecord.completed_at.asc())
        )
        return [self.to_schema(row) for row in result.scalars().all()]

    async def add(self, db: AsyncSession, outcome: Outcome) -> GuardResult:
        """
        Insert an outcome.

        A uniqueness violation comes back as a DUPLICATE_OUTCOME result.
        The session is rolled back in that case, so callers should insert
        the outcome before any other write in the same unit of work.
        """
        db.add(self.to_record(outcome))
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            logger.warning("duplicate_outcome_rejected", decision_id=outcome.decision_id)
            return GuardResult.fail(LifecycleError.DUPLICATE_OUTCOME, DUPLICATE_OUTCOME_MESSAGE)

        logger.info(
            "outcome_created",
            outcome_id=outcome.id,
            decision_id=outcome.decision_id,
            outcome_score=int(outcome.outcome_score),
        )
        return GuardResult.ok()

    async def update_learning(
        self,
        db: AsyncSession,
        outcome_id: str,
        learning_reflection: Optional[str] = None,
        learning_confidence: Optional[int] = None,
    ) -> Outcome:
        """
        Update the learning pair, the only mutable part of an outcome.

        Raises:
            OutcomeNotFoundError: No outcome with that id
            pydantic.ValidationError: learning_confidence outside 0-100
        """
        row = await self._get_row(db, outcome_id)
        if row is None:
            raise OutcomeNotFoundError(outcome_id)

        current = self.to_schema(row)
        changes: dict = {}
        if learning_reflection is not None:
            changes["learning_reflection"] = learning_reflection
        if learning_confidence is not None:
            changes["learning_confidence"] = learning_confidence

        updated = Outcome.model_validate({**current.model_dump(), **changes})
        self._assign(row, {k: getattr(updated, k) for k in changes})
        await db.flush()
        logger.info("outcome_learning_updated", outcome_id=outcome_id, fields=sorted(changes))
        return updated


outcome_repo = OutcomeRepository()
