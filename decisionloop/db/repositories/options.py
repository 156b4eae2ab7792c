"""Option repository. Options are immutable once written."""

from typing import Iterable, Sequence

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from decisionloop.db.models import OptionRecord
from decisionloop.db.repositories.base import BaseRepository
from decisionloop.schemas.option import Option

logger = structlog.get_logger(__name__)


class OptionRepository(BaseRepository[OptionRecord, Option]):
    def __init__(self):
        super().__init__(OptionRecord, Option)

    async def add_many(self, db: AsyncSession, options: Iterable[Option]) -> list[Option]:
        rows = [self.to_record(option) for option in options]
        db.add_all(rows)
        await db.flush()
        logger.info("options_created", count=len(rows))
        return [self.to_schema(row) for row in rows]

    async def list_for_decisions(
        self,
        db: AsyncSession,
        decision_ids: Sequence[str],
    ) -> list[Option]:
        if not decision_ids:
            return []
        result = await db.execute(
            select(OptionRecord)
            .where(OptionRecord.decision_id.in_(list(decision_ids)))
            .order_by(OptionRecord.created_at.asc())
        )
        return [self.to_schema(row) for row in result.scalars().all()]

    async def risk_map_for_decisions(
        self,
        db: AsyncSession,
        decision_ids: Sequence[str],
    ) -> dict[str, int]:
        """option id → risk rating, for Risk Intelligence."""
        if not decision_ids:
            return {}
        result = await db.execute(
            select(OptionRecord.id, OptionRecord.risk)
            .where(OptionRecord.decision_id.in_(list(decision_ids)))
        )
        return {option_id: risk for option_id, risk in result.all()}


option_repo = OptionRepository()
