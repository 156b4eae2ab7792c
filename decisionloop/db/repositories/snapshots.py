"""
Health snapshot repository.

Snapshots are append-only and first-writer-wins: the first write for a
(user, day) sticks, later writes for that day are discarded.
"""

from datetime import date
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from decisionloop.db.models import HealthSnapshotRecord
from decisionloop.db.repositories.base import BaseRepository
from decisionloop.schemas.snapshot import DecisionHealthSnapshot

logger = structlog.get_logger(__name__)


class SnapshotRepository(BaseRepository[HealthSnapshotRecord, DecisionHealthSnapshot]):
    def __init__(self):
        super().__init__(HealthSnapshotRecord, DecisionHealthSnapshot)

    async def get_on(
        self,
        db: AsyncSession,
        user_id: str,
        snapshot_date: date,
    ) -> Optional[DecisionHealthSnapshot]:
        result = await db.execute(
            select(HealthSnapshotRecord).where(
                HealthSnapshotRecord.user_id == user_id,
                HealthSnapshotRecord.snapshot_date == snapshot_date,
            )
        )
        row = result.scalar_one_or_none()
        return self.to_schema(row) if row is not None else None

    async def latest_on_or_before(
        self,
        db: AsyncSession,
        user_id: str,
        snapshot_date: date,
    ) -> Optional[DecisionHealthSnapshot]:
        result = await db.execute(
            select(HealthSnapshotRecord)
            .where(
                HealthSnapshotRecord.user_id == user_id,
                HealthSnapshotRecord.snapshot_date <= snapshot_date,
            )
            .order_by(HealthSnapshotRecord.snapshot_date.desc())
            .limit(1)
        )
        row = result.scalar_one_or_none()
        return self.to_schema(row) if row is not None else None

    async def series(
        self,
        db: AsyncSession,
        user_id: str,
        since: date,
    ) -> list[DecisionHealthSnapshot]:
        """Snapshots from ``since`` (inclusive) onwards, oldest first."""
        result = await db.execute(
            select(HealthSnapshotRecord)
            .where(
                HealthSnapshotRecord.user_id == user_id,
                HealthSnapshotRecord.snapshot_date >= since,
            )
            .order_by(HealthSnapshotRecord.snapshot_date.asc())
        )
        return [self.to_schema(row) for row in result.scalars().all()]

    async def record(
        self,
        db: AsyncSession,
        snapshot: DecisionHealthSnapshot,
    ) -> DecisionHealthSnapshot:
        """
        Store the day's snapshot unless one already exists.

        Returns whichever snapshot is stored for that day afterwards.
        """
        existing = await self.get_on(db, snapshot.user_id, snapshot.snapshot_date)
        if existing is not None:
            logger.info(
                "health_snapshot_exists",
                user_id=snapshot.user_id,
                snapshot_date=snapshot.snapshot_date.isoformat(),
            )
            return existing

        db.add(self.to_record(snapshot))
        try:
            await db.flush()
        except IntegrityError:
            # Lost the race to a concurrent writer for the same day
            await db.rollback()
            logger.info(
                "health_snapshot_race_lost",
                user_id=snapshot.user_id,
                snapshot_date=snapshot.snapshot_date.isoformat(),
            )
            stored = await self.get_on(db, snapshot.user_id, snapshot.snapshot_date)
            return stored if stored is not None else snapshot

        logger.info(
            "health_snapshot_recorded",
            user_id=snapshot.user_id,
            snapshot_date=snapshot.snapshot_date.isoformat(),
            health_score=snapshot.health_score,
        )
        return snapshot


snapshot_repo = SnapshotRepository()
