"""
Health Service — recompute today's decision health and snapshot it.

Flow:
1. Load the user's history through the ownership boundary
2. Streak from activity days (decisions created, outcomes completed, and
   any caller-supplied days such as check-ins)
3. Decision health, recorded as today's snapshot (first write of the day wins)
4. Trend against the snapshot from 7 days earlier
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from decisionloop.config import settings
from decisionloop.db.repositories import snapshot_repo
from decisionloop.history import UserHistory
from decisionloop.metrics.health import (
    DecisionHealth,
    HealthTrend,
    build_health_snapshot,
    calculate_activity_streak,
    calculate_decision_health,
    decision_health_trend,
)
from decisionloop.schemas.snapshot import DecisionHealthSnapshot
from decisionloop.services.loaders import load_user_history

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class HealthReport:
    health: DecisionHealth
    trend: HealthTrend
    snapshot: DecisionHealthSnapshot

    def to_dict(self) -> dict:
        return {
            "health": self.health.to_dict(),
            "trend": {"trend": self.trend.trend, "change": self.trend.change},
            "snapshot_date": self.snapshot.snapshot_date.isoformat(),
        }


def collect_activity_dates(history: UserHistory, extra: Iterable[date] = ()) -> set[date]:
    """Days with any decision created or outcome completed, plus ``extra``."""
    days = set(extra)
    days.update(d.created_at.date() for d in history.decisions)
    days.update(o.completed_at.date() for o in history.outcomes)
    return days


class HealthService:
    def __init__(
        self,
        streak_target_days: int = settings.streak_target_days,
        trend_threshold: float = settings.trend_threshold,
        trend_lookback_days: int = settings.health_trend_lookback_days,
    ):
        self.streak_target_days = streak_target_days
        self.trend_threshold = trend_threshold
        self.trend_lookback_days = trend_lookback_days

    async def recalculate(
        self,
        session: AsyncSession,
        user_id: str,
        today: date,
        activity_dates: Iterable[date] = (),
    ) -> HealthReport:
        history = await load_user_history(session, user_id)

        streak = calculate_activity_streak(collect_activity_dates(history, activity_dates), today)
        health = calculate_decision_health(
            history.decisions,
            history.outcomes,
            streak,
            streak_target_days=self.streak_target_days,
        )

        snapshot = await snapshot_repo.record(
            session, build_health_snapshot(user_id, health, today)
        )

        previous = await snapshot_repo.get_on(
            session, user_id, today - timedelta(days=self.trend_lookback_days)
        )
        trend = decision_health_trend(
            health.health_score,
            previous.health_score if previous is not None else None,
            threshold=self.trend_threshold,
        )

        logger.info(
            "decision_health_recalculated",
            user_id=user_id,
            health_score=health.health_score,
            streak=streak,
            trend=trend.trend,
        )
        return HealthReport(health=health, trend=trend, snapshot=snapshot)
