"""
Insights Service — everything the insights view shows, in one call.

Loads the user's history and health snapshots, then runs the pure
analytics: judgment profile, trajectory, category calibration, pattern
warnings and State of You. The weekly review is a separate call over the
last seven days.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from decisionloop.config import settings
from decisionloop.db.repositories import snapshot_repo
from decisionloop.indices.trajectory import DecisionTrajectory, generate_trajectory
from decisionloop.metrics.health import calculate_decision_health
from decisionloop.patterns.detector import BiasDetector
from decisionloop.patterns.schemas import CategoryCalibration, PatternWarning
from decisionloop.profile.narrative import JudgmentProfile, generate_judgment_profile
from decisionloop.profile.state_of_you import StateOfYou, generate_state_of_you
from decisionloop.profile.weekly_review import WeeklyReview, generate_weekly_review
from decisionloop.services.loaders import load_user_history

logger = structlog.get_logger(__name__)

HEALTH_SERIES_DAYS: int = 30
WEEKLY_REVIEW_DAYS: int = 7


@dataclass(frozen=True)
class Insights:
    profile: JudgmentProfile
    trajectory: Optional[DecisionTrajectory]
    calibrations: list[CategoryCalibration] = field(default_factory=list)
    warnings: list[PatternWarning] = field(default_factory=list)
    state_of_you: Optional[StateOfYou] = None


class InsightsService:
    def __init__(
        self,
        detector: Optional[BiasDetector] = None,
        growth_window_days: int = settings.growth_window_days,
        min_outcomes_for_trajectory: int = settings.min_outcomes_for_trajectory,
    ):
        self.detector = detector or BiasDetector()
        self.growth_window_days = growth_window_days
        self.min_outcomes_for_trajectory = min_outcomes_for_trajectory

    async def _health_on(self, session: AsyncSession, user_id: str, day: date) -> Optional[float]:
        snapshot = await snapshot_repo.get_on(session, user_id, day)
        return float(snapshot.health_score) if snapshot is not None else None

    async def build(self, session: AsyncSession, user_id: str, today: date) -> Insights:
        history = await load_user_history(session, user_id)
        decisions, outcomes = history.decisions, history.outcomes

        # Today's health comes from today's snapshot when one exists
        current = await self._health_on(session, user_id, today)
        if current is None:
            current = float(calculate_decision_health(decisions, outcomes, streak_length=0).health_score)
            logger.debug("insights_no_snapshot_today", user_id=user_id)

        health_7 = await self._health_on(session, user_id, today - timedelta(days=7))
        health_14 = await self._health_on(
            session, user_id, today - timedelta(days=self.growth_window_days)
        )
        series = await snapshot_repo.series(
            session, user_id, today - timedelta(days=HEALTH_SERIES_DAYS)
        )

        insights = Insights(
            profile=generate_judgment_profile(
                decisions, outcomes, current, health_14, history.option_risks
            ),
            trajectory=generate_trajectory(
                decisions,
                outcomes,
                current,
                health_7_days_ago=health_7,
                health_14_days_ago=health_14,
                health_series=[float(s.health_score) for s in series],
                option_risks=history.option_risks,
                min_outcomes=self.min_outcomes_for_trajectory,
            ),
            calibrations=self.detector.category_calibration(decisions, outcomes),
            warnings=self.detector.detect_warnings(decisions, outcomes),
            state_of_you=generate_state_of_you(decisions, outcomes),
        )

        logger.info(
            "insights_built",
            user_id=user_id,
            archetype=insights.profile.archetype.value,
            has_trajectory=insights.trajectory is not None,
            n_warnings=len(insights.warnings),
        )
        return insights

    async def weekly_review(self, session: AsyncSession, user_id: str, today: date) -> WeeklyReview:
        """Review of decisions created in the 7 days up to and including ``today``."""
        history = await load_user_history(session, user_id)
        start = datetime.combine(today - timedelta(days=WEEKLY_REVIEW_DAYS - 1), time.min, tzinfo=timezone.utc)
        end = datetime.combine(today + timedelta(days=1), time.min, tzinfo=timezone.utc)

        week = [d for d in history.decisions if start <= d.created_at < end]
        week_ids = {d.id for d in week}
        week_outcomes = [o for o in history.outcomes if o.decision_id in week_ids]
        return generate_weekly_review(week, week_outcomes)
