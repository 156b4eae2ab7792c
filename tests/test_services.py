"""
Service Tests (SQLite in-memory).

Covers:
- OutcomeService: guarded outcome logging and decision stamping
- HealthService: streak, health, first-write snapshot and 7-day trend
- InsightsService: profile / trajectory / State of You from stored history
- Weekly review window
"""

from datetime import date

import pytest

from decisionloop.db.repositories import decision_repo, option_repo, outcome_repo, snapshot_repo
from decisionloop.exceptions import DecisionNotFoundError
from decisionloop.lifecycle import DecisionStatus, GuardResult, LifecycleError, compute_status
from decisionloop.metrics.health import DecisionHealth, build_health_snapshot
from decisionloop.profile import Archetype, SecondaryTrait
from decisionloop.schemas.category import DecisionCategory
from decisionloop.schemas.outcome import OutcomeScore
from decisionloop.services import HealthService, InsightsService, OutcomeService
from tests.factories import (
    OTHER_USER_ID,
    USER_ID,
    closed_loop,
    make_decision,
    make_option,
    make_outcome,
)

W, L = OutcomeScore.WIN, OutcomeScore.LOSS


async def _store(db, decisions, outcomes=()):
    for decision in decisions:
        await decision_repo.add(db, decision)
    for outcome in outcomes:
        await outcome_repo.add(db, outcome)


def _fixed_snapshot(day: date, score: int, user_id: str = USER_ID):
    health = DecisionHealth(
        health_score=score,
        win_rate=50.0,
        avg_calibration_gap=0.0,
        completion_rate=50.0,
        streak_length=0,
    )
    return build_health_snapshot(user_id, health, day)


# ── Outcome logging ────────────────────────────────────────────────────


class TestOutcomeService:
    def setup_method(self):
        self.service = OutcomeService()

    @pytest.mark.asyncio
    async def test_log_outcome_completes_decision(self, db):
        decision = make_decision(0)
        await _store(db, [decision])

        result, outcome = await self.service.log_outcome(
            db, decision.id, {"outcome_score": 1, "outcome_reflection": "Went well"}
        )
        assert result.valid
        assert outcome.outcome_score == OutcomeScore.WIN

        stored = await decision_repo.get(db, decision.id)
        assert stored.outcome_id == outcome.id
        assert stored.completed_at == outcome.completed_at
        assert compute_status(stored) == DecisionStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_second_outcome_rejected(self, db):
        decision = make_decision(0)
        await _store(db, [decision])
        await self.service.log_outcome(db, decision.id, {"outcome_score": 1})

        result, outcome = await self.service.log_outcome(db, decision.id, {"outcome_score": -1})
        assert outcome is None
        assert result.code == LifecycleError.DUPLICATE_OUTCOME
        assert result.error == "Cannot log multiple outcomes for the same decision"
        stored = await outcome_repo.get_for_decision(db, decision.id)
        assert stored.outcome_score == OutcomeScore.WIN

    @pytest.mark.asyncio
    async def test_open_decision_rejected(self, db):
        decision = make_decision(0, decided=False)
        await _store(db, [decision])

        result, outcome = await self.service.log_outcome(db, decision.id, {"outcome_score": 0})
        assert outcome is None
        assert result.code == LifecycleError.PREREQUISITE_STATE_VIOLATION
        assert await outcome_repo.get_for_decision(db, decision.id) is None

    @pytest.mark.asyncio
    async def test_rejected_completion_discards_outcome(self, db, monkeypatch):
        """If the decision cannot be stamped, the outcome row is not kept."""
        decision = make_decision(0)
        await _store(db, [decision])
        await db.commit()

        async def refuse(session, decision_id, outcome):
            failure = GuardResult.fail(LifecycleError.DUPLICATE_OUTCOME, "Decision is already completed")
            return failure, None

        monkeypatch.setattr(decision_repo, "mark_completed", refuse)
        result, outcome = await self.service.log_outcome(db, decision.id, {"outcome_score": 1})

        assert outcome is None
        assert result.code == LifecycleError.DUPLICATE_OUTCOME
        assert await outcome_repo.get_for_decision(db, decision.id) is None
        assert (await decision_repo.get(db, decision.id)).outcome_id is None

    @pytest.mark.asyncio
    async def test_unknown_decision(self, db):
        with pytest.raises(DecisionNotFoundError):
            await self.service.log_outcome(db, "nope", {"outcome_score": 1})

    @pytest.mark.asyncio
    async def test_learning_follow_up(self, db):
        decision = make_decision(0)
        await _store(db, [decision])
        _, outcome = await self.service.log_outcome(db, decision.id, {"outcome_score": 0})

        updated = await self.service.update_learning(db, outcome.id, learning_confidence=40)
        assert updated.learning_confidence == 40


# ── Health ─────────────────────────────────────────────────────────────


class TestHealthService:
    def setup_method(self):
        self.service = HealthService()
        self.today = date(2026, 3, 8)

    async def _seed(self, db):
        won = make_decision(0, confidence=70)
        pending = make_decision(1)
        outcome = make_outcome(won, W, learning_confidence=70, days_after=7)
        await _store(db, [won, pending], [outcome])
        await decision_repo.mark_completed(db, won.id, outcome)

    @pytest.mark.asyncio
    async def test_recalculate(self, db):
        """
        win 100% → 35, gap 0 → 25, completion 50% → 12.5,
        streak 3/30 → 1.5: health 74. Week-ago snapshot 60 → up 14.
        """
        await self._seed(db)
        await snapshot_repo.record(db, _fixed_snapshot(date(2026, 3, 1), 60))

        report = await self.service.recalculate(
            db, USER_ID, self.today, activity_dates=[date(2026, 3, 7), date(2026, 3, 6)]
        )
        assert report.health.streak_length == 3
        assert report.health.health_score == 74
        assert report.trend.trend == "up"
        assert report.trend.change == 14
        assert report.snapshot.health_score == 74
        assert (await snapshot_repo.get_on(db, USER_ID, self.today)).health_score == 74
        assert report.to_dict()["snapshot_date"] == "2026-03-08"

    @pytest.mark.asyncio
    async def test_streak_from_stored_activity_only(self, db):
        """Only the outcome completed today counts: streak 1."""
        await self._seed(db)
        report = await self.service.recalculate(db, USER_ID, self.today)
        assert report.health.streak_length == 1
        assert report.trend.trend == "stable"

    @pytest.mark.asyncio
    async def test_first_snapshot_of_the_day_sticks(self, db):
        await self._seed(db)
        first = await self.service.recalculate(db, USER_ID, self.today)
        second = await self.service.recalculate(
            db, USER_ID, self.today, activity_dates=[date(2026, 3, 7)]
        )
        assert second.health.streak_length == 2
        assert second.snapshot.id == first.snapshot.id
        assert second.snapshot.health_score == first.health.health_score


# ── Insights ───────────────────────────────────────────────────────────


class TestInsightsService:
    def setup_method(self):
        self.service = InsightsService()
        self.today = date(2026, 3, 12)

    async def _seed(self, db):
        decisions, outcomes = closed_loop([W] * 5, confidence=90, learning_confidence=90)
        await _store(db, decisions, outcomes)
        await option_repo.add_many(
            db, [make_option(d, risk=2, id=d.chosen_option_id) for d in decisions]
        )
        # someone else's losses must not leak in
        theirs, their_outcomes = closed_loop([L] * 5)
        theirs = [d.model_copy(update={"user_id": OTHER_USER_ID}) for d in theirs]
        await _store(db, theirs, their_outcomes)

    @pytest.mark.asyncio
    async def test_build(self, db):
        """
        No snapshot today: health 35 + 25 + 25 + 0 = 85.
        Snapshot 14 days back at 71 → GM (85 − 71) / 14 = 1.0.
        """
        await self._seed(db)
        await snapshot_repo.record(db, _fixed_snapshot(date(2026, 2, 26), 71))

        insights = await self.service.build(db, USER_ID, self.today)

        profile = insights.profile
        assert profile.prediction_accuracy == pytest.approx(0.9)
        assert profile.follow_through_rate == 1.0
        assert profile.risk_intelligence == 1.0
        assert profile.growth_momentum == pytest.approx(1.0)
        assert profile.archetype == Archetype.PRECISION_THINKER
        assert profile.secondary_trait == SecondaryTrait.ASYMMETRIC_HUNTER
        assert insights.trajectory is not None
        assert insights.warnings == []
        assert insights.state_of_you is not None
        assert "consistent follow-through" in insights.state_of_you.strengths

    @pytest.mark.asyncio
    async def test_build_prefers_todays_snapshot(self, db):
        await self._seed(db)
        await snapshot_repo.record(db, _fixed_snapshot(self.today, 99))
        await snapshot_repo.record(db, _fixed_snapshot(date(2026, 2, 26), 85))

        insights = await self.service.build(db, USER_ID, self.today)
        assert insights.profile.growth_momentum == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_build_for_new_user(self, db):
        insights = await self.service.build(db, USER_ID, self.today)
        assert insights.profile.archetype == Archetype.IMPULSE_REACTOR
        assert insights.trajectory is None
        assert insights.state_of_you is None
        assert insights.calibrations == []

    @pytest.mark.asyncio
    async def test_weekly_review_window(self, db):
        """Decisions created 2026-03-02 .. 2026-03-08 are in the week."""
        too_old = make_decision(0)
        best = make_decision(2, category=DecisionCategory.HEALTH)
        worst = make_decision(3, category=DecisionCategory.HEALTH)
        too_new = make_decision(8)
        outcomes = [make_outcome(too_old, L), make_outcome(best, W), make_outcome(worst, L)]
        await _store(db, [too_old, best, worst, too_new], outcomes)

        review = await self.service.weekly_review(db, USER_ID, date(2026, 3, 8))
        assert review.best_decision.decision.id == best.id
        assert review.worst_decision.decision.id == worst.id
        assert review.cognitive_pattern.endswith("Most of your decisions this week were in Health.")
