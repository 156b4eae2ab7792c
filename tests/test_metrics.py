"""
Calibration & Health Metrics Tests.

Covers:
- Outcome ratios, DQI, judgment growth, confidence correlation
- Prediction accuracy, follow-through, risk intelligence, growth momentum
- Calibration gap, decision health, trend, activity streak
- Neutral values on empty input
"""

from datetime import date, timedelta

import pytest

from decisionloop.metrics import (
    build_health_snapshot,
    calculate_activity_streak,
    calculate_calibration_gap,
    calculate_category_dqi,
    calculate_confidence_correlation,
    calculate_decision_health,
    calculate_dqi,
    calculate_follow_through_rate,
    calculate_growth_momentum,
    calculate_judgment_growth,
    calculate_outcome_ratios,
    calculate_prediction_accuracy,
    calculate_risk_intelligence,
    decision_health_trend,
    judgment_growth_for_windows,
)
from decisionloop.schemas.category import DecisionCategory
from decisionloop.schemas.outcome import OutcomeScore
from tests.factories import (
    BASE_TIME,
    closed_loop,
    complete,
    make_decision,
    make_option,
    make_outcome,
)

W, N, L = OutcomeScore.WIN, OutcomeScore.NEUTRAL, OutcomeScore.LOSS


# ── Outcome metrics ────────────────────────────────────────────────────


class TestOutcomeRatios:
    def test_ratios(self):
        _, outcomes = closed_loop([W, W, N, L])
        ratios = calculate_outcome_ratios(outcomes)
        assert ratios.win_rate == 0.5
        assert ratios.neutral_rate == 0.25
        assert ratios.loss_rate == 0.25
        assert ratios.total == 4

    def test_empty(self):
        ratios = calculate_outcome_ratios([])
        assert ratios.total == 0
        assert ratios.win_rate == 0.0


class TestDQI:
    def test_neutral_when_empty(self):
        assert calculate_dqi([]) == 0.5

    def test_all_wins(self):
        assert calculate_dqi(closed_loop([W, W, W])[1]) == 1.0

    def test_all_losses(self):
        assert calculate_dqi(closed_loop([L, L])[1]) == 0.0

    def test_mixed(self):
        assert calculate_dqi(closed_loop([W, L])[1]) == 0.5
        assert calculate_dqi(closed_loop([W, N])[1]) == 0.75

    def test_category_dqi(self):
        career_d, career_o = closed_loop([W, W], category=DecisionCategory.CAREER)
        money_d, money_o = closed_loop([L], category=DecisionCategory.MONEY, start_day=5)
        decisions, outcomes = career_d + money_d, career_o + money_o
        assert calculate_category_dqi(DecisionCategory.CAREER, decisions, outcomes) == 1.0
        assert calculate_category_dqi(DecisionCategory.MONEY, decisions, outcomes) == 0.0
        assert calculate_category_dqi(DecisionCategory.HEALTH, decisions, outcomes) == 0.5


class TestJudgmentGrowth:
    def test_recent_minus_previous(self):
        recent = closed_loop([W])[1]
        previous = closed_loop([L])[1]
        assert calculate_judgment_growth(recent, previous) == 1.0

    def test_windows_by_completion_date(self):
        """Recent window is the trailing 14 days; the one before it is compared."""
        now = BASE_TIME + timedelta(days=40)
        recent_d = make_decision(30)
        old_d = make_decision(15)
        recent = make_outcome(recent_d, W, days_after=5)     # day 35
        older = make_outcome(old_d, L, days_after=5)         # day 20
        growth = judgment_growth_for_windows([recent, older], now)
        assert growth == 1.0

    def test_no_outcomes_anywhere(self):
        assert judgment_growth_for_windows([], BASE_TIME) == 0.0


class TestConfidenceCorrelation:
    def test_signed_average(self):
        win = make_decision(0, confidence=80)
        loss = make_decision(1, confidence=60)
        outcomes = [make_outcome(win, W), make_outcome(loss, L)]
        assert calculate_confidence_correlation([win, loss], outcomes) == pytest.approx(0.1)

    def test_ignores_missing_confidence(self):
        decision = make_decision(0, confidence=None)
        assert calculate_confidence_correlation([decision], [make_outcome(decision)]) == 0.0


# ── Judgment metrics ───────────────────────────────────────────────────


class TestPredictionAccuracy:
    def test_neutral_without_data(self):
        assert calculate_prediction_accuracy([], []) == 0.5

    def test_average_accuracy(self):
        win = make_decision(0, confidence=70)
        loss = make_decision(1, confidence=70)
        outcomes = [make_outcome(win, W), make_outcome(loss, L)]
        assert calculate_prediction_accuracy([win, loss], outcomes) == pytest.approx(0.5)

    def test_uses_most_recent_window(self):
        """Only the 30 most recent decisions count."""
        old_d, old_o = closed_loop([L] * 5, confidence=100)
        new_d, new_o = closed_loop([W] * 30, confidence=100, start_day=10)
        assert calculate_prediction_accuracy(old_d + new_d, old_o + new_o) == 1.0


class TestFollowThrough:
    def test_empty(self):
        assert calculate_follow_through_rate([]) == 0.0

    def test_counts_stamped_and_supplied_outcomes(self):
        stamped_d, stamped_o = closed_loop([W])
        pending = make_decision(2)
        open_d = make_decision(3, decided=False)
        unstamped = make_decision(4)
        decisions = stamped_d + [pending, open_d, unstamped]
        outcomes = stamped_o + [make_outcome(unstamped, N)]

        assert calculate_follow_through_rate(decisions, outcomes) == 0.5
        assert calculate_follow_through_rate(decisions) == 0.25


class TestRiskIntelligence:
    def test_asymmetric_table(self):
        low_win = make_decision(0)
        high_loss = make_decision(1)
        high_neutral = make_decision(2)
        risks = {
            low_win.chosen_option_id: 2,
            high_loss.chosen_option_id: 8,
            high_neutral.chosen_option_id: 5,
        }
        outcomes = [
            make_outcome(low_win, W),
            make_outcome(high_loss, L),
            make_outcome(high_neutral, N),
        ]
        ri = calculate_risk_intelligence([low_win, high_loss, high_neutral], outcomes, risks)
        assert ri == pytest.approx((1.0 + 0.2 + 0.0) / 3)

    def test_low_risk_loss_is_worst(self):
        decision = make_decision(0)
        risks = {decision.chosen_option_id: 1}
        assert calculate_risk_intelligence([decision], [make_outcome(decision, L)], risks) == -1.0

    @pytest.mark.parametrize("risk,expected", [(4, 1.0), (5, 0.5)])
    def test_high_risk_starts_at_five(self, risk, expected):
        decision = make_decision(0)
        risks = {decision.chosen_option_id: risk}
        assert calculate_risk_intelligence([decision], [make_outcome(decision, W)], risks) == expected

    def test_only_most_recent_twenty_count(self):
        """Five old low-risk losses fall outside the window of 20."""
        decisions, outcomes = closed_loop([L] * 5 + [W] * 20)
        risks = {d.chosen_option_id: 2 for d in decisions}
        assert calculate_risk_intelligence(decisions, outcomes, risks) == 1.0
        assert calculate_risk_intelligence(decisions, outcomes, risks, window=25) == pytest.approx(0.6)

    def test_accepts_option_objects(self):
        decision = make_decision(0)
        option = make_option(decision, risk=9)
        risks = {decision.chosen_option_id: option}
        assert calculate_risk_intelligence([decision], [make_outcome(decision, W)], risks) == 0.5

    def test_no_risk_data(self):
        decisions, outcomes = closed_loop([W, W])
        assert calculate_risk_intelligence(decisions, outcomes) == 0.0
        assert calculate_risk_intelligence(decisions, outcomes, {"unknown": 3}) == 0.0


class TestGrowthMomentum:
    def test_daily_slope(self):
        assert calculate_growth_momentum(70, 56) == 1.0

    def test_without_history(self):
        assert calculate_growth_momentum(70, None) == 0.0


# ── Decision health ────────────────────────────────────────────────────


class TestCalibrationGap:
    def test_mean_absolute_gap(self):
        decisions, outcomes = closed_loop([W, L], confidence=70, learning_confidence=60)
        assert calculate_calibration_gap(decisions, outcomes) == 10.0

    def test_zero_without_learning_confidence(self):
        decisions, outcomes = closed_loop([W, L])
        assert calculate_calibration_gap(decisions, outcomes) == 0.0


class TestDecisionHealth:
    def test_weighted_score(self):
        decisions, outcomes = closed_loop([W, W, L, N], confidence=70, learning_confidence=60)
        health = calculate_decision_health(decisions, outcomes, streak_length=15)
        assert health.win_rate == 50.0
        assert health.avg_calibration_gap == 10.0
        assert health.completion_rate == 100.0
        assert health.health_score == 73

    def test_empty_history(self):
        """Only the calibration component contributes with no data."""
        health = calculate_decision_health([], [], streak_length=0)
        assert health.health_score == 25

    def test_streak_capped_at_target(self):
        a = calculate_decision_health([], [], streak_length=30)
        b = calculate_decision_health([], [], streak_length=300)
        assert a.health_score == b.health_score == 40

    def test_score_bounds(self):
        decisions, outcomes = closed_loop([W] * 5, confidence=80, learning_confidence=80)
        health = calculate_decision_health(decisions, outcomes, streak_length=30)
        assert health.health_score == 100

    def test_to_dict(self):
        health = calculate_decision_health([], [], streak_length=3)
        assert health.to_dict()["streak_length"] == 3


class TestHealthTrend:
    @pytest.mark.parametrize(
        "current,previous,trend,change",
        [
            (75, 70, "up", 5),
            (60, 75, "down", -15),
            (71, 70, "stable", 0),
            (72, 70, "stable", 0),
            (70, None, "stable", 0),
        ],
    )
    def test_trend(self, current, previous, trend, change):
        result = decision_health_trend(current, previous)
        assert (result.trend, result.change) == (trend, change)


class TestActivityStreak:
    def test_consecutive_days_ending_today(self):
        today = date(2026, 3, 10)
        days = [today, today - timedelta(days=1), today - timedelta(days=2), today - timedelta(days=4)]
        assert calculate_activity_streak(days, today) == 3

    def test_no_activity_today(self):
        today = date(2026, 3, 10)
        assert calculate_activity_streak([today - timedelta(days=1)], today) == 0


def test_build_health_snapshot():
    health = calculate_decision_health([], [], streak_length=2)
    snapshot = build_health_snapshot("user-1", health, date(2026, 3, 10))
    assert snapshot.user_id == "user-1"
    assert snapshot.health_score == health.health_score
    assert snapshot.snapshot_date == date(2026, 3, 10)
    assert snapshot.streak_length == 2


def test_completed_decision_counts_once():
    """A stamped decision whose outcome is also supplied is one completion."""
    decision = make_decision(0)
    outcome = make_outcome(decision)
    stamped = complete(decision, outcome)
    assert calculate_follow_through_rate([stamped], [outcome]) == 1.0
