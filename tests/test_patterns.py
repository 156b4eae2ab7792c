"""
Bias Detector Tests.

Covers:
- Per-category calibration (direction, sample minimums, ordering)
- Category failure warnings and severity bands
- High-confidence failure warnings, overall and per category
- Custom thresholds
"""

import pytest

from decisionloop.patterns import (
    BiasDetector,
    CalibrationDirection,
    PatternSeverity,
    PatternType,
    calculate_category_calibration,
    detect_pattern_warnings,
    format_category_calibration_message,
)
from decisionloop.schemas.category import DecisionCategory
from decisionloop.schemas.outcome import OutcomeScore
from tests.factories import closed_loop, complete, make_decision, make_outcome

W, N, L = OutcomeScore.WIN, OutcomeScore.NEUTRAL, OutcomeScore.LOSS
CAREER, HEALTH, MONEY = DecisionCategory.CAREER, DecisionCategory.HEALTH, DecisionCategory.MONEY


def _mixed_money_history():
    """Four money decisions whose confidence moved ±10 points."""
    decisions, outcomes = [], []
    for i, learning in enumerate([80, 60, 80, 60]):
        decision = make_decision(20 + i, category=MONEY, confidence=70)
        outcome = make_outcome(decision, W, learning_confidence=learning)
        decisions.append(complete(decision, outcome))
        outcomes.append(outcome)
    return decisions, outcomes


# ── Calibration ────────────────────────────────────────────────────────


class TestCategoryCalibration:
    def test_directions_and_ordering(self):
        career_d, career_o = closed_loop([W, L, W], category=CAREER, confidence=80, learning_confidence=60)
        health_d, health_o = closed_loop(
            [W, W, W], category=HEALTH, confidence=45, learning_confidence=70, start_day=10
        )
        calibrations = calculate_category_calibration(career_d + health_d, career_o + health_o)

        assert [c.category for c in calibrations] == ["health", "career"]
        health, career = calibrations
        assert health.avg_calibration_gap == 25.0
        assert health.direction == CalibrationDirection.UNDERESTIMATE
        assert career.overestimate_rate == 100
        assert career.direction == CalibrationDirection.OVERESTIMATE

    def test_mixed_direction(self):
        decisions, outcomes = _mixed_money_history()
        (money,) = calculate_category_calibration(decisions, outcomes)
        assert money.overestimate_rate == 50
        assert money.underestimate_rate == 50
        assert money.direction == CalibrationDirection.MIXED

    def test_needs_three_samples(self):
        decisions, outcomes = closed_loop([W, W], confidence=80, learning_confidence=60)
        assert calculate_category_calibration(decisions, outcomes) == []

    def test_needs_three_learning_confidences(self):
        """Pairs without a hindsight confidence do not count toward the minimum."""
        with_learning_d, with_learning_o = closed_loop([W, W], confidence=80, learning_confidence=60)
        without_d, without_o = closed_loop([W, W], confidence=80, start_day=5)
        decisions = with_learning_d + without_d
        outcomes = with_learning_o + without_o
        assert calculate_category_calibration(decisions, outcomes) == []

    def test_small_moves_are_neither_direction(self):
        decisions, outcomes = closed_loop([W, W, W], confidence=70, learning_confidence=66)
        (career,) = calculate_category_calibration(decisions, outcomes)
        assert career.overestimate_rate == 0
        assert career.underestimate_rate == 0


class TestCalibrationMessage:
    def test_overestimate(self):
        decisions, outcomes = closed_loop([W, L, W], confidence=80, learning_confidence=60)
        (career,) = calculate_category_calibration(decisions, outcomes)
        assert format_category_calibration_message(career) == (
            "You tend to overestimate outcomes in Career decisions by ~20%."
        )

    def test_underestimate(self):
        decisions, outcomes = closed_loop([W, W, W], category=HEALTH, confidence=45, learning_confidence=70)
        (health,) = calculate_category_calibration(decisions, outcomes)
        assert "underestimate outcomes in Health decisions by ~25%" in (
            format_category_calibration_message(health)
        )

    def test_mixed(self):
        decisions, outcomes = _mixed_money_history()
        (money,) = calculate_category_calibration(decisions, outcomes)
        assert format_category_calibration_message(money) == (
            "Your confidence calibration in Money decisions has an average gap of ~10%."
        )


# ── Failure patterns ───────────────────────────────────────────────────


class TestCategoryFailure:
    def _warnings(self, scores):
        decisions, outcomes = closed_loop(scores, category=MONEY, confidence=60)
        return detect_pattern_warnings(decisions, outcomes)

    def test_high_severity(self):
        (warning,) = self._warnings([L, L, L, L, W])
        assert warning.type == PatternType.CATEGORY_FAILURE
        assert warning.severity == PatternSeverity.HIGH
        assert warning.message == "Most of your negative outcomes come from Money decisions."
        assert warning.failure_count == 4
        assert warning.category == "money"

    def test_medium_severity(self):
        (warning,) = self._warnings([L, L, L, W, W])
        assert warning.severity == PatternSeverity.MEDIUM

    def test_low_severity(self):
        (warning,) = self._warnings([L] * 9 + [W] * 11)
        assert warning.severity == PatternSeverity.LOW

    def test_severity_uses_whole_percent(self):
        """100 / 166 = 60.24% rounds to 60, which is not above the high band."""
        (warning,) = self._warnings([L] * 100 + [W] * 66)
        assert warning.severity == PatternSeverity.MEDIUM
        assert warning.failure_rate == pytest.approx(100 / 166)

    def test_threshold_is_exclusive(self):
        """Exactly 40% losses is not a pattern."""
        assert self._warnings([L, L, W, W, W]) == []

    def test_needs_five_outcomes(self):
        assert self._warnings([L, L, L, L]) == []


class TestHighConfidenceFailure:
    def test_overall_warning(self):
        career_d, career_o = closed_loop([L, L, W], category=CAREER, confidence=90)
        health_d, health_o = closed_loop([L, L, W], category=HEALTH, confidence=90, start_day=10)
        (warning,) = detect_pattern_warnings(career_d + health_d, career_o + health_o)

        assert warning.type == PatternType.HIGH_CONFIDENCE_FAILURE
        assert warning.severity == PatternSeverity.HIGH
        assert warning.category is None
        assert warning.confidence_threshold == 80
        assert warning.message == (
            "Your last 6 high-confidence decisions (80%+) ended worse than expected 67% of the time."
        )

    def test_per_category_warning(self):
        decisions, outcomes = closed_loop([L, L, L, W, W], category=CAREER, confidence=90)
        warnings = detect_pattern_warnings(decisions, outcomes)

        assert [w.type for w in warnings] == [
            PatternType.CATEGORY_FAILURE,
            PatternType.HIGH_CONFIDENCE_FAILURE,
            PatternType.HIGH_CONFIDENCE_FAILURE,
        ]
        scoped = warnings[2]
        assert scoped.category == "career"
        assert scoped.severity == PatternSeverity.MEDIUM
        assert "(80%+) in Career ended worse than expected 60%" in scoped.message

    def test_low_confidence_decisions_ignored(self):
        decisions, outcomes = closed_loop([L, L, W], category=CAREER, confidence=79)
        assert detect_pattern_warnings(decisions, outcomes) == []


class TestCustomThresholds:
    def test_smaller_sample_minimum(self):
        detector = BiasDetector(min_pattern_samples=3)
        decisions, outcomes = closed_loop([L, L, W], category=MONEY, confidence=50)
        (warning,) = detector.detect_warnings(decisions, outcomes)
        assert warning.type == PatternType.CATEGORY_FAILURE

    def test_no_history(self):
        assert detect_pattern_warnings([], []) == []
