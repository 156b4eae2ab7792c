"""
Bias Detector — compare what was expected with what happened.

Detects:
1. Category calibration bias: confidence at commit time vs. confidence
   after the outcome, per category (over- or under-estimation)
2. Category failure patterns: a domain where losses dominate
3. High-confidence failures: decisions made at ≥ 80% confidence that
   still ended badly, overall and per category

Warnings only surface with enough samples to be more than noise.
"""

from collections import defaultdict
from typing import Optional, Sequence

import structlog

from decisionloop.metrics.outcomes import matched_pairs
from decisionloop.numeric import round_half_up
from decisionloop.patterns.schemas import (
    CalibrationDirection,
    CategoryCalibration,
    PatternSeverity,
    PatternType,
    PatternWarning,
)
from decisionloop.schemas.category import format_category
from decisionloop.schemas.decision import Decision
from decisionloop.schemas.outcome import Outcome

logger = structlog.get_logger(__name__)

# ── Configuration ─────────────────────────────────────────────────────────

MIN_CALIBRATION_SAMPLES: int = 3
CALIBRATION_DEADBAND: int = 5           # |gap| ≤ 5 counts as neither over nor under

MIN_PATTERN_SAMPLES: int = 5
FAILURE_RATE_THRESHOLD: float = 0.40
HIGH_SEVERITY_RATE: float = 0.60
# Category failure severity is graded on the whole-percent failure rate
CATEGORY_MEDIUM_SEVERITY_PCT: int = 50
CATEGORY_HIGH_SEVERITY_PCT: int = 60
HIGH_CONFIDENCE_THRESHOLD: int = 80


class BiasDetector:
    """Scan decision/outcome history for calibration bias and failure patterns."""

    def __init__(
        self,
        min_calibration_samples: int = MIN_CALIBRATION_SAMPLES,
        min_pattern_samples: int = MIN_PATTERN_SAMPLES,
        failure_rate_threshold: float = FAILURE_RATE_THRESHOLD,
        high_confidence_threshold: int = HIGH_CONFIDENCE_THRESHOLD,
    ):
        self.min_calibration_samples = min_calibration_samples
        self.min_pattern_samples = min_pattern_samples
        self.failure_rate_threshold = failure_rate_threshold
        self.high_confidence_threshold = high_confidence_threshold

    # ── Calibration ───────────────────────────────────────────────────

    def category_calibration(
        self,
        decisions: Sequence[Decision],
        outcomes: Sequence[Outcome],
    ) -> list[CategoryCalibration]:
        """
        Per-category calibration gaps, largest gap first.

        Signed gap = decision confidence − learning confidence. A drop of
        more than 5 points means the user overestimated; a rise of more
        than 5 means they underestimated.
        """
        by_category: dict[str, list[tuple[Decision, Outcome]]] = defaultdict(list)
        for decision, outcome in matched_pairs(decisions, outcomes):
            by_category[str(decision.category)].append((decision, outcome))

        calibrations: list[CategoryCalibration] = []
        for category, pairs in by_category.items():
            if len(pairs) < self.min_calibration_samples:
                continue

            signed_gaps = [
                d.confidence - o.learning_confidence
                for d, o in pairs
                if d.confidence is not None and o.learning_confidence is not None
            ]
            if len(signed_gaps) < self.min_calibration_samples:
                continue

            total = len(signed_gaps)
            overestimates = sum(1 for g in signed_gaps if g > CALIBRATION_DEADBAND)
            underestimates = sum(1 for g in signed_gaps if g < -CALIBRATION_DEADBAND)
            avg_gap = sum(abs(g) for g in signed_gaps) / total

            calibrations.append(CategoryCalibration(
                category=category,
                avg_calibration_gap=round(avg_gap, 1),
                overestimate_rate=round_half_up(overestimates / total * 100),
                underestimate_rate=round_half_up(underestimates / total * 100),
                sample_size=total,
            ))

        calibrations.sort(key=lambda c: c.avg_calibration_gap, reverse=True)
        return calibrations

    # ── Failure patterns ──────────────────────────────────────────────

    def detect_warnings(
        self,
        decisions: Sequence[Decision],
        outcomes: Sequence[Outcome],
    ) -> list[PatternWarning]:
        """All pattern warnings: category failures, then high-confidence failures."""
        pairs = matched_pairs(decisions, outcomes)
        warnings = self._category_failures(pairs)

        confident = [
            (d, o) for d, o in pairs
            if d.confidence is not None and d.confidence >= self.high_confidence_threshold
        ]
        overall = self._high_confidence_failure(confident, category=None)
        if overall is not None:
            warnings.append(overall)

        by_category: dict[str, list[tuple[Decision, Outcome]]] = defaultdict(list)
        for decision, outcome in confident:
            by_category[str(decision.category)].append((decision, outcome))
        for category, category_pairs in by_category.items():
            warning = self._high_confidence_failure(category_pairs, category=category)
            if warning is not None:
                warnings.append(warning)

        if warnings:
            logger.info(
                "pattern_warnings_detected",
                count=len(warnings),
                types=sorted({w.type.value for w in warnings}),
            )
        return warnings

    def _category_failures(
        self, pairs: list[tuple[Decision, Outcome]]
    ) -> list[PatternWarning]:
        by_category: dict[str, list[Outcome]] = defaultdict(list)
        for decision, outcome in pairs:
            by_category[str(decision.category)].append(outcome)

        warnings: list[PatternWarning] = []
        for category, category_outcomes in by_category.items():
            total = len(category_outcomes)
            if total < self.min_pattern_samples:
                continue
            failures = sum(1 for o in category_outcomes if o.is_loss)
            rate = failures / total
            if rate <= self.failure_rate_threshold:
                continue

            rate_pct = round_half_up(rate * 100)
            if rate_pct > CATEGORY_HIGH_SEVERITY_PCT:
                severity = PatternSeverity.HIGH
            elif rate_pct > CATEGORY_MEDIUM_SEVERITY_PCT:
                severity = PatternSeverity.MEDIUM
            else:
                severity = PatternSeverity.LOW

            warnings.append(PatternWarning(
                type=PatternType.CATEGORY_FAILURE,
                severity=severity,
                message=(
                    f"Most of your negative outcomes come from "
                    f"{format_category(category)} decisions."
                ),
                category=category,
                failure_count=failures,
                sample_size=total,
                failure_rate=rate,
            ))
        return warnings

    def _high_confidence_failure(
        self,
        pairs: list[tuple[Decision, Outcome]],
        category: Optional[str],
    ) -> Optional[PatternWarning]:
        total = len(pairs)
        if total < self.min_pattern_samples:
            return None
        failures = sum(1 for _, o in pairs if o.is_loss)
        rate = failures / total
        if rate <= self.failure_rate_threshold:
            return None

        scope = f" in {format_category(category)}" if category else ""
        return PatternWarning(
            type=PatternType.HIGH_CONFIDENCE_FAILURE,
            severity=PatternSeverity.HIGH if rate > HIGH_SEVERITY_RATE else PatternSeverity.MEDIUM,
            message=(
                f"Your last {total} high-confidence decisions "
                f"({self.high_confidence_threshold}%+){scope} ended worse than "
                f"expected {round_half_up(rate * 100)}% of the time."
            ),
            category=category,
            confidence_threshold=self.high_confidence_threshold,
            failure_count=failures,
            sample_size=total,
            failure_rate=rate,
        )


def format_category_calibration_message(calibration: CategoryCalibration) -> str:
    """Plain-language summary of one category's calibration."""
    label = format_category(calibration.category)
    gap = round(calibration.avg_calibration_gap)
    if calibration.direction == CalibrationDirection.OVERESTIMATE:
        return f"You tend to overestimate outcomes in {label} decisions by ~{gap}%."
    if calibration.direction == CalibrationDirection.UNDERESTIMATE:
        return f"You tend to underestimate outcomes in {label} decisions by ~{gap}%."
    return f"Your confidence calibration in {label} decisions has an average gap of ~{gap}%."


_default_detector = BiasDetector()


def calculate_category_calibration(
    decisions: Sequence[Decision],
    outcomes: Sequence[Outcome],
) -> list[CategoryCalibration]:
    return _default_detector.category_calibration(decisions, outcomes)


def detect_pattern_warnings(
    decisions: Sequence[Decision],
    outcomes: Sequence[Outcome],
) -> list[PatternWarning]:
    return _default_detector.detect_warnings(decisions, outcomes)
