"""
Bias / Pattern Detector.

Components:
- schemas: CategoryCalibration, PatternWarning and their enums
- detector: BiasDetector plus module-level shortcuts with default thresholds
"""

from decisionloop.patterns.detector import (
    BiasDetector,
    calculate_category_calibration,
    detect_pattern_warnings,
    format_category_calibration_message,
)
from decisionloop.patterns.schemas import (
    CalibrationDirection,
    CategoryCalibration,
    PatternSeverity,
    PatternType,
    PatternWarning,
)

__all__ = [
    "BiasDetector",
    "CalibrationDirection",
    "CategoryCalibration",
    "PatternSeverity",
    "PatternType",
    "PatternWarning",
    "calculate_category_calibration",
    "detect_pattern_warnings",
    "format_category_calibration_message",
]
