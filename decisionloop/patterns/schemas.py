"""
Bias / pattern detection schemas.
"""

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, Field


class PatternType(StrEnum):
    CATEGORY_FAILURE = "category_failure"
    HIGH_CONFIDENCE_FAILURE = "high_confidence_failure"


class PatternSeverity(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class CalibrationDirection(StrEnum):
    OVERESTIMATE = "overestimate"
    UNDERESTIMATE = "underestimate"
    MIXED = "mixed"


class CategoryCalibration(BaseModel):
    """How far confidence moved between commit time and hindsight, per category."""
    category: str
    avg_calibration_gap: float          # mean |decision − learning confidence|, 1 decimal
    overestimate_rate: int              # % of pairs where confidence fell by > 5
    underestimate_rate: int             # % of pairs where confidence rose by > 5
    sample_size: int

    @property
    def direction(self) -> CalibrationDirection:
        if self.overestimate_rate > 50:
            return CalibrationDirection.OVERESTIMATE
        if self.underestimate_rate > 50:
            return CalibrationDirection.UNDERESTIMATE
        return CalibrationDirection.MIXED


class PatternWarning(BaseModel):
    """A statistically notable failure pattern."""
    type: PatternType
    severity: PatternSeverity
    message: str
    category: Optional[str] = None
    confidence_threshold: Optional[int] = None
    failure_count: int = 0
    sample_size: int = 0
    failure_rate: float = Field(default=0.0, ge=0.0, le=1.0)
