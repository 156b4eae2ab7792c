"""Decision Health Snapshot — daily, append-only health rollup per user."""

import uuid
from datetime import date, datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class DecisionHealthSnapshot(BaseModel):
    """Point-in-time health score and its components (one per user per day)."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    health_score: int = Field(ge=0, le=100)
    win_rate: float = Field(ge=0.0, le=100.0)
    avg_calibration_gap: float = Field(ge=0.0)
    completion_rate: float = Field(ge=0.0, le=100.0)
    streak_length: int = Field(ge=0)
    snapshot_date: date
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
