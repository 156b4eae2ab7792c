"""Orchestration over repositories and the pure analytics."""

from decisionloop.services.health_service import HealthReport, HealthService
from decisionloop.services.insights_service import Insights, InsightsService
from decisionloop.services.outcome_service import OutcomeService

__all__ = [
    "HealthReport",
    "HealthService",
    "Insights",
    "InsightsService",
    "OutcomeService",
]
