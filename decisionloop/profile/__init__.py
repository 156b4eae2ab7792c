"""Judgment profile, State-of-You and weekly review narratives."""

from decisionloop.profile.archetype import (
    ARCHETYPE_TABLE,
    Archetype,
    JudgmentClassification,
    SecondaryTrait,
    archetype_description,
    classify_judgment,
)
from decisionloop.profile.narrative import (
    JudgmentProfile,
    generate_insight_narrative,
    generate_judgment_profile,
)
from decisionloop.profile.state_of_you import StateOfYou, generate_state_of_you
from decisionloop.profile.weekly_review import (
    ReviewHighlight,
    WeeklyReview,
    generate_weekly_review,
)

__all__ = [
    "ARCHETYPE_TABLE",
    "Archetype",
    "JudgmentClassification",
    "JudgmentProfile",
    "ReviewHighlight",
    "SecondaryTrait",
    "StateOfYou",
    "WeeklyReview",
    "archetype_description",
    "classify_judgment",
    "generate_insight_narrative",
    "generate_judgment_profile",
    "generate_state_of_you",
    "generate_weekly_review",
]
