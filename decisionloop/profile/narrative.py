"""
Judgment profile narrative.

Templates are selected from the classification, never computed: the
archetype picks the opening lines, then risk and momentum thresholds
append their own.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

import structlog

from decisionloop.metrics.judgment import (
    calculate_follow_through_rate,
    calculate_growth_momentum,
    calculate_prediction_accuracy,
    calculate_risk_intelligence,
)
from decisionloop.profile.archetype import (
    ASYMMETRIC_HUNTER_RI,
    COMPOUNDING_GM,
    STAGNATION_GM,
    Archetype,
    SecondaryTrait,
    classify_judgment,
)
from decisionloop.schemas.decision import Decision
from decisionloop.schemas.outcome import Outcome

logger = structlog.get_logger(__name__)

ARCHETYPE_NARRATIVES: dict[Archetype, tuple[str, ...]] = {
    Archetype.OVERTHINKER: (
        "You think clearly but struggle with consistent execution.",
        "Your biggest leverage is follow-through discipline.",
    ),
    Archetype.CONVICTION_DRIVER: (
        "You act decisively but your predictions need refinement.",
        "Slowing down your initial judgment will improve outcomes.",
    ),
    Archetype.PRECISION_THINKER: (
        "You predict outcomes accurately and consistently follow through.",
    ),
    Archetype.IMPULSE_REACTOR: (
        "You need to improve both prediction accuracy and follow-through.",
        "Start by logging outcomes more consistently.",
    ),
}

PRECISION_COMPOUNDING = "Your recent decisions are compounding your judgment at an above-average rate."
PRECISION_STABLE = "Your judgment is stable and reliable."
DOWNSIDE_AWARE = "You assess downside accurately and avoid unnecessary damage."
DEGRADING = (
    "Your recent decisions are degrading your long-term judgment.",
    "Focus on fewer, higher-impact choices.",
)


@dataclass(frozen=True)
class JudgmentProfile:
    prediction_accuracy: float
    follow_through_rate: float
    risk_intelligence: float
    growth_momentum: float
    archetype: Archetype
    secondary_trait: Optional[SecondaryTrait]
    profile_text: str
    secondary_trait_text: str
    insight_narrative: str

    def to_dict(self) -> dict:
        return {
            "prediction_accuracy": round(self.prediction_accuracy, 4),
            "follow_through_rate": round(self.follow_through_rate, 4),
            "risk_intelligence": round(self.risk_intelligence, 4),
            "growth_momentum": round(self.growth_momentum, 4),
            "archetype": self.archetype.value,
            "secondary_trait": self.secondary_trait.value if self.secondary_trait else None,
            "profile_text": self.profile_text,
            "secondary_trait_text": self.secondary_trait_text,
            "insight_narrative": self.insight_narrative,
        }


def generate_insight_narrative(
    prediction_accuracy: float,
    follow_through_rate: float,
    risk_intelligence: float,
    growth_momentum: float,
) -> str:
    archetype = classify_judgment(
        prediction_accuracy, follow_through_rate, risk_intelligence, growth_momentum
    ).archetype

    lines = list(ARCHETYPE_NARRATIVES[archetype])
    if archetype == Archetype.PRECISION_THINKER:
        lines.append(PRECISION_COMPOUNDING if growth_momentum > COMPOUNDING_GM else PRECISION_STABLE)

    if risk_intelligence >= ASYMMETRIC_HUNTER_RI:
        lines.append(DOWNSIDE_AWARE)
    if growth_momentum < STAGNATION_GM:
        lines.extend(DEGRADING)

    return " ".join(lines)


def generate_judgment_profile(
    decisions: Sequence[Decision],
    outcomes: Sequence[Outcome],
    current_health: float,
    health_14_days_ago: Optional[float] = None,
    option_risks: Optional[Mapping[str, Any]] = None,
) -> JudgmentProfile:
    """
    Build the judgment profile from history.

    Args:
        decisions: The user's decisions
        outcomes: The user's outcomes
        current_health: Today's decision health score
        health_14_days_ago: Health from the snapshot 14 days back, if any
        option_risks: option id → risk rating for chosen options
    """
    pa = calculate_prediction_accuracy(decisions, outcomes)
    ft = calculate_follow_through_rate(decisions, outcomes)
    ri = calculate_risk_intelligence(decisions, outcomes, option_risks)
    gm = calculate_growth_momentum(current_health, health_14_days_ago)

    classification = classify_judgment(pa, ft, ri, gm)
    trait = classification.secondary_trait

    profile = JudgmentProfile(
        prediction_accuracy=pa,
        follow_through_rate=ft,
        risk_intelligence=ri,
        growth_momentum=gm,
        archetype=classification.archetype,
        secondary_trait=trait,
        profile_text=f"Judgment Profile: {classification.archetype}",
        secondary_trait_text=f"Secondary trait: {trait}" if trait else "",
        insight_narrative=generate_insight_narrative(pa, ft, ri, gm),
    )

    logger.info(
        "judgment_profile_generated",
        archetype=classification.archetype.value,
        secondary_trait=trait.value if trait else None,
        n_decisions=len(decisions),
        n_outcomes=len(outcomes),
    )
    return profile
