"""
Decision-maker archetypes.

Primary archetype is a 2×2 table over prediction accuracy (PA) and
follow-through (FT); the secondary trait is layered on top from risk
intelligence (RI) and growth momentum (GM). Pure classification; the
prose lives in ``profile.narrative``.

    |           | FT ≥ 0.70          | FT < 0.70        |
    |-----------|--------------------|------------------|
    | PA ≥ 0.70 | Precision Thinker  | Overthinker      |
    | PA < 0.70 | Conviction Driver  | Impulse Reactor  |
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

# ── Configuration ─────────────────────────────────────────────────────────

HIGH_PREDICTION_ACCURACY: float = 0.70
HIGH_FOLLOW_THROUGH: float = 0.70
ASYMMETRIC_HUNTER_RI: float = 0.60
SAFETY_MAXIMIZER_RI: float = 0.40
COMPOUNDING_GM: float = 0.15
STAGNATION_GM: float = -0.10


class Archetype(StrEnum):
    PRECISION_THINKER = "Precision Thinker"
    CONVICTION_DRIVER = "Conviction Driver"
    OVERTHINKER = "Overthinker"
    IMPULSE_REACTOR = "Impulse Reactor"


class SecondaryTrait(StrEnum):
    ASYMMETRIC_HUNTER = "Asymmetric Hunter"
    SAFETY_MAXIMIZER = "Safety Maximizer"
    COMPOUNDING_OPERATOR = "Compounding Operator"
    STAGNATION_TRAP = "Stagnation Trap"


# (high PA, high FT) → archetype
ARCHETYPE_TABLE: dict[tuple[bool, bool], Archetype] = {
    (True, True): Archetype.PRECISION_THINKER,
    (False, True): Archetype.CONVICTION_DRIVER,
    (True, False): Archetype.OVERTHINKER,
    (False, False): Archetype.IMPULSE_REACTOR,
}

ARCHETYPE_DESCRIPTIONS: dict[Archetype, str] = {
    Archetype.PRECISION_THINKER: "Rare, elite judgment",
    Archetype.CONVICTION_DRIVER: "Acts fast, needs calibration",
    Archetype.OVERTHINKER: "Thinks well, fails to execute",
    Archetype.IMPULSE_REACTOR: "Inconsistent & impulsive",
}


@dataclass(frozen=True)
class JudgmentClassification:
    archetype: Archetype
    secondary_trait: Optional[SecondaryTrait]


def determine_archetype(prediction_accuracy: float, follow_through_rate: float) -> Archetype:
    key = (
        prediction_accuracy >= HIGH_PREDICTION_ACCURACY,
        follow_through_rate >= HIGH_FOLLOW_THROUGH,
    )
    return ARCHETYPE_TABLE[key]


def determine_secondary_trait(
    risk_intelligence: float,
    growth_momentum: float,
) -> Optional[SecondaryTrait]:
    """First matching rule wins: RI high, RI low, GM high, GM low, else none."""
    if risk_intelligence >= ASYMMETRIC_HUNTER_RI:
        return SecondaryTrait.ASYMMETRIC_HUNTER
    if risk_intelligence <= SAFETY_MAXIMIZER_RI:
        return SecondaryTrait.SAFETY_MAXIMIZER
    if growth_momentum > COMPOUNDING_GM:
        return SecondaryTrait.COMPOUNDING_OPERATOR
    if growth_momentum < STAGNATION_GM:
        return SecondaryTrait.STAGNATION_TRAP
    return None


def classify_judgment(
    prediction_accuracy: float,
    follow_through_rate: float,
    risk_intelligence: float,
    growth_momentum: float,
) -> JudgmentClassification:
    return JudgmentClassification(
        archetype=determine_archetype(prediction_accuracy, follow_through_rate),
        secondary_trait=determine_secondary_trait(risk_intelligence, growth_momentum),
    )


def archetype_description(archetype: Archetype) -> str:
    return ARCHETYPE_DESCRIPTIONS[Archetype(archetype)]
