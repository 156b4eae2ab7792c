"""Decision categories (life domains) and their display labels."""

from enum import StrEnum


class DecisionCategory(StrEnum):
    CAREER = "career"
    MONEY = "money"
    HEALTH = "health"
    RELATIONSHIPS = "relationships"
    LIFE_LIFESTYLE = "life_lifestyle"
    GROWTH_LEARNING = "growth_learning"
    TIME_PRIORITIES = "time_priorities"
    OTHER = "other"


CATEGORY_LABELS: dict[DecisionCategory, str] = {
    DecisionCategory.CAREER: "Career",
    DecisionCategory.MONEY: "Money",
    DecisionCategory.HEALTH: "Health",
    DecisionCategory.RELATIONSHIPS: "Relationships",
    DecisionCategory.LIFE_LIFESTYLE: "Life & Lifestyle",
    DecisionCategory.GROWTH_LEARNING: "Growth & Learning",
    DecisionCategory.TIME_PRIORITIES: "Time & Priorities",
    DecisionCategory.OTHER: "Other",
}


def format_category(category: str) -> str:
    """Display label for a category; unknown values are returned unchanged."""
    try:
        return CATEGORY_LABELS[DecisionCategory(category)]
    except ValueError:
        return category


def all_category_labels() -> list[tuple[DecisionCategory, str]]:
    """All (value, label) pairs in declaration order."""
    return [(c, CATEGORY_LABELS[c]) for c in DecisionCategory]
