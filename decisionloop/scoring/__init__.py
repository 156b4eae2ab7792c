"""
Option Scoring Engine.

Components:
- engine: expected-value score from impact / effort / risk ratings
"""

from decisionloop.scoring.engine import (
    calculate_option_score,
    format_score_for_display,
    get_suggested_option,
    rank_options,
)

__all__ = [
    "calculate_option_score",
    "format_score_for_display",
    "get_suggested_option",
    "rank_options",
]
