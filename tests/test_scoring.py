"""
Option Scoring Tests.

Covers:
- Weighted expected-value formula and integer storage
- Display conversion
- Rating clamping
- Suggested option selection
"""

import pytest

from decisionloop.schemas.option import Option
from decisionloop.scoring.engine import (
    calculate_option_score,
    format_score_for_display,
    get_suggested_option,
    rank_options,
)


def _option(label: str, impact: int, effort: int, risk: int) -> Option:
    return Option.create("dec-1", label, impact, effort, risk)


class TestCalculateOptionScore:
    @pytest.mark.parametrize(
        "impact,effort,risk,stored,display",
        [
            (9, 7, 5, 69, 6.9),
            (7, 3, 2, 77, 7.7),
            (10, 1, 1, 100, 10.0),
            (1, 10, 10, 10, 1.0),
        ],
    )
    def test_reference_scores(self, impact, effort, risk, stored, display):
        """Known rating triples map to their stored and displayed scores."""
        score = calculate_option_score(impact, effort, risk)
        assert score == stored
        assert format_score_for_display(score) == display

    def test_low_effort_and_risk_score_higher(self):
        """Effort and risk are inverted."""
        assert calculate_option_score(5, 2, 2) > calculate_option_score(5, 9, 9)

    def test_out_of_range_ratings_are_clamped(self):
        """Ratings outside 1-10 behave like the nearest bound."""
        assert calculate_option_score(15, -3, 0) == calculate_option_score(10, 1, 1)
        assert calculate_option_score(0, 20, 11) == calculate_option_score(1, 10, 10)

    def test_display_always_within_bounds(self):
        """Every rating combination displays inside [1.0, 10.0]."""
        for impact in range(1, 11):
            for effort in range(1, 11):
                for risk in range(1, 11):
                    display = format_score_for_display(calculate_option_score(impact, effort, risk))
                    assert 1.0 <= display <= 10.0


class TestOptionCreate:
    def test_create_sets_score(self):
        option = _option("Move to Berlin", 9, 7, 5)
        assert option.total_score == 69
        assert option.decision_id == "dec-1"

    def test_create_clamps_ratings(self):
        option = _option("Stretch", 12, 0, 4)
        assert option.impact == 10
        assert option.effort == 1


class TestSuggestedOption:
    def test_highest_score_wins(self):
        options = [_option("A", 5, 5, 5), _option("B", 10, 1, 1), _option("C", 7, 3, 2)]
        assert get_suggested_option(options).label == "B"

    def test_tie_goes_to_first(self):
        first, second = _option("First", 7, 3, 2), _option("Second", 7, 3, 2)
        assert get_suggested_option([first, second]) is first

    def test_unlabelled_options_ignored(self):
        options = [_option("  ", 10, 1, 1), _option("Real", 3, 8, 8)]
        assert get_suggested_option(options).label == "Real"

    def test_no_labelled_options(self):
        """Nothing to suggest without a labelled option."""
        assert get_suggested_option([_option("", 10, 1, 1)]) is None
        assert get_suggested_option([]) is None

    def test_rank_options_orders_by_score(self):
        options = [_option("Low", 1, 10, 10), _option("High", 10, 1, 1), _option("", 9, 1, 1)]
        assert [o.label for o in rank_options(options)] == ["High", "Low"]
