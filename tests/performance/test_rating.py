from __future__ import annotations

from fractions import Fraction

from src.hris_portal.hris_portal.core.enums import AdjectivalRating, OutputCategory
from src.hris_portal.hris_portal.core.exceptions import IncompleteRatingError, ValidationError
from src.hris_portal.hris_portal.performance.banding import INDIVIDUAL_BANDING, OFFICE_BANDING
from src.hris_portal.hris_portal.performance.model import RatingLine
from src.hris_portal.hris_portal.performance.rating import aggregate_ratings, line_average


def line(line_id, q=None, ql=None, t=None, category=OutputCategory.CORE_FUNCTION):
    return RatingLine(line_id, category, 1, f"Output {line_id}", "indicator", quantity=q, quality=ql, timeliness=t)


def test_line_average_is_exact_mean():
    assert line_average(line("a", 4, 5, 3)) == Fraction(4)
    assert line_average(line("b", 5, 4, 4)) == Fraction(13, 3)
    assert line("a", 4, 5, 3).average == 4.0


def test_line_average_needs_all_three():
    assert line_average(line("a", 4, 5, None)) is None
    assert line("a", None, 5, 3).average is None


def test_two_lines_reach_outstanding():
    result = aggregate_ratings([line("a", 4, 5, 3), line("b", 5, 5, 5)], INDIVIDUAL_BANDING)

    assert result.ok
    assert result.value.final_rating == 4.5
    assert result.value.adjectival_rating == AdjectivalRating.OUTSTANDING
    assert result.value.line_averages == (4.0, 5.0)
    assert result.value.banding == "individual"


def test_lines_count_equally_regardless_of_category():
    lines = [
        line("a", 5, 5, 5, OutputCategory.CORE_FUNCTION),
        line("b", 3, 3, 3, OutputCategory.SUPPORT_FUNCTION),
        line("c", 3, 3, 3, OutputCategory.SUPPORT_FUNCTION),
    ]

    result = aggregate_ratings(lines, INDIVIDUAL_BANDING)

    assert result.value.final_rating == float(Fraction(11, 3))
    assert result.value.adjectival_rating == AdjectivalRating.VERY_SATISFACTORY


def test_same_lines_band_differently_per_table():
    lines = [line("a", 4, 5, 3), line("b", 5, 5, 5)]

    assert aggregate_ratings(lines, OFFICE_BANDING).value.adjectival_rating == AdjectivalRating.VERY_SATISFACTORY


def test_unrated_line_blocks_aggregation():
    result = aggregate_ratings([line("a", 4, 5, 3), line("b", 5, None, 5)], INDIVIDUAL_BANDING)

    assert not result.ok
    assert isinstance(result.error, IncompleteRatingError)
    assert result.code == "IncompleteData"
    assert "b" in str(result.error)


def test_no_lines_is_invalid():
    result = aggregate_ratings([], INDIVIDUAL_BANDING)

    assert isinstance(result.error, ValidationError)
