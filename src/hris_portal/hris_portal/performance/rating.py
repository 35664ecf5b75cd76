from __future__ import annotations

from fractions import Fraction
from typing import Optional, Sequence

from ..core.exceptions import IncompleteRatingError, ValidationError
from ..core.result import Result
from .banding import BandingTable
from .model import RatingLine, RatingSummary


def line_average(line: RatingLine) -> Optional[Fraction]:
    """Exact mean of the three sub-scores, or None until all three exist."""
    if not line.is_rated:
        return None
    return Fraction(line.quantity + line.quality + line.timeliness, 3)


def aggregate_ratings(lines: Sequence[RatingLine], banding: BandingTable) -> Result[RatingSummary]:
    """Unweighted mean of line averages, banded with the given table.

    A single unrated line fails the whole aggregation; lines are never
    skipped.
    """
    if not lines:
        return Result.failure(ValidationError("Form has no rating lines"))

    averages = [line_average(ln) for ln in lines]
    missing = [ln.line_id for ln, avg in zip(lines, averages) if avg is None]
    if missing:
        return Result.failure(IncompleteRatingError(f"Not all lines rated: {', '.join(missing)}"))

    final = sum(averages, Fraction(0)) / len(averages)
    return Result.success(
        RatingSummary(
            final_rating=float(final),
            adjectival_rating=banding.classify(final),
            line_averages=tuple(float(a) for a in averages),
            banding=banding.name,
        )
    )
