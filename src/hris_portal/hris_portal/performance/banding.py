"""Adjectival banding tables.

Each table is a named value handed to the aggregation by the caller;
individual and office forms use different cut-points.
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from numbers import Real
from typing import Optional

from ..core.enums import AdjectivalRating, FormKind
from ..core.exceptions import InvariantViolation


@dataclass(frozen=True)
class Band:
    rating: AdjectivalRating
    lower_bound: Optional[Fraction]  # inclusive; None = everything below the previous band


@dataclass(frozen=True)
class BandingTable:
    name: str
    bands: tuple[Band, ...]

    def __post_init__(self):
        if not self.bands or self.bands[-1].lower_bound is not None:
            raise ValueError(f"{self.name}: last band must be open-ended")
        bounds = [b.lower_bound for b in self.bands[:-1]]
        if any(b is None for b in bounds):
            raise ValueError(f"{self.name}: only the last band may be open-ended")
        if any(hi <= lo for hi, lo in zip(bounds, bounds[1:])):
            raise ValueError(f"{self.name}: bands must be strictly descending")

    def classify(self, rating: Real | Fraction) -> AdjectivalRating:
        value = Fraction(rating)
        for band in self.bands:
            if band.lower_bound is None or value >= band.lower_bound:
                return band.rating
        raise InvariantViolation(f"{self.name}: no band matched {rating!r}")


INDIVIDUAL_BANDING = BandingTable(
    name="individual",
    bands=(
        Band(AdjectivalRating.OUTSTANDING, Fraction(9, 2)),
        Band(AdjectivalRating.VERY_SATISFACTORY, Fraction(7, 2)),
        Band(AdjectivalRating.SATISFACTORY, Fraction(5, 2)),
        Band(AdjectivalRating.UNSATISFACTORY, Fraction(3, 2)),
        Band(AdjectivalRating.POOR, None),
    ),
)

# Office-level scale: only a perfect 5 is Outstanding.
OFFICE_BANDING = BandingTable(
    name="office",
    bands=(
        Band(AdjectivalRating.OUTSTANDING, Fraction(5)),
        Band(AdjectivalRating.VERY_SATISFACTORY, Fraction(4)),
        Band(AdjectivalRating.SATISFACTORY, Fraction(3)),
        Band(AdjectivalRating.UNSATISFACTORY, Fraction(2)),
        Band(AdjectivalRating.POOR, None),
    ),
)

_BY_KIND = {
    FormKind.IPCR: INDIVIDUAL_BANDING,
    FormKind.DPCR: OFFICE_BANDING,
}


def banding_for(kind: FormKind) -> BandingTable:
    return _BY_KIND[kind]
