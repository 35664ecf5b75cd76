from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AdjectivalRating, FormKind, FormStatus, OutputCategory


@dataclass(frozen=True)
class RatingLine:
    """One commitment item of a performance form.

    The average is derived from the three sub-scores and cannot be set on
    its own.
    """

    line_id: str
    category: OutputCategory
    output_order: int
    output_description: str
    success_indicator: Optional[str] = None
    actual_accomplishment: Optional[str] = None
    quantity: Optional[int] = None
    quality: Optional[int] = None
    timeliness: Optional[int] = None
    remarks: Optional[str] = None

    @property
    def is_rated(self) -> bool:
        return self.quantity is not None and self.quality is not None and self.timeliness is not None

    @property
    def average(self) -> Optional[float]:
        if not self.is_rated:
            return None
        return (self.quantity + self.quality + self.timeliness) / 3


@dataclass(frozen=True)
class LineScores:
    line_id: str
    quantity: int
    quality: int
    timeliness: int


@dataclass(frozen=True)
class PerformanceForm:
    form_id: str
    kind: FormKind
    owner_id: str
    division: Optional[str]
    cycle_id: str
    status: FormStatus
    lines: tuple[RatingLine, ...] = ()
    final_rating: Optional[float] = None
    adjectival_rating: Optional[AdjectivalRating] = None
    supervisor_id: Optional[str] = None
    reviewed_by: Optional[str] = None
    approved_by: Optional[str] = None
    review_comments: Optional[str] = None
    final_remarks: Optional[str] = None
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    finalized_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Bumped by every commit; the compare-and-set token.
    version: int = 0

    def line(self, line_id: str) -> Optional[RatingLine]:
        for ln in self.lines:
            if ln.line_id == line_id:
                return ln
        return None


@dataclass(frozen=True)
class SpmsCycle:
    """A rating period of the Strategic Performance Management System."""

    cycle_id: str
    name: str
    start_date: date
    end_date: date
    is_active: bool


@dataclass(frozen=True)
class RatingSummary:
    final_rating: float
    adjectival_rating: AdjectivalRating
    line_averages: tuple[float, ...]
    banding: str
