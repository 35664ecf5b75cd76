from __future__ import annotations

from typing import Any, Optional

from ..core.constants import MAX_SUB_SCORE, MIN_SUB_SCORE
from ..core.exceptions import ValidationError
from .datetime_utils import parse_clock_minutes


def require_score(value: Any, field_name: str) -> int:
    """Sub-scores are whole numbers on the 1-5 scale."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field_name} must be a whole number")
    if value < MIN_SUB_SCORE or value > MAX_SUB_SCORE:
        raise ValidationError(f"{field_name} must be between {MIN_SUB_SCORE} and {MAX_SUB_SCORE}")
    return value


def require_mapping(value: Any, what: str = "Request body") -> dict:
    if not isinstance(value, dict):
        raise ValidationError(f"{what} must be a JSON object")
    return value


def require_text(value: Any, field_name: str) -> Optional[str]:
    """Optional free text: None or a string, stripped; blank becomes None."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    return value.strip() or None


def require_clock_time(value: Optional[str], field_name: str) -> Optional[str]:
    """Blank means no punch; anything else must be a valid HH:MM."""
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} is not a valid time (HH:MM)")
    v = (value or "").strip()
    if not v:
        return None
    if parse_clock_minutes(v) is None:
        raise ValidationError(f"{field_name} is not a valid time (HH:MM)")
    return v
