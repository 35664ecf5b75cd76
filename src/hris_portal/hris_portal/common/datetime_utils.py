from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from typing import Any, Optional

_CLOCK_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::(\d{2}))?\s*$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def parse_clock_minutes(value: Optional[str]) -> Optional[int]:
    """Convert ``HH:MM`` (optionally ``HH:MM:SS``) into minutes from midnight.

    Seconds are truncated. Anything that does not look like a wall-clock
    time yields None instead of raising.
    """
    if not isinstance(value, str):
        return None
    m = _CLOCK_RE.match(value)
    if not m:
        return None
    hours, minutes = int(m.group(1)), int(m.group(2))
    if hours > 23 or minutes > 59:
        return None
    if m.group(3) is not None and int(m.group(3)) > 59:
        return None
    return hours * 60 + minutes


def format_clock(value: Any) -> Optional[str]:
    """Render a stored TIME value back to ``HH:MM``; None stays None."""
    if value is None:
        return None
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, timedelta):
        total = int(value.total_seconds()) % 86400
        return f"{total // 3600:02d}:{(total % 3600) // 60:02d}"
    text = str(value).strip()
    return text or None


def split_minutes(total_minutes: int) -> tuple[int, int]:
    """Split a minute total into (hours, minutes) for Form 48 display."""
    total_minutes = max(int(total_minutes), 0)
    return total_minutes // 60, total_minutes % 60


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return [first day of month, first day of next month)."""
    if month < 1 or month > 12:
        raise ValueError("month must be 1..12")
    start = date(year, month, 1)
    if month == 12:
        end = date(year + 1, 1, 1)
    else:
        end = date(year, month + 1, 1)
    return start, end
