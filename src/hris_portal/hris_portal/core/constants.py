"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import FormStatus

# Official government office hours, in minutes from midnight.
AM_SESSION_START = 8 * 60
AM_SESSION_END = 12 * 60
PM_SESSION_START = 13 * 60
PM_SESSION_END = 17 * 60

# Remarks containing any of these (case-insensitive) excuse the whole day.
EXCUSE_KEYWORDS = ("Leave", "OB", "Absent")

MIN_SUB_SCORE = 1
MAX_SUB_SCORE = 5

EDITABLE_FORM_STATUSES = frozenset({FormStatus.DRAFT, FormStatus.RETURNED})

DEFAULT_LOG_LEVEL = "INFO"
