from __future__ import annotations

from typing import Optional

from .base import SessionDecision, SessionStrategy, SessionWindow


class MissingSessionStrategy(SessionStrategy):
    """No punches in this session.

    If the other half of the day was worked, this half counts as a missed
    session and its whole duration is undertime. If nothing at all was
    punched, nothing is charged and the day is flagged for review instead:
    an unrecorded absence and a data-entry gap look the same here.
    """

    def decide(
        self,
        *,
        window: SessionWindow,
        punch_in: Optional[int],
        punch_out: Optional[int],
        other_session_punched: bool,
    ) -> SessionDecision:
        if other_session_punched:
            return SessionDecision(undertime=window.duration)
        return SessionDecision(incomplete=True)
