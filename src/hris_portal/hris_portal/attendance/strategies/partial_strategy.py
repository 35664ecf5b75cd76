from __future__ import annotations

from typing import Optional

from .base import SessionDecision, SessionStrategy, SessionWindow


class PartialSessionStrategy(SessionStrategy):
    """Exactly one punch: incomplete, but whatever lateness is visible still counts."""

    def decide(
        self,
        *,
        window: SessionWindow,
        punch_in: Optional[int],
        punch_out: Optional[int],
        other_session_punched: bool,
    ) -> SessionDecision:
        return SessionDecision(
            tardiness=window.late_by(punch_in),
            undertime=window.early_by(punch_out),
            incomplete=True,
        )
