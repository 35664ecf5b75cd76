from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SessionWindow:
    """An official half-day session, in minutes from midnight."""

    start: int
    end: int

    @property
    def duration(self) -> int:
        return self.end - self.start

    def late_by(self, punch_in: Optional[int]) -> int:
        if punch_in is None:
            return 0
        return max(0, punch_in - self.start)

    def early_by(self, punch_out: Optional[int]) -> int:
        if punch_out is None:
            return 0
        return max(0, self.end - punch_out)


@dataclass(frozen=True)
class SessionDecision:
    tardiness: int = 0
    undertime: int = 0
    incomplete: bool = False


class SessionStrategy(ABC):
    """Strategy Pattern: how one session's punches turn into minutes."""

    @abstractmethod
    def decide(
        self,
        *,
        window: SessionWindow,
        punch_in: Optional[int],
        punch_out: Optional[int],
        other_session_punched: bool,
    ) -> SessionDecision:
        raise NotImplementedError
