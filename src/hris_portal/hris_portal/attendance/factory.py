from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .strategies.base import SessionStrategy
from .strategies.complete_strategy import CompleteSessionStrategy
from .strategies.missing_strategy import MissingSessionStrategy
from .strategies.partial_strategy import PartialSessionStrategy


@dataclass
class SessionStrategyFactory:
    """Factory Pattern: choose the session strategy from the punch shape."""

    complete: SessionStrategy = field(default_factory=CompleteSessionStrategy)
    missing: SessionStrategy = field(default_factory=MissingSessionStrategy)
    partial: SessionStrategy = field(default_factory=PartialSessionStrategy)

    def for_session(self, *, punch_in: Optional[int], punch_out: Optional[int]) -> SessionStrategy:
        if punch_in is not None and punch_out is not None:
            return self.complete
        if punch_in is None and punch_out is None:
            return self.missing
        return self.partial
