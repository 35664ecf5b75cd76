from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from .exceptions import DomainError, InvariantViolation

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a pure engine call: either a value or a tagged failure.

    Engines never raise for expected business conditions; they hand back the
    ``DomainError`` instance instead and let the caller decide.
    """

    value: Optional[T] = None
    error: Optional[DomainError] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: DomainError) -> "Result[T]":
        if error is None:
            raise InvariantViolation("failure result needs an error")
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def code(self) -> Optional[str]:
        return self.error.code if self.error is not None else None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
