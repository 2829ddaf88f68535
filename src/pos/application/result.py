"""Result type returned by the order lifecycle manager.

Domain errors never escape the manager; they come back as a failed
``Result`` holding one of the ``pos.domain.exceptions`` classes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from pos.domain.exceptions import DomainException

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):

    value: T | None = None
    error: DomainException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_kind(self) -> str | None:
        return self.error.kind if self.error is not None else None

    def unwrap(self) -> T:
        """Return the value, or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    @staticmethod
    def success(value: T) -> Result[T]:
        return Result(value=value)

    @staticmethod
    def failure(error: DomainException) -> Result[T]:
        return Result(error=error)
