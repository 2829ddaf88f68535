"""Abstract repository for DepositReturn records."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from pos.domain.model.deposit_return import DepositReturn


class DepositReturnRepository(ABC):

    @abstractmethod
    def add(self, deposit_return: DepositReturn) -> None:
        """Persist a new return, assigning its ID."""

    @abstractmethod
    def list_created_between(self, start: datetime, end: datetime) -> list[DepositReturn]:
        """Return deposit returns recorded in ``[start, end)``."""
