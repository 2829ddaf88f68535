"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from pos.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Generate the next unique order ID."""

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def get_by_order_number(self, order_number: str) -> Order | None:
        """Return an order by its human-readable number, or None."""

    @abstractmethod
    def list_created_between(self, start: datetime, end: datetime) -> list[Order]:
        """Return orders created in ``[start, end)``, oldest first."""

    @abstractmethod
    def list_by_cashier(self, cashier_id: int) -> list[Order]:
        """Return every order opened by the cashier, newest first."""

    @abstractmethod
    def references_product(self, product_id: int) -> bool:
        """True if any order has ever contained the product."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order."""
