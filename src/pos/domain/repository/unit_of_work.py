"""Abstract unit of work.

Groups repository changes into one all-or-nothing commit.  Use it as a
context manager; leaving the block without calling ``commit()`` (for
example because an exception escaped) discards every staged change::

    with uow:
        order = uow.orders.get_by_id(order_id)
        ...
        uow.commit()
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pos.domain.repository.deposit_return_repository import DepositReturnRepository
from pos.domain.repository.order_repository import OrderRepository
from pos.domain.repository.product_repository import ProductRepository


class UnitOfWork(ABC):

    orders: OrderRepository
    products: ProductRepository
    deposit_returns: DepositReturnRepository

    def __enter__(self) -> UnitOfWork:
        self.begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.rollback()

    @abstractmethod
    def begin(self) -> None:
        """Load a fresh view of the store."""

    @abstractmethod
    def commit(self) -> None:
        """Make every staged change durable at once."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard staged changes.  A no-op after a successful commit."""
