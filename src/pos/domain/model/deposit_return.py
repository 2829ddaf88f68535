"""A refund paid out for returned deposit containers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from pos.domain.exceptions import ValidationError
from pos.domain.model.product import Product
from pos.domain.model.value_objects import Money, Quantity


@dataclass
class DepositReturn:

    id: int | None
    product_id: int
    product_name: str
    quantity: Quantity
    amount: Money
    actor_id: int
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def for_product(
        product: Product,
        quantity: int,
        actor_id: int,
        now: datetime | None = None,
    ) -> DepositReturn:
        """Refund ``quantity`` containers at the product's current deposit."""
        deposit = product.deposit_per_unit
        if deposit is None:
            raise ValidationError(f"Product '{product.name}' does not carry a deposit")
        qty = Quantity(quantity)
        return DepositReturn(
            id=None,
            product_id=product.id,
            product_name=product.name,
            quantity=qty,
            amount=(deposit * qty.value).rounded(),
            actor_id=actor_id,
            created_at=now or datetime.now(timezone.utc),
        )
