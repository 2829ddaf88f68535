"""Unit tests for deposit returns."""

from datetime import datetime, timezone

import pytest

from pos.domain.exceptions import ValidationError
from pos.domain.model.deposit_return import DepositReturn
from pos.domain.model.product import Product
from pos.domain.model.value_objects import Money

NOW = datetime(2026, 10, 19, 18, 0, tzinfo=timezone.utc)


class TestDepositReturn:

    def test_amount_is_deposit_times_quantity(self):
        bottle = Product(
            id=3, name="Water", price=Money.of("1.20"),
            requires_deposit=True, deposit_amount=Money.of("0.25"),
        )
        refund = DepositReturn.for_product(bottle, 6, actor_id=7, now=NOW)
        assert refund.amount == Money.of("1.50")
        assert refund.quantity.value == 6
        assert refund.product_name == "Water"
        assert refund.created_at == NOW
        assert refund.id is None

    def test_product_without_deposit_rejected(self):
        bread = Product(id=4, name="Bread", price=Money.of("2.00"))
        with pytest.raises(ValidationError, match="does not carry a deposit"):
            DepositReturn.for_product(bread, 1, actor_id=7)

    def test_zero_quantity_rejected(self):
        bottle = Product(
            id=3, name="Water", price=Money.of("1.20"),
            requires_deposit=True, deposit_amount=Money.of("0.25"),
        )
        with pytest.raises(ValidationError):
            DepositReturn.for_product(bottle, 0, actor_id=7)
