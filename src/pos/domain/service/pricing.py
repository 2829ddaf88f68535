"""Domain service: Pricing Engine.

Derives the monetary totals of an order from its line items and the
order-level discount.  Pure computation: no repositories, no clock.

Line figures are summed at full precision and each order figure is
rounded to cents exactly once, so many small items never accumulate
rounding error.  The grand total is built from the rounded figures, so
the amounts shown on a receipt always add up.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from pos.domain.model.value_objects import DEFAULT_CURRENCY, Money, round_money

if TYPE_CHECKING:
    from pos.domain.model.order import OrderLineItem


@dataclass(frozen=True)
class Totals:
    subtotal: Money
    tax_amount: Money
    deposit_total: Money
    discount_amount: Money
    grand_total: Money


def compute_totals(
    line_items: Iterable[OrderLineItem],
    order_discount: Money | None = None,
    currency: str = DEFAULT_CURRENCY,
) -> Totals:
    """Compute subtotal, tax, deposit and grand total for a set of lines.

    The grand total is clamped at zero: a discount larger than the sum of
    the order yields ``0.00``, never a negative amount.
    """
    if order_discount is None:
        order_discount = Money.zero(currency)

    subtotal = Decimal("0")
    tax = Decimal("0")
    deposit = Decimal("0")
    for line in line_items:
        subtotal += line.subtotal
        tax += line.tax_amount
        deposit += line.deposit_total

    subtotal = round_money(subtotal)
    tax = round_money(tax)
    deposit = round_money(deposit)
    discount = round_money(order_discount.amount)
    grand_total = max(subtotal + tax + deposit - discount, Decimal("0.00"))

    return Totals(
        subtotal=Money(subtotal, currency),
        tax_amount=Money(tax, currency),
        deposit_total=Money(deposit, currency),
        discount_amount=Money(discount, currency),
        grand_total=Money(grand_total, currency),
    )
