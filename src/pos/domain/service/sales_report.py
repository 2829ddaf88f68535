"""Domain service: sales reporting.

Read-only folds over a set of orders.  Nothing is cached; the same
orders always produce the same summary.  Days are UTC calendar days of
the order's creation timestamp.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from pos.domain.model.deposit_return import DepositReturn
from pos.domain.model.order import Order, OrderStatus
from pos.domain.model.value_objects import round_money


@dataclass(frozen=True)
class DailyStats:
    day: date
    revenue: Decimal
    order_count: int


@dataclass(frozen=True)
class ProductStats:
    product_id: int
    product_name: str
    quantity_sold: int
    revenue: Decimal
    tax_amount: Decimal


@dataclass(frozen=True)
class SalesSummary:
    start: datetime
    end: datetime
    order_count: int
    paid_order_count: int
    cancelled_order_count: int
    revenue: Decimal
    tax_total: Decimal
    deposit_total: Decimal
    deposit_returned: Decimal
    average_order_value: Decimal
    average_daily_revenue: Decimal
    daily: list[DailyStats] = field(default_factory=list)
    products: list[ProductStats] = field(default_factory=list)

    @property
    def deposit_balance(self) -> Decimal:
        """Deposits collected minus deposits refunded in the period."""
        return self.deposit_total - self.deposit_returned


def summarize_orders(
    orders: Iterable[Order],
    start: datetime,
    end: datetime,
    include_test: bool = False,
    deposit_returns: Iterable[DepositReturn] = (),
) -> SalesSummary:
    """Fold the orders created in ``[start, end)`` into a summary.

    Every order in range counts towards ``order_count``; money figures
    come from ``Paid`` orders only.
    """
    in_range = [
        o for o in orders
        if start <= o.created_at < end and (include_test or not o.is_test)
    ]

    revenue = Decimal("0")
    tax_total = Decimal("0")
    deposit_total = Decimal("0")
    paid = 0
    cancelled = 0
    per_day: dict[date, list] = {}
    per_product: dict[int, list] = {}

    for order in in_range:
        bucket = per_day.setdefault(order.created_at.date(), [Decimal("0"), 0])
        bucket[1] += 1

        if order.status == OrderStatus.CANCELLED:
            cancelled += 1
        if order.status != OrderStatus.PAID:
            continue

        paid += 1
        totals = order.totals
        revenue += totals.grand_total.amount
        tax_total += totals.tax_amount.amount
        deposit_total += totals.deposit_total.amount
        bucket[0] += totals.grand_total.amount

        for line in order.items:
            stats = per_product.setdefault(
                line.product_id, [line.product_name, 0, Decimal("0"), Decimal("0")]
            )
            stats[1] += line.quantity.value
            stats[2] += line.subtotal
            stats[3] += line.tax_amount

    returned = sum(
        (r.amount.amount for r in deposit_returns if start <= r.created_at < end),
        Decimal("0"),
    )

    daily = [
        DailyStats(day=day, revenue=round_money(values[0]), order_count=values[1])
        for day, values in sorted(per_day.items())
    ]
    products = sorted(
        (
            ProductStats(
                product_id=pid,
                product_name=values[0],
                quantity_sold=values[1],
                revenue=round_money(values[2]),
                tax_amount=round_money(values[3]),
            )
            for pid, values in per_product.items()
        ),
        key=lambda s: (-s.revenue, s.product_name.lower()),
    )

    return SalesSummary(
        start=start,
        end=end,
        order_count=len(in_range),
        paid_order_count=paid,
        cancelled_order_count=cancelled,
        revenue=round_money(revenue),
        tax_total=round_money(tax_total),
        deposit_total=round_money(deposit_total),
        deposit_returned=round_money(returned),
        average_order_value=round_money(revenue / paid) if paid else Decimal("0.00"),
        average_daily_revenue=(
            round_money(revenue / len(daily)) if daily else Decimal("0.00")
        ),
        daily=daily,
        products=products,
    )
