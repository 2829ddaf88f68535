"""Unit tests for the sales report fold."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from pos.domain.model.deposit_return import DepositReturn
from pos.domain.model.order import Order, PaymentMethod
from pos.domain.model.product import Product
from pos.domain.model.value_objects import Money, TaxRate
from pos.domain.service.sales_report import summarize_orders

START = datetime(2026, 10, 1, tzinfo=timezone.utc)
END = datetime(2026, 11, 1, tzinfo=timezone.utc)

BEER = Product(
    id=1, name="Beer", price=Money.of("3.50"), tax_rate=TaxRate.of("19"),
    requires_deposit=True, deposit_amount=Money.of("0.25"),
)
PRETZEL = Product(id=2, name="Pretzel", price=Money.of("2.00"), tax_rate=TaxRate.of("7"))


def _order(created_at, lines, status="paid", is_test=False, number="1") -> Order:
    order = Order.open(order_number=number, cashier_id=1, is_test=is_test, now=created_at)
    for product, qty in lines:
        order.add_line_item(product, qty)
    if status == "paid":
        order.mark_paid(PaymentMethod.CASH, order.totals.grand_total, now=created_at)
    elif status == "cancelled":
        order.mark_cancelled(now=created_at)
    return order


class TestSummarizeOrders:

    def test_empty_range(self):
        summary = summarize_orders([], START, END)
        assert summary.order_count == 0
        assert summary.revenue == Decimal("0.00")
        assert summary.average_order_value == Decimal("0.00")
        assert summary.daily == []
        assert summary.products == []

    def test_only_paid_orders_carry_money(self):
        day = START + timedelta(days=2, hours=10)
        orders = [
            _order(day, [(BEER, 2)]),
            _order(day, [(BEER, 5)], status="cancelled"),
            _order(day, [(PRETZEL, 1)], status="open"),
        ]
        summary = summarize_orders(orders, START, END)
        assert summary.order_count == 3
        assert summary.paid_order_count == 1
        assert summary.cancelled_order_count == 1
        # 7.00 + 1.33 tax + 0.50 deposit
        assert summary.revenue == Decimal("8.83")
        assert summary.tax_total == Decimal("1.33")
        assert summary.deposit_total == Decimal("0.50")

    def test_range_is_half_open(self):
        orders = [
            _order(START, [(BEER, 1)]),
            _order(END, [(BEER, 1)]),
            _order(START - timedelta(seconds=1), [(BEER, 1)]),
        ]
        assert summarize_orders(orders, START, END).order_count == 1

    def test_test_orders_excluded_unless_asked(self):
        day = START + timedelta(days=1)
        orders = [_order(day, [(BEER, 1)]), _order(day, [(BEER, 1)], is_test=True)]
        assert summarize_orders(orders, START, END).order_count == 1
        assert summarize_orders(orders, START, END, include_test=True).order_count == 2

    def test_daily_buckets_and_averages(self):
        first = START + timedelta(days=4, hours=9)
        second = START + timedelta(days=5, hours=20)
        orders = [
            _order(first, [(PRETZEL, 1)]),
            _order(first, [(PRETZEL, 2)]),
            _order(second, [(PRETZEL, 3)]),
        ]
        summary = summarize_orders(orders, START, END)

        assert [d.day for d in summary.daily] == [date(2026, 10, 5), date(2026, 10, 6)]
        assert [d.order_count for d in summary.daily] == [2, 1]
        # 2.00 * 1.07 = 2.14 per pretzel
        assert summary.daily[0].revenue == Decimal("6.42")
        assert summary.daily[1].revenue == Decimal("6.42")
        assert summary.revenue == Decimal("12.84")
        assert summary.average_order_value == Decimal("4.28")
        assert summary.average_daily_revenue == Decimal("6.42")

    def test_product_stats_sorted_by_revenue(self):
        day = START + timedelta(days=3)
        orders = [_order(day, [(PRETZEL, 1), (BEER, 1)]), _order(day, [(PRETZEL, 4)])]
        summary = summarize_orders(orders, START, END)

        assert [p.product_name for p in summary.products] == ["Pretzel", "Beer"]
        pretzel = summary.products[0]
        assert pretzel.quantity_sold == 5
        assert pretzel.revenue == Decimal("10.00")
        assert pretzel.tax_amount == Decimal("0.70")

    def test_deposit_balance_nets_returns(self):
        day = START + timedelta(days=7)
        orders = [_order(day, [(BEER, 4)])]
        refunds = [
            DepositReturn.for_product(BEER, 2, actor_id=1, now=day),
            DepositReturn.for_product(BEER, 10, actor_id=1, now=END),
        ]
        summary = summarize_orders(orders, START, END, deposit_returns=refunds)
        assert summary.deposit_total == Decimal("1.00")
        assert summary.deposit_returned == Decimal("0.50")
        assert summary.deposit_balance == Decimal("0.50")
