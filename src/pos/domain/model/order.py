"""Order aggregate: a till order and its line items.

The Order is an aggregate root that owns its line items.
All business invariants are enforced here; totals are never stored on
the aggregate but derived from the line items by the pricing engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from pos.domain.exceptions import (
    InvalidStateError,
    LineItemNotFoundError,
    ProductUnavailableError,
    ValidationError,
)
from pos.domain.model.product import Product
from pos.domain.model.value_objects import DEFAULT_CURRENCY, Money, Quantity, TaxRate
from pos.domain.service.pricing import Totals, compute_totals


class OrderStatus(Enum):
    OPEN = "Open"
    PAID = "Paid"
    CANCELLED = "Cancelled"
    # Reserved for partial refunds; nothing transitions into it yet.
    PARTIALLY_CANCELLED = "PartiallyCancelled"


class PaymentMethod(Enum):
    CASH = "Cash"
    CARD = "Card"
    VOUCHER = "Voucher"
    OTHER = "Other"

    @staticmethod
    def parse(raw: str) -> PaymentMethod:
        for method in PaymentMethod:
            if method.value.lower() == raw.strip().lower():
                return method
        raise ValidationError(f"Unknown payment method: {raw!r}")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class OrderLineItem:
    """Captures the price snapshot of a product at the moment it was added.

    ``unit_price``, ``tax_rate`` and ``deposit_amount`` are copied from the
    product and never re-read, so later catalog edits leave the line alone.
    Derived amounts keep full precision; rounding is the pricing engine's job.
    """

    id: int
    product_id: int
    product_name: str
    quantity: Quantity
    unit_price: Money  # locked at add-time
    tax_rate: TaxRate  # locked at add-time
    deposit_amount: Money | None = None  # per unit, locked at add-time
    discount_amount: Money = field(default_factory=Money.zero)  # per unit
    stock_deducted: int = 0

    @property
    def subtotal(self) -> Decimal:
        return self.quantity.value * self.unit_price.amount

    @property
    def tax_amount(self) -> Decimal:
        return self.quantity.value * self.unit_price.amount * self.tax_rate.fraction

    @property
    def deposit_total(self) -> Decimal:
        if self.deposit_amount is None:
            return Decimal("0")
        return self.quantity.value * self.deposit_amount.amount

    @property
    def discount_total(self) -> Decimal:
        return self.quantity.value * self.discount_amount.amount

    @property
    def line_total(self) -> Decimal:
        return self.subtotal + self.tax_amount + self.deposit_total - self.discount_total


@dataclass
class Order:
    """Aggregate root for till orders.

    Use the ``Order.open()`` factory for new orders.  The ``__init__`` is
    intentionally simple so the repository can reconstitute persisted
    orders without re-validating.
    """

    id: int | None
    order_number: str
    cashier_id: int
    items: list[OrderLineItem] = field(default_factory=list)
    status: OrderStatus = OrderStatus.OPEN
    payment_method: PaymentMethod | None = None
    discount: Money = field(default_factory=Money.zero)
    paid_amount: Money = field(default_factory=Money.zero)
    change_amount: Money = field(default_factory=Money.zero)
    created_at: datetime = field(default_factory=_utcnow)
    completed_at: datetime | None = None
    is_test: bool = False
    notes: str | None = None
    next_line_id: int = 1
    currency: str = DEFAULT_CURRENCY

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def open(
        order_number: str,
        cashier_id: int,
        is_test: bool = False,
        now: datetime | None = None,
        currency: str = DEFAULT_CURRENCY,
    ) -> Order:
        if not order_number:
            raise ValidationError("Order number is required")
        return Order(
            id=None,
            order_number=order_number,
            cashier_id=cashier_id,
            created_at=now or _utcnow(),
            is_test=is_test,
            discount=Money.zero(currency),
            paid_amount=Money.zero(currency),
            change_amount=Money.zero(currency),
            currency=currency,
        )

    # --- Line items -----------------------------------------------------------

    def add_line_item(self, product: Product, quantity: int) -> OrderLineItem:
        """Add *quantity* of *product*, merging into an existing line.

        A product appears on at most one line.  When it is already on the
        order only the quantity grows; the original price snapshot stays.
        """
        self._ensure_open()
        if not product.is_active:
            raise ProductUnavailableError(f"Product '{product.name}' is not available")
        qty = Quantity(quantity)

        existing = self._find_by_product(product.id)
        if existing is not None:
            existing.quantity = existing.quantity + qty
            return existing

        line = OrderLineItem(
            id=self.next_line_id,
            product_id=product.id,
            product_name=product.name,
            quantity=qty,
            unit_price=product.price,
            tax_rate=product.tax_rate,
            deposit_amount=product.deposit_per_unit,
            discount_amount=Money.zero(product.price.currency),
        )
        self.next_line_id += 1
        self.items.append(line)
        return line

    def remove_line_item(self, line_item_id: int) -> OrderLineItem:
        self._ensure_open()
        line = self._find_item(line_item_id)
        self.items.remove(line)
        return line

    def set_line_item_quantity(self, line_item_id: int, new_quantity: int) -> OrderLineItem | None:
        """Change a line's quantity; zero or less removes the line.

        Returns the updated line, or ``None`` when it was removed.
        """
        self._ensure_open()
        line = self._find_item(line_item_id)
        if new_quantity <= 0:
            self.items.remove(line)
            return None
        line.quantity = Quantity(new_quantity)
        return line

    def apply_discount(self, amount: Money) -> None:
        """Set the order-level discount.

        Not checked against the order size: the grand total clamps at zero.
        """
        self._ensure_open()
        self.discount = amount

    # --- State transitions ----------------------------------------------------

    def mark_paid(
        self,
        payment_method: PaymentMethod,
        paid_amount: Money,
        now: datetime | None = None,
    ) -> None:
        """Transition Open -> Paid.

        Whatever is handed over is recorded; change is never negative.
        Stock deduction is coordinated by the application layer.
        """
        self._ensure_open()
        grand_total = self.totals.grand_total
        if paid_amount > grand_total:
            change = (paid_amount - grand_total).rounded()
        else:
            change = Money.zero(self.currency)

        self.payment_method = payment_method
        self.paid_amount = paid_amount.rounded()
        self.change_amount = change
        self.status = OrderStatus.PAID
        self.completed_at = now or _utcnow()

    def mark_cancelled(self, reason: str | None = None, now: datetime | None = None) -> None:
        """Transition Open -> Cancelled.

        Stock restoration (if any was deducted) is coordinated by the
        application layer.
        """
        if self.status == OrderStatus.PAID:
            raise InvalidStateError(
                f"Cannot cancel order {self.order_number}: it has already been paid"
            )
        self._ensure_open()
        self.status = OrderStatus.CANCELLED
        self.completed_at = now or _utcnow()
        if reason:
            self.notes = reason

    # --- Computed properties --------------------------------------------------

    @property
    def totals(self) -> Totals:
        return compute_totals(self.items, self.discount, self.currency)

    @property
    def is_open(self) -> bool:
        return self.status == OrderStatus.OPEN

    @property
    def item_count(self) -> int:
        return sum(item.quantity.value for item in self.items)

    def references_product(self, product_id: int) -> bool:
        return self._find_by_product(product_id) is not None

    # --- Internal helpers -----------------------------------------------------

    def _ensure_open(self) -> None:
        if self.status != OrderStatus.OPEN:
            raise InvalidStateError(
                f"Cannot modify order {self.order_number} in {self.status.value} status"
            )

    def _find_item(self, line_item_id: int) -> OrderLineItem:
        for item in self.items:
            if item.id == line_item_id:
                return item
        raise LineItemNotFoundError(
            f"Line item #{line_item_id} not found in order {self.order_number}"
        )

    def _find_by_product(self, product_id: int) -> OrderLineItem | None:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None
