"""Read models handed from the application layer to the CLI.

DTOs are immutable snapshots handed to the CLI (or any other front end)
after each operation, so no caller ever holds a live aggregate.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from pos.domain.model.order import Order
from pos.domain.model.product import Product
from pos.domain.model.value_objects import Money

_TIME_FORMAT = "%Y-%m-%d %H:%M UTC"


@dataclass(frozen=True)
class OrderLineItemDTO:
    """Output: a single line item as displayed to the user."""

    id: int
    product_id: int
    product_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "3.50 EUR"
    tax_rate: str  # formatted, e.g. "19.00%"
    deposit: str | None
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    order_number: str
    cashier_id: int
    status: str
    payment_method: str | None
    items: list[OrderLineItemDTO]
    subtotal: str
    tax_amount: str
    deposit_total: str
    discount_amount: str
    grand_total: str
    paid_amount: str
    change_amount: str
    created_at: str
    completed_at: str | None
    is_test: bool
    notes: str | None


@dataclass(frozen=True)
class ProductDTO:
    id: int
    name: str
    price: str
    tax_rate: str
    deposit: str | None
    category: str
    stock_quantity: int
    min_stock_level: int
    is_active: bool
    is_low_stock: bool


def order_to_dto(order: Order) -> OrderDTO:
    totals = order.totals
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        order_number=order.order_number,
        cashier_id=order.cashier_id,
        status=order.status.value,
        payment_method=order.payment_method.value if order.payment_method else None,
        items=[
            OrderLineItemDTO(
                id=item.id,
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity.value,
                unit_price=str(item.unit_price),
                tax_rate=str(item.tax_rate),
                deposit=str(item.deposit_amount) if item.deposit_amount else None,
                line_total=str(Money(max(item.line_total, Decimal("0")), order.currency)),
            )
            for item in order.items
        ],
        subtotal=str(totals.subtotal),
        tax_amount=str(totals.tax_amount),
        deposit_total=str(totals.deposit_total),
        discount_amount=str(totals.discount_amount),
        grand_total=str(totals.grand_total),
        paid_amount=str(order.paid_amount),
        change_amount=str(order.change_amount),
        created_at=order.created_at.strftime(_TIME_FORMAT),
        completed_at=order.completed_at.strftime(_TIME_FORMAT) if order.completed_at else None,
        is_test=order.is_test,
        notes=order.notes,
    )


def product_to_dto(product: Product) -> ProductDTO:
    return ProductDTO(
        id=product.id,
        name=product.name,
        price=str(product.price),
        tax_rate=str(product.tax_rate),
        deposit=str(product.deposit_per_unit) if product.deposit_per_unit else None,
        category=product.category.value,
        stock_quantity=product.stock_quantity,
        min_stock_level=product.min_stock_level,
        is_active=product.is_active,
        is_low_stock=product.is_low_stock,
    )
