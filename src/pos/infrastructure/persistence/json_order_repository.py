"""JSON-document-backed implementation of OrderRepository.

Works on the ``orders`` list of a document loaded by JsonUnitOfWork;
nothing touches the disk until the unit of work commits.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pos.domain.model.order import Order, OrderLineItem, OrderStatus, PaymentMethod
from pos.domain.model.value_objects import DEFAULT_CURRENCY, Money, Quantity, TaxRate
from pos.domain.repository.order_repository import OrderRepository


class JsonOrderRepository(OrderRepository):

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> int:
        if not self._records:
            return 1
        return max(o["id"] for o in self._records) + 1

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._records:
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def get_by_order_number(self, order_number: str) -> Order | None:
        for raw in self._records:
            if raw["order_number"] == order_number:
                return self._to_domain(raw)
        return None

    def list_created_between(self, start: datetime, end: datetime) -> list[Order]:
        orders = [self._to_domain(raw) for raw in self._records]
        return sorted(
            (o for o in orders if start <= o.created_at < end),
            key=lambda o: o.created_at,
        )

    def list_by_cashier(self, cashier_id: int) -> list[Order]:
        orders = [self._to_domain(raw) for raw in self._records if raw["cashier_id"] == cashier_id]
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    def validate(self) -> None:
        for raw in self._records:
            self._to_domain(raw)

    def references_product(self, product_id: int) -> bool:
        return any(
            item["product_id"] == product_id
            for raw in self._records
            for item in raw["items"]
        )

    def save(self, order: Order) -> None:
        if order.id is None:
            order.id = self.next_id()

        # Upsert: replace if exists, otherwise append
        for i, raw in enumerate(self._records):
            if raw["id"] == order.id:
                self._records[i] = self._to_raw(order)
                return
        self._records.append(self._to_raw(order))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        totals = order.totals
        return {
            "id": order.id,
            "order_number": order.order_number,
            "cashier_id": order.cashier_id,
            "status": order.status.value,
            "payment_method": order.payment_method.value if order.payment_method else None,
            "currency": order.currency,
            "discount": str(order.discount.amount),
            "paid_amount": str(order.paid_amount.amount),
            "change_amount": str(order.change_amount.amount),
            # Derived; kept for external readers, recomputed on load.
            "subtotal": str(totals.subtotal.amount),
            "tax_amount": str(totals.tax_amount.amount),
            "deposit_total": str(totals.deposit_total.amount),
            "grand_total": str(totals.grand_total.amount),
            "created_at": order.created_at.isoformat(),
            "completed_at": order.completed_at.isoformat() if order.completed_at else None,
            "is_test": order.is_test,
            "notes": order.notes,
            "next_line_id": order.next_line_id,
            "items": [
                {
                    "id": item.id,
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity.value,
                    "unit_price": str(item.unit_price.amount),
                    "tax_rate": str(item.tax_rate.percent),
                    "deposit_amount": (
                        str(item.deposit_amount.amount) if item.deposit_amount else None
                    ),
                    "discount_amount": str(item.discount_amount.amount),
                    "stock_deducted": item.stock_deducted,
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        currency = raw.get("currency", DEFAULT_CURRENCY)

        def money(value: str) -> Money:
            return Money(Decimal(value), currency)

        items = [
            OrderLineItem(
                id=i["id"],
                product_id=i["product_id"],
                product_name=i["product_name"],
                quantity=Quantity(i["quantity"]),
                unit_price=money(i["unit_price"]),
                tax_rate=TaxRate(Decimal(i["tax_rate"])),
                deposit_amount=money(i["deposit_amount"]) if i.get("deposit_amount") else None,
                discount_amount=money(i.get("discount_amount", "0")),
                stock_deducted=i.get("stock_deducted", 0),
            )
            for i in raw["items"]
        ]
        completed_at = raw.get("completed_at")
        return Order(
            id=raw["id"],
            order_number=raw["order_number"],
            cashier_id=raw["cashier_id"],
            items=items,
            status=OrderStatus(raw["status"]),
            payment_method=(
                PaymentMethod(raw["payment_method"]) if raw.get("payment_method") else None
            ),
            discount=money(raw.get("discount", "0")),
            paid_amount=money(raw.get("paid_amount", "0")),
            change_amount=money(raw.get("change_amount", "0")),
            created_at=datetime.fromisoformat(raw["created_at"]),
            completed_at=datetime.fromisoformat(completed_at) if completed_at else None,
            is_test=raw.get("is_test", False),
            notes=raw.get("notes"),
            next_line_id=raw.get("next_line_id", max((i.id for i in items), default=0) + 1),
            currency=currency,
        )
