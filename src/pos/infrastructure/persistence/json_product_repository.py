"""JSON-document-backed implementation of ProductRepository."""

from __future__ import annotations

from decimal import Decimal

from pos.domain.model.product import Product, ProductCategory
from pos.domain.model.value_objects import DEFAULT_CURRENCY, Money, TaxRate
from pos.domain.repository.product_repository import ProductRepository


class JsonProductRepository(ProductRepository):

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    # --- ProductRepository interface ------------------------------------------

    def next_id(self) -> int:
        if not self._records:
            return 1
        return max(p["id"] for p in self._records) + 1

    def get_by_id(self, product_id: int) -> Product | None:
        for raw in self._records:
            if raw["id"] == product_id:
                return self._to_domain(raw)
        return None

    def get_by_name(self, name: str) -> Product | None:
        wanted = name.strip().lower()
        for raw in self._records:
            if raw["name"].lower() == wanted:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Product]:
        return [self._to_domain(raw) for raw in self._records]

    def validate(self) -> None:
        """Decode every record; raises on the first malformed one."""
        for raw in self._records:
            self._to_domain(raw)

    def save(self, product: Product) -> None:
        for i, raw in enumerate(self._records):
            if raw["id"] == product.id:
                self._records[i] = self._to_raw(product)
                return
        self._records.append(self._to_raw(product))

    def delete(self, product_id: int) -> None:
        self._records[:] = [raw for raw in self._records if raw["id"] != product_id]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "price": str(product.price.amount),
            "currency": product.price.currency,
            "tax_rate": str(product.tax_rate.percent),
            "requires_deposit": product.requires_deposit,
            "deposit_amount": (
                str(product.deposit_amount.amount) if product.deposit_amount else None
            ),
            "stock_quantity": product.stock_quantity,
            "min_stock_level": product.min_stock_level,
            "category": product.category.value,
            "is_active": product.is_active,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        currency = raw.get("currency", DEFAULT_CURRENCY)
        deposit = raw.get("deposit_amount")
        return Product(
            id=raw["id"],
            name=raw["name"],
            price=Money(Decimal(raw["price"]), currency),
            tax_rate=TaxRate(Decimal(raw.get("tax_rate", "19.00"))),
            requires_deposit=raw.get("requires_deposit", False),
            deposit_amount=Money(Decimal(deposit), currency) if deposit else None,
            stock_quantity=raw.get("stock_quantity", 0),
            min_stock_level=raw.get("min_stock_level", 0),
            category=ProductCategory(raw.get("category", "Other")),
            is_active=raw.get("is_active", True),
        )
