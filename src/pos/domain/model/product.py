"""Product aggregate.

Products live independently of orders. They have their own lifecycle:
prices change, products are added, deactivated and removed from the
catalog.  Line items only ever hold a product's id.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pos.domain.exceptions import ValidationError
from pos.domain.model.value_objects import Money, TaxRate

DEFAULT_TAX_RATE = TaxRate.of("19.00")


class ProductCategory(Enum):
    DRINKS = "Drinks"
    FOOD = "Food"
    DEPOSIT = "Deposit"
    OTHER = "Other"

    @staticmethod
    def parse(raw: str) -> ProductCategory:
        for category in ProductCategory:
            if category.value.lower() == raw.strip().lower():
                return category
        raise ValidationError(f"Unknown product category: {raw!r}")


@dataclass
class Product:
    """A product in the catalog.

    Invariants:
    - a deposit amount exists if and only if ``requires_deposit`` is set
    - ``stock_quantity`` is informational; sales may drive it below zero
    """

    id: int
    name: str
    price: Money
    tax_rate: TaxRate = DEFAULT_TAX_RATE
    requires_deposit: bool = False
    deposit_amount: Money | None = None
    stock_quantity: int = 0
    min_stock_level: int = 0
    category: ProductCategory = ProductCategory.OTHER
    is_active: bool = True

    def __post_init__(self) -> None:
        self._check_deposit(self.requires_deposit, self.deposit_amount)

    # --- Catalog edits --------------------------------------------------------

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        This does NOT affect any existing orders because line items
        capture a price snapshot when they are added.
        """
        if new_price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        self.price = new_price

    def update_tax_rate(self, new_rate: TaxRate) -> None:
        self.tax_rate = new_rate

    def set_deposit(self, amount: Money | None) -> None:
        """Attach a per-unit deposit, or remove it with ``None``."""
        requires = amount is not None
        self._check_deposit(requires, amount)
        self.requires_deposit = requires
        self.deposit_amount = amount

    def rename(self, name: str) -> None:
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        self.name = name.strip()

    def deactivate(self) -> None:
        self.is_active = False

    def activate(self) -> None:
        self.is_active = True

    # --- Stock ----------------------------------------------------------------

    def set_stock(self, quantity: int) -> None:
        """Set an absolute stock count from a manual inventory check."""
        if quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")
        self.stock_quantity = quantity

    def adjust_stock(self, delta: int) -> None:
        """Apply a sale (negative) or restock (positive) movement.

        No lower bound: the till never refuses a sale because of the count.
        """
        self.stock_quantity += delta

    @property
    def deposit_per_unit(self) -> Money | None:
        return self.deposit_amount if self.requires_deposit else None

    @property
    def is_low_stock(self) -> bool:
        return self.min_stock_level > 0 and self.stock_quantity <= self.min_stock_level

    @property
    def is_oversold(self) -> bool:
        return self.stock_quantity < 0

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _check_deposit(requires_deposit: bool, amount: Money | None) -> None:
        if requires_deposit and amount is None:
            raise ValidationError("A product that requires a deposit needs a deposit amount")
        if not requires_deposit and amount is not None:
            raise ValidationError("Deposit amount is only allowed when a deposit is required")
        if amount is not None and amount.is_zero:
            raise ValidationError("Deposit amount must be greater than zero")
