"""Application service: Update Product use case."""

from __future__ import annotations

import logging

from pos.application.dto import ProductDTO, product_to_dto
from pos.application.ports import AuditEventKind, AuditSink, IdentityProvider, record_safely
from pos.domain.exceptions import ProductNotFoundError, ValidationError
from pos.domain.model.value_objects import Money, TaxRate
from pos.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

# Sentinel so ``deposit=None`` can mean "remove the deposit".
KEEP = object()


class UpdateProductHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        audit: AuditSink,
        identity: IdentityProvider,
    ) -> None:
        self._uow = uow
        self._audit = audit
        self._identity = identity

    def handle(
        self,
        product_id: int,
        name: str | None = None,
        price: str | None = None,
        tax_rate: str | None = None,
        deposit=KEEP,
        active: bool | None = None,
        min_stock: int | None = None,
    ) -> ProductDTO:
        """Edit a product.

        This does NOT affect any existing orders: their line items
        captured price, tax rate and deposit when they were added.
        """
        changes: list[str] = []

        with self._uow as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                raise ProductNotFoundError(f"Product with ID '{product_id}' not found")

            if name is not None and name.strip() != product.name:
                other = uow.products.get_by_name(name)
                if other is not None and other.id != product.id:
                    raise ValidationError(f"Product '{name.strip()}' already exists")
                changes.append(f"Name: '{product.name}' -> '{name.strip()}'")
                product.rename(name)

            if price is not None:
                new_price = Money.of(price)
                if new_price != product.price:
                    changes.append(f"Price: {product.price} -> {new_price}")
                    product.update_price(new_price)

            if tax_rate is not None:
                new_rate = TaxRate.of(tax_rate)
                if new_rate != product.tax_rate:
                    changes.append(f"TaxRate: {product.tax_rate} -> {new_rate}")
                    product.update_tax_rate(new_rate)

            if deposit is not KEEP:
                new_deposit = Money.of(deposit) if deposit is not None else None
                if new_deposit != product.deposit_amount:
                    changes.append(f"Deposit: {product.deposit_amount} -> {new_deposit}")
                    product.set_deposit(new_deposit)

            if active is not None and active != product.is_active:
                changes.append(f"IsActive: {product.is_active} -> {active}")
                if active:
                    product.activate()
                else:
                    product.deactivate()

            if min_stock is not None and min_stock != product.min_stock_level:
                if min_stock < 0:
                    raise ValidationError("Minimum stock level cannot be negative")
                changes.append(f"MinStockLevel: {product.min_stock_level} -> {min_stock}")
                product.min_stock_level = min_stock

            uow.products.save(product)
            uow.commit()

        if changes:
            logger.info("Product '%s' updated: %s", product.name, ", ".join(changes))
            record_safely(
                self._audit,
                self._identity.current_user_id(),
                AuditEventKind.PRODUCT_MODIFIED,
                f"Product '{product.name}' updated: {', '.join(changes)}",
            )
        return product_to_dto(product)
