"""Application service: Add Product use case."""

from __future__ import annotations

import logging

from pos.application.dto import ProductDTO, product_to_dto
from pos.application.ports import AuditEventKind, AuditSink, IdentityProvider, record_safely
from pos.domain.exceptions import ValidationError
from pos.domain.model.product import Product, ProductCategory
from pos.domain.model.value_objects import Money, TaxRate
from pos.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class AddProductHandler:

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
        name: str,
        price: str,
        tax_rate: str = "19.00",
        deposit: str | None = None,
        category: str = "Other",
        stock: int = 0,
        min_stock: int = 0,
    ) -> ProductDTO:
        """Add a new product to the catalog."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if min_stock < 0:
            raise ValidationError("Minimum stock level cannot be negative")

        with self._uow as uow:
            if uow.products.get_by_name(name) is not None:
                raise ValidationError(f"Product '{name.strip()}' already exists")

            unit_price = Money.of(price)
            if unit_price.amount <= 0:
                raise ValidationError("Product price must be greater than zero")
            deposit_amount = Money.of(deposit) if deposit is not None else None
            product = Product(
                id=uow.products.next_id(),
                name=name.strip(),
                price=unit_price,
                tax_rate=TaxRate.of(tax_rate),
                requires_deposit=deposit_amount is not None,
                deposit_amount=deposit_amount,
                min_stock_level=min_stock,
                category=ProductCategory.parse(category),
            )
            product.set_stock(stock)
            uow.products.save(product)
            uow.commit()

        logger.info("Product '%s' created as #%s", product.name, product.id)
        record_safely(
            self._audit,
            self._identity.current_user_id(),
            AuditEventKind.PRODUCT_CREATED,
            f"Product '{product.name}' created - Category: {product.category.value}, "
            f"Price: {product.price}",
        )
        return product_to_dto(product)
