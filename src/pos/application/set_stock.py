"""Application service: Set Stock use case (manual inventory count)."""

from __future__ import annotations

import logging

from pos.application.dto import ProductDTO, product_to_dto
from pos.application.ports import AuditEventKind, AuditSink, IdentityProvider, record_safely
from pos.domain.exceptions import ProductNotFoundError
from pos.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class SetStockHandler:

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
        quantity: int,
        reason: str = "Manual adjustment",
    ) -> ProductDTO:
        """Overwrite the stock count of a product."""
        with self._uow as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                raise ProductNotFoundError(f"Product with ID '{product_id}' not found")

            old_quantity = product.stock_quantity
            product.set_stock(quantity)
            uow.products.save(product)
            uow.commit()

        logger.info(
            "Stock updated for product '%s': %d -> %d", product.name, old_quantity, quantity
        )
        record_safely(
            self._audit,
            self._identity.current_user_id(),
            AuditEventKind.PRODUCT_MODIFIED,
            f"Stock updated for '{product.name}': {old_quantity} -> {quantity} ({reason})",
        )
        return product_to_dto(product)
