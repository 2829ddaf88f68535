"""Application service: Delete Product use case.

A product that any order has ever contained is only deactivated, so
historical orders keep a resolvable product id.  Products that were
never sold are removed for good.
"""

from __future__ import annotations

import logging

from pos.application.ports import AuditEventKind, AuditSink, IdentityProvider, record_safely
from pos.domain.exceptions import ProductNotFoundError
from pos.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class DeleteProductHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        audit: AuditSink,
        identity: IdentityProvider,
    ) -> None:
        self._uow = uow
        self._audit = audit
        self._identity = identity

    def handle(self, product_id: int) -> bool:
        """Delete or deactivate a product.

        Returns True if the product was removed, False if it was only
        deactivated because orders reference it.
        """
        with self._uow as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                raise ProductNotFoundError(f"Product with ID '{product_id}' not found")

            if uow.orders.references_product(product_id):
                product.deactivate()
                uow.products.save(product)
                deleted = False
            else:
                uow.products.delete(product_id)
                deleted = True
            uow.commit()

        actor = self._identity.current_user_id()
        if deleted:
            logger.info("Product '%s' deleted", product.name)
            record_safely(
                self._audit, actor, AuditEventKind.PRODUCT_DELETED,
                f"Product '{product.name}' deleted",
            )
        else:
            logger.info("Product '%s' deactivated (has existing orders)", product.name)
            record_safely(
                self._audit, actor, AuditEventKind.PRODUCT_MODIFIED,
                f"Product '{product.name}' deactivated (has existing orders)",
            )
        return deleted
