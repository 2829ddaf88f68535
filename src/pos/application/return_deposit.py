"""Application service: Return Deposit use case.

Pays out the deposit for containers brought back to the till and keeps a
record so reports can show the outstanding deposit balance.
"""

from __future__ import annotations

import logging

from pos.application.ports import AuditEventKind, AuditSink, IdentityProvider, record_safely
from pos.domain.exceptions import ProductNotFoundError
from pos.domain.model.deposit_return import DepositReturn
from pos.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class ReturnDepositHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        audit: AuditSink,
        identity: IdentityProvider,
    ) -> None:
        self._uow = uow
        self._audit = audit
        self._identity = identity

    def handle(self, product_id: int, quantity: int) -> DepositReturn:
        actor = self._identity.current_user_id()

        with self._uow as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                raise ProductNotFoundError(f"Product with ID '{product_id}' not found")

            refund = DepositReturn.for_product(product, quantity, actor_id=actor)
            uow.deposit_returns.add(refund)
            uow.commit()

        logger.info(
            "Deposit returned: %dx %s = %s", refund.quantity.value, product.name, refund.amount
        )
        record_safely(
            self._audit,
            actor,
            AuditEventKind.DEPOSIT_RETURNED,
            f"Deposit returned: {refund.quantity}x {product.name} = {refund.amount}",
        )
        return refund
