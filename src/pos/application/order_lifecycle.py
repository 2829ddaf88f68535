"""Application service: Order Lifecycle Manager.

The only place that couples Order aggregate mutations with product stock
changes.  Every public operation is one unit of work: it loads what it
needs, mutates, and commits once.  If anything fails before the commit,
the unit of work discards all staged changes and the caller receives a
failed ``Result``; retrying is always safe.

Domain errors never cross this boundary as exceptions.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from pos.application.dto import OrderDTO, order_to_dto
from pos.application.ports import (
    AuditEventKind,
    AuditSink,
    IdentityProvider,
    record_safely,
)
from pos.application.result import Result
from pos.domain.exceptions import (
    DomainException,
    OrderNotFoundError,
    PersistenceError,
    ProductNotFoundError,
)
from pos.domain.model.order import Order, PaymentMethod
from pos.domain.model.product import Product
from pos.domain.model.value_objects import Money
from pos.domain.repository.unit_of_work import UnitOfWork
from pos.domain.service.order_number import OrderNumberGenerator

logger = logging.getLogger(__name__)

# (actor id, event kind, message) recorded once the unit of work committed
_AuditEntry = tuple[int, AuditEventKind, str]


class OrderLifecycleManager:

    def __init__(
        self,
        uow: UnitOfWork,
        audit: AuditSink,
        identity: IdentityProvider,
        order_numbers: OrderNumberGenerator | None = None,
        test_mode: bool = False,
    ) -> None:
        self._uow = uow
        self._audit = audit
        self._identity = identity
        self._order_numbers = order_numbers or OrderNumberGenerator()
        self._test_mode = test_mode

    # --- Commands -------------------------------------------------------------

    def create_order(
        self,
        cashier_id: int | None = None,
        is_test: bool | None = None,
    ) -> Result[OrderDTO]:
        """Open a new order with a freshly allocated order number."""
        def work(uow: UnitOfWork) -> tuple[Order, _AuditEntry]:
            cashier = cashier_id if cashier_id is not None else self._identity.current_user_id()
            number = self._order_numbers.allocate(uow.orders)
            order = Order.open(
                order_number=number,
                cashier_id=cashier,
                is_test=self._test_mode if is_test is None else is_test,
                now=self._order_numbers.now(),
            )
            uow.orders.save(order)
            return order, (cashier, AuditEventKind.ORDER_CREATED, f"Order {number} created")

        return self._execute("create order", work)

    def add_item(self, order_id: int, product_id: int, quantity: int = 1) -> Result[OrderDTO]:
        def work(uow: UnitOfWork) -> tuple[Order, _AuditEntry]:
            order = self._load_order(uow, order_id)
            product = self._load_product(uow, product_id)
            order.add_line_item(product, quantity)
            uow.orders.save(order)
            return order, self._entry(
                AuditEventKind.ORDER_ITEM_ADDED,
                f"Added {quantity}x {product.name} to order {order.order_number}",
            )

        return self._execute(f"add product {product_id} to order {order_id}", work)

    def remove_item(self, order_id: int, line_item_id: int) -> Result[OrderDTO]:
        def work(uow: UnitOfWork) -> tuple[Order, _AuditEntry]:
            order = self._load_order(uow, order_id)
            line = order.remove_line_item(line_item_id)
            uow.orders.save(order)
            return order, self._entry(
                AuditEventKind.ORDER_ITEM_REMOVED,
                f"Removed {line.product_name} from order {order.order_number}",
            )

        return self._execute(f"remove line {line_item_id} from order {order_id}", work)

    def set_quantity(self, order_id: int, line_item_id: int, quantity: int) -> Result[OrderDTO]:
        """Change a line's quantity; zero or less removes the line."""
        def work(uow: UnitOfWork) -> tuple[Order, _AuditEntry]:
            order = self._load_order(uow, order_id)
            before = {item.id: (item.product_name, item.quantity.value) for item in order.items}
            # The order checks its status before looking up the line.
            updated = order.set_line_item_quantity(line_item_id, quantity)
            name, old_quantity = before[line_item_id]
            uow.orders.save(order)
            if updated is None:
                return order, self._entry(
                    AuditEventKind.ORDER_ITEM_REMOVED,
                    f"Removed {name} from order {order.order_number}",
                )
            return order, self._entry(
                AuditEventKind.ORDER_MODIFIED,
                f"Updated quantity for {name} in order "
                f"{order.order_number}: {old_quantity} -> {quantity}",
            )

        return self._execute(f"set quantity of line {line_item_id} in order {order_id}", work)

    def apply_discount(
        self,
        order_id: int,
        amount: Money,
        reason: str = "Manual discount",
    ) -> Result[OrderDTO]:
        def work(uow: UnitOfWork) -> tuple[Order, _AuditEntry]:
            order = self._load_order(uow, order_id)
            order.apply_discount(amount)
            uow.orders.save(order)
            return order, self._entry(
                AuditEventKind.ORDER_MODIFIED,
                f"Applied discount of {amount} to order {order.order_number} ({reason})",
            )

        return self._execute(f"apply discount to order {order_id}", work)

    def process_payment(
        self,
        order_id: int,
        method: PaymentMethod,
        paid_amount: Money,
    ) -> Result[OrderDTO]:
        """Mark the order paid and take its quantities out of stock.

        Stock is informational: a sale is never refused because of the
        count, and a resulting negative stock is kept as is.
        """
        def work(uow: UnitOfWork) -> tuple[Order, _AuditEntry]:
            order = self._load_order(uow, order_id)
            order.mark_paid(method, paid_amount, now=self._order_numbers.now())

            for line in order.items:
                product = uow.products.get_by_id(line.product_id)
                if product is None:
                    logger.warning(
                        "Product %s on order %s no longer exists; stock not adjusted",
                        line.product_id, order.order_number,
                    )
                    continue
                product.adjust_stock(-line.quantity.value)
                line.stock_deducted = line.quantity.value
                uow.products.save(product)
                if product.is_oversold:
                    logger.warning(
                        "Product '%s' oversold, stock now %d", product.name, product.stock_quantity
                    )

            uow.orders.save(order)
            totals = order.totals
            return order, self._entry(
                AuditEventKind.ORDER_PAID,
                f"Order {order.order_number} paid with {method.value} - "
                f"Total: {totals.grand_total}, Paid: {order.paid_amount}, "
                f"Change: {order.change_amount}",
            )

        return self._execute(f"process payment for order {order_id}", work)

    def cancel_order(self, order_id: int, reason: str = "Manual cancellation") -> Result[OrderDTO]:
        """Cancel an open order.

        Puts back exactly the quantities that were taken out of stock for
        this order.  An order that was never paid had nothing deducted, so
        its cancellation leaves stock untouched.
        """
        def work(uow: UnitOfWork) -> tuple[Order, _AuditEntry]:
            order = self._load_order(uow, order_id)
            order.mark_cancelled(reason, now=self._order_numbers.now())

            for line in order.items:
                if line.stock_deducted <= 0:
                    continue
                product = uow.products.get_by_id(line.product_id)
                if product is None:
                    logger.warning(
                        "Product %s on order %s no longer exists; stock not restored",
                        line.product_id, order.order_number,
                    )
                    continue
                product.adjust_stock(line.stock_deducted)
                line.stock_deducted = 0
                uow.products.save(product)

            uow.orders.save(order)
            return order, self._entry(
                AuditEventKind.ORDER_CANCELLED,
                f"Order {order.order_number} cancelled ({reason})",
            )

        return self._execute(f"cancel order {order_id}", work)

    # --- Queries --------------------------------------------------------------

    def get_order(self, order_id: int) -> Result[OrderDTO]:
        try:
            with self._uow as uow:
                order = self._load_order(uow, order_id)
                return Result.success(order_to_dto(order))
        except DomainException as exc:
            return Result.failure(exc)

    def get_order_by_number(self, order_number: str) -> Result[OrderDTO]:
        """Look an order up by the number printed on the receipt."""
        try:
            with self._uow as uow:
                order = uow.orders.get_by_order_number(order_number)
                if order is None:
                    raise OrderNotFoundError(f"Order {order_number} not found")
                return Result.success(order_to_dto(order))
        except DomainException as exc:
            return Result.failure(exc)

    def list_orders(self, cashier_id: int | None = None) -> Result[list[OrderDTO]]:
        """Orders opened by *cashier_id* (default: the current user), newest first."""
        cashier = cashier_id if cashier_id is not None else self._identity.current_user_id()
        try:
            with self._uow as uow:
                orders = uow.orders.list_by_cashier(cashier)
                return Result.success([order_to_dto(order) for order in orders])
        except DomainException as exc:
            return Result.failure(exc)

    # --- Internal helpers -----------------------------------------------------

    def _execute(
        self,
        action: str,
        work: Callable[[UnitOfWork], tuple[Order, _AuditEntry]],
    ) -> Result[OrderDTO]:
        """Run *work* in a unit of work, commit, then audit.

        The DTO is built before leaving the unit of work so the returned
        snapshot is exactly what was committed.
        """
        try:
            with self._uow as uow:
                order, entry = work(uow)
                uow.commit()
                dto = order_to_dto(order)
        except PersistenceError as exc:
            logger.exception("Failed to %s: storage error", action)
            return Result.failure(exc)
        except DomainException as exc:
            logger.warning("Failed to %s: %s", action, exc)
            return Result.failure(exc)

        logger.info("%s", entry[2])
        record_safely(self._audit, *entry)
        return Result.success(dto)

    def _entry(self, kind: AuditEventKind, message: str) -> _AuditEntry:
        return (self._identity.current_user_id(), kind, message)

    @staticmethod
    def _load_order(uow: UnitOfWork, order_id: int) -> Order:
        order = uow.orders.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(f"Order #{order_id} not found")
        return order

    @staticmethod
    def _load_product(uow: UnitOfWork, product_id: int) -> Product:
        product = uow.products.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(f"Product #{product_id} not found")
        return product
