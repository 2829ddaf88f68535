"""CLI commands for the Order lifecycle."""

from __future__ import annotations

from typing import TypeVar

import click

from pos.application.dto import OrderDTO
from pos.application.result import Result
from pos.domain.exceptions import DomainException
from pos.domain.model.order import PaymentMethod
from pos.domain.model.value_objects import Money
from pos.infrastructure.bootstrap import Settings, order_lifecycle_manager

T = TypeVar("T")


def _unwrap(result: Result[T]) -> T:
    try:
        return result.unwrap()
    except DomainException as exc:
        raise click.ClickException(f"{exc} [{exc.kind}]")


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  {dto.order_number}  (status={dto.status})")
    click.echo(f"Cashier:  {dto.cashier_id}")
    click.echo(f"Created:  {dto.created_at}")
    if dto.completed_at:
        click.echo(f"Closed:   {dto.completed_at}")
    if dto.is_test:
        click.echo("** TEST ORDER **")
    click.echo()

    click.echo(
        f"  {'Line':>4} {'Product':<20} {'Qty':>5} {'Price':>12} {'Tax':>7} {'Deposit':>12} {'Total':>12}"
    )
    click.echo(f"  {'-'*78}")
    for item in dto.items:
        click.echo(
            f"  {item.id:>4} {item.product_name:<20} {item.quantity:>5} {item.unit_price:>12} "
            f"{item.tax_rate:>7} {item.deposit or '-':>12} {item.line_total:>12}"
        )
    click.echo(f"  {'-'*78}")
    click.echo(f"  {'Subtotal':<27} {dto.subtotal:>51}")
    click.echo(f"  {'Tax':<27} {dto.tax_amount:>51}")
    click.echo(f"  {'Deposit':<27} {dto.deposit_total:>51}")
    click.echo(f"  {'Discount':<27} {dto.discount_amount:>51}")
    click.echo(f"  {'Grand Total':<27} {dto.grand_total:>51}")
    if dto.payment_method:
        click.echo(f"  {'Paid (' + dto.payment_method + ')':<27} {dto.paid_amount:>51}")
        click.echo(f"  {'Change':<27} {dto.change_amount:>51}")
    if dto.notes:
        click.echo(f"Notes: {dto.notes}")


@click.command("create")
@click.option("--cashier", "cashier_id", type=int, default=None, help="Cashier user ID.")
@click.option("--test", "is_test", is_flag=True, help="Mark as a test order.")
@click.pass_obj
def order_create(settings: Settings, cashier_id: int | None, is_test: bool) -> None:
    """Open a new order."""
    manager = order_lifecycle_manager(settings)
    dto = _unwrap(manager.create_order(cashier_id=cashier_id, is_test=True if is_test else None))
    click.echo(f"Order #{dto.id} created  (number={dto.order_number}, status={dto.status})")


@click.command("add")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
@click.option("--quantity", default=1, show_default=True, type=int, help="Units to add.")
@click.pass_obj
def order_add(settings: Settings, order_id: int, product_id: int, quantity: int) -> None:
    """Add a product to an open order."""
    manager = order_lifecycle_manager(settings)
    _display_order(_unwrap(manager.add_item(order_id, product_id, quantity)))


@click.command("remove")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--line", "line_item_id", required=True, type=int, help="Line item ID.")
@click.pass_obj
def order_remove(settings: Settings, order_id: int, line_item_id: int) -> None:
    """Remove a line from an open order."""
    manager = order_lifecycle_manager(settings)
    _display_order(_unwrap(manager.remove_item(order_id, line_item_id)))


@click.command("qty")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--line", "line_item_id", required=True, type=int, help="Line item ID.")
@click.option("--quantity", required=True, type=int, help="New quantity (0 removes the line).")
@click.pass_obj
def order_qty(settings: Settings, order_id: int, line_item_id: int, quantity: int) -> None:
    """Change the quantity of a line."""
    manager = order_lifecycle_manager(settings)
    _display_order(_unwrap(manager.set_quantity(order_id, line_item_id, quantity)))


@click.command("discount")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--amount", required=True, help="Discount amount (e.g. 2.50).")
@click.option("--reason", default="Manual discount", show_default=True)
@click.pass_obj
def order_discount(settings: Settings, order_id: int, amount: str, reason: str) -> None:
    """Apply an order-level discount."""
    manager = order_lifecycle_manager(settings)
    try:
        money = Money.of(amount)
    except DomainException as exc:
        raise click.BadParameter(str(exc), param_hint="--amount")
    _display_order(_unwrap(manager.apply_discount(order_id, money, reason)))


@click.command("pay")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option(
    "--method",
    type=click.Choice([m.value for m in PaymentMethod], case_sensitive=False),
    default=PaymentMethod.CASH.value,
    show_default=True,
)
@click.option("--amount", required=True, help="Amount handed over (e.g. 10.00).")
@click.pass_obj
def order_pay(settings: Settings, order_id: int, method: str, amount: str) -> None:
    """Take payment for an order (deducts stock)."""
    manager = order_lifecycle_manager(settings)
    try:
        money = Money.of(amount)
    except DomainException as exc:
        raise click.BadParameter(str(exc), param_hint="--amount")
    dto = _unwrap(manager.process_payment(order_id, PaymentMethod.parse(method), money))
    click.echo(f"Order {dto.order_number} paid, total {dto.grand_total}, change {dto.change_amount}")


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
@click.option("--reason", default="Manual cancellation", show_default=True)
@click.pass_obj
def order_cancel(settings: Settings, order_id: int, reason: str) -> None:
    """Cancel an open order."""
    manager = order_lifecycle_manager(settings)
    dto = _unwrap(manager.cancel_order(order_id, reason))
    click.echo(f"Order {dto.order_number} cancelled.")


@click.command("show")
@click.option("--id", "order_id", type=int, default=None, help="Order ID to display.")
@click.option("--number", "order_number", default=None, help="Order number from the receipt.")
@click.pass_obj
def order_show(settings: Settings, order_id: int | None, order_number: str | None) -> None:
    """Show details of an existing order, by ID or by order number."""
    if (order_id is None) == (order_number is None):
        raise click.UsageError("Pass exactly one of --id or --number.")
    manager = order_lifecycle_manager(settings)
    if order_id is not None:
        _display_order(_unwrap(manager.get_order(order_id)))
    else:
        _display_order(_unwrap(manager.get_order_by_number(order_number)))


@click.command("list")
@click.option("--cashier", "cashier_id", type=int, default=None,
              help="Cashier user ID (default: the current user).")
@click.pass_obj
def order_list(settings: Settings, cashier_id: int | None) -> None:
    """List a cashier's orders, newest first."""
    manager = order_lifecycle_manager(settings)
    orders = _unwrap(manager.list_orders(cashier_id))
    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':>5}  {'Number':<14} {'Status':<10} {'Items':>5} {'Total':>14}  {'Created'}")
    click.echo("-" * 72)
    for dto in orders:
        items = sum(item.quantity for item in dto.items)
        click.echo(
            f"{dto.id:>5}  {dto.order_number:<14} {dto.status:<10} {items:>5} "
            f"{dto.grand_total:>14}  {dto.created_at}"
        )
