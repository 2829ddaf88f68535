import logging

import click

from pos.domain.exceptions import DomainException
from pos.infrastructure.bootstrap import load_settings
from pos.infrastructure.cli.deposit_commands import deposit_return
from pos.infrastructure.cli.order_commands import (
    order_add,
    order_cancel,
    order_create,
    order_discount,
    order_list,
    order_pay,
    order_qty,
    order_remove,
    order_show,
)
from pos.infrastructure.cli.product_commands import (
    product_add,
    product_delete,
    product_list,
    product_stock,
    product_update,
)
from pos.infrastructure.cli.report_commands import report_sales

_LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO}


@click.group()
@click.option("-v", "--verbose", count=True, help="-v for info, -vv for debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: int) -> None:
    """POS till: orders, catalog, deposits and sales reports"""
    logging.basicConfig(
        level=_LOG_LEVELS.get(verbose, logging.DEBUG),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )
    try:
        ctx.obj = load_settings()
    except DomainException as exc:
        raise click.ClickException(str(exc))


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def deposit() -> None:
    """Handle deposit returns."""


@cli.group()
def report() -> None:
    """Sales reports."""


# Register subcommands
order.add_command(order_create)
order.add_command(order_add)
order.add_command(order_remove)
order.add_command(order_qty)
order.add_command(order_discount)
order.add_command(order_pay)
order.add_command(order_cancel)
order.add_command(order_show)
order.add_command(order_list)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_update)
product.add_command(product_stock)
product.add_command(product_delete)
deposit.add_command(deposit_return)
report.add_command(report_sales)
