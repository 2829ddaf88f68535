"""CLI commands for deposit (Pfand) returns."""

from __future__ import annotations

import click

from pos.domain.exceptions import DomainException
from pos.infrastructure.bootstrap import Settings, return_deposit_handler


@click.command("return")
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
@click.option("--quantity", default=1, show_default=True, type=int, help="Containers returned.")
@click.pass_obj
def deposit_return(settings: Settings, product_id: int, quantity: int) -> None:
    """Pay out the deposit for returned containers."""
    try:
        refund = return_deposit_handler(settings).handle(product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Refund {refund.amount} for {refund.quantity}x {refund.product_name}")
