"""CLI commands for the Product catalog."""

from __future__ import annotations

import click

from pos.application.update_product import KEEP
from pos.domain.exceptions import DomainException
from pos.domain.model.product import ProductCategory
from pos.infrastructure.bootstrap import (
    Settings,
    add_product_handler,
    delete_product_handler,
    list_products_handler,
    set_stock_handler,
    update_product_handler,
)


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Net unit price (e.g. 3.50).")
@click.option("--tax", "tax_rate", default="19.00", show_default=True, help="Tax rate in percent.")
@click.option("--deposit", default=None, help="Deposit per unit (e.g. 0.25).")
@click.option(
    "--category",
    type=click.Choice([c.value for c in ProductCategory], case_sensitive=False),
    default=ProductCategory.OTHER.value,
    show_default=True,
)
@click.option("--stock", default=0, show_default=True, type=int, help="Initial stock.")
@click.option("--min-stock", default=0, show_default=True, type=int, help="Low stock threshold.")
@click.pass_obj
def product_add(
    settings: Settings,
    name: str,
    price: str,
    tax_rate: str,
    deposit: str | None,
    category: str,
    stock: int,
    min_stock: int,
) -> None:
    """Add a new product to the catalog."""
    handler = add_product_handler(settings)

    try:
        product = handler.handle(
            name=name,
            price=price,
            tax_rate=tax_rate,
            deposit=deposit,
            category=category,
            stock=stock,
            min_stock=min_stock,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' added at {product.price}")


@click.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include deactivated products.")
@click.option("--low-stock", is_flag=True, help="Only products at or below their threshold.")
@click.pass_obj
def product_list(settings: Settings, include_inactive: bool, low_stock: bool) -> None:
    """List products in the catalog."""
    try:
        products = list_products_handler(settings).handle(
            include_inactive=include_inactive, low_stock_only=low_stock
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not products:
        click.echo("No products found.")
        return

    click.echo(
        f"{'ID':<6} {'Name':<20} {'Category':<9} {'Price':>12} {'Tax':>7} {'Deposit':>12} {'Stock':>7}"
    )
    click.echo("-" * 79)
    for p in products:
        flags = ("" if p.is_active else " inactive") + (" LOW" if p.is_low_stock else "")
        click.echo(
            f"{p.id:<6} {p.name:<20} {p.category:<9} {p.price:>12} {p.tax_rate:>7} "
            f"{p.deposit or '-':>12} {p.stock_quantity:>7}{flags}"
        )


@click.command("update")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--price", default=None, help="New price (e.g. 3.90).")
@click.option("--tax", "tax_rate", default=None, help="New tax rate in percent.")
@click.option("--deposit", default=None, help="New deposit per unit.")
@click.option("--no-deposit", is_flag=True, help="Remove the deposit.")
@click.option("--active/--inactive", default=None, help="Activate or deactivate.")
@click.option("--min-stock", default=None, type=int, help="Low stock threshold.")
@click.pass_obj
def product_update(
    settings: Settings,
    product_id: int,
    name: str | None,
    price: str | None,
    tax_rate: str | None,
    deposit: str | None,
    no_deposit: bool,
    active: bool | None,
    min_stock: int | None,
) -> None:
    """Edit a product. Existing orders keep their prices."""
    if deposit is not None and no_deposit:
        raise click.UsageError("--deposit and --no-deposit are mutually exclusive")

    deposit_arg = None if no_deposit else (deposit if deposit is not None else KEEP)
    handler = update_product_handler(settings)

    try:
        product = handler.handle(
            product_id=product_id,
            name=name,
            price=price,
            tax_rate=tax_rate,
            deposit=deposit_arg,
            active=active,
            min_stock=min_stock,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' updated")


@click.command("stock")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Counted stock.")
@click.option("--reason", default="Manual adjustment", show_default=True)
@click.pass_obj
def product_stock(settings: Settings, product_id: int, quantity: int, reason: str) -> None:
    """Set the stock count of a product."""
    try:
        product = set_stock_handler(settings).handle(product_id, quantity, reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock for '{product.name}' set to {product.stock_quantity}")


@click.command("delete")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
@click.pass_obj
def product_delete(settings: Settings, product_id: int) -> None:
    """Delete a product (deactivates it if orders reference it)."""
    try:
        deleted = delete_product_handler(settings).handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if deleted:
        click.echo(f"Product #{product_id} deleted.")
    else:
        click.echo(f"Product #{product_id} deactivated (referenced by orders).")
