"""CLI commands for sales reporting."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import click

from pos.domain.exceptions import DomainException
from pos.infrastructure.bootstrap import Settings, sales_report_handler


def _day_start(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0, tzinfo=timezone.utc)


@click.command("sales")
@click.option("--from", "start", type=click.DateTime(["%Y-%m-%d"]), default=None,
              help="First day (UTC), default today.")
@click.option("--to", "end", type=click.DateTime(["%Y-%m-%d"]), default=None,
              help="Last day (UTC, inclusive), default the first day.")
@click.option("--include-test", is_flag=True, help="Count test orders too.")
@click.pass_obj
def report_sales(
    settings: Settings,
    start: datetime | None,
    end: datetime | None,
    include_test: bool,
) -> None:
    """Revenue and order counts per day."""
    first = _day_start(start or datetime.now(timezone.utc))
    last = _day_start(end) if end else first

    try:
        summary = sales_report_handler(settings).handle(
            first, last + timedelta(days=1), include_test=include_test
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Sales {first:%Y-%m-%d} .. {last:%Y-%m-%d}")
    click.echo(f"  Orders:              {summary.order_count}")
    click.echo(f"  Paid / cancelled:    {summary.paid_order_count} / {summary.cancelled_order_count}")
    click.echo(f"  Revenue:             {summary.revenue}")
    click.echo(f"  Tax:                 {summary.tax_total}")
    click.echo(f"  Deposit collected:   {summary.deposit_total}")
    click.echo(f"  Deposit returned:    {summary.deposit_returned}")
    click.echo(f"  Deposit balance:     {summary.deposit_balance}")
    click.echo(f"  Avg order value:     {summary.average_order_value}")
    click.echo(f"  Avg daily revenue:   {summary.average_daily_revenue}")

    if summary.daily:
        click.echo()
        click.echo(f"  {'Day':<12} {'Orders':>7} {'Revenue':>12}")
        click.echo(f"  {'-'*33}")
        for day in summary.daily:
            click.echo(f"  {day.day.isoformat():<12} {day.order_count:>7} {day.revenue:>12}")

    if summary.products:
        click.echo()
        click.echo(f"  {'Product':<20} {'Sold':>6} {'Net':>12} {'Tax':>10}")
        click.echo(f"  {'-'*51}")
        for stats in summary.products:
            click.echo(
                f"  {stats.product_name:<20} {stats.quantity_sold:>6} "
                f"{stats.revenue:>12} {stats.tax_amount:>10}"
            )
