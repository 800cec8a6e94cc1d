"""CLI commands for inventory management."""

from __future__ import annotations

import click

from orderflow.application.add_inventory import AddInventoryHandler
from orderflow.application.adjust_stock import AdjustStockHandler
from orderflow.application.dto import InventoryLineDTO
from orderflow.application.show_inventory import ShowInventoryHandler
from orderflow.domain.exceptions import DomainException
from orderflow.infrastructure.bootstrap import unit_of_work


def _display_lines(lines: list[InventoryLineDTO]) -> None:
    click.echo(f"{'ID':>5} {'Product':<20} {'Stock':>8} {'Reserved':>10} {'Available':>10}")
    click.echo("-" * 57)
    for line in lines:
        click.echo(
            f"{line.product_id:>5} {line.product_name:<20} {line.stock:>8} "
            f"{line.reserved:>10} {line.available:>10}"
        )


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--stock", default=0, type=int, show_default=True, help="Initial stock quantity.")
def inventory_add(name: str, stock: int) -> None:
    """Register a product in the stock ledger."""
    handler = AddInventoryHandler(uow=unit_of_work())

    try:
        line = handler.handle(product_name=name, stock_quantity=stock)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{line.product_id} '{line.product_name}' added with stock {line.stock}")


@click.command("adjust")
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
@click.option("--delta", required=True, type=int, help="Signed stock change.")
def inventory_adjust(product_id: int, delta: int) -> None:
    """Apply a signed correction to a product's stock."""
    handler = AdjustStockHandler(uow=unit_of_work())

    try:
        line = handler.handle(product_id=product_id, delta=delta)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock for product #{product_id} is now {line.stock} (available {line.available})")


@click.command("show")
@click.option("--product", "product_id", type=int, default=None, help="Only this product.")
def inventory_show(product_id: int | None) -> None:
    """Show stock, reserved and available quantities."""
    handler = ShowInventoryHandler(uow=unit_of_work())

    try:
        lines = handler.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not lines:
        click.echo("No inventory records found.")
        return

    _display_lines(lines)
