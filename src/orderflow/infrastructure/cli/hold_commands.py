"""CLI commands for manual inventory holds."""

from __future__ import annotations

import click

from orderflow.application.list_holds import ListHoldsHandler
from orderflow.application.place_hold import PlaceHoldHandler
from orderflow.application.release_hold import ReleaseHoldHandler
from orderflow.domain.exceptions import DomainException
from orderflow.infrastructure.bootstrap import unit_of_work


@click.command("place")
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Quantity to reserve.")
@click.option("--reason", default=None, help="Why the stock is held.")
@click.option("--ref-type", "reference_type", default=None, help="Reference type, e.g. QUOTE.")
@click.option("--ref", "reference_value", default=None, help="Reference value.")
def hold_place(
    product_id: int,
    quantity: int,
    reason: str | None,
    reference_type: str | None,
    reference_value: str | None,
) -> None:
    """Reserve stock for a product."""
    handler = PlaceHoldHandler(uow=unit_of_work())

    try:
        hold = handler.handle(
            product_id=product_id,
            quantity=quantity,
            reason=reason,
            reference_type=reference_type,
            reference_value=reference_value,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Hold #{hold.id} placed: {hold.quantity} of product #{hold.product_id}")


@click.command("release")
@click.option("--id", "hold_id", required=True, type=int, help="Hold ID to release.")
def hold_release(hold_id: int) -> None:
    """Release an active hold."""
    handler = ReleaseHoldHandler(uow=unit_of_work())

    try:
        handler.handle(hold_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Hold #{hold_id} released.")


@click.command("list")
@click.option("--product", "product_id", type=int, default=None, help="Filter by product ID.")
@click.option("--ref-type", "reference_type", default=None, help="Filter by reference type.")
@click.option("--ref", "reference_value", default=None, help="Filter by reference value.")
def hold_list(
    product_id: int | None, reference_type: str | None, reference_value: str | None
) -> None:
    """List active holds, newest first."""
    handler = ListHoldsHandler(uow=unit_of_work())
    holds = handler.handle(
        product_id=product_id,
        reference_type=reference_type,
        reference_value=reference_value,
    )

    if not holds:
        click.echo("No active holds.")
        return

    click.echo(f"{'ID':>5} {'Product':>8} {'Qty':>6} {'Reference':<20} Reason")
    click.echo("-" * 60)
    for hold in holds:
        ref = f"{hold.reference_type}:{hold.reference_value}" if hold.reference_type else "-"
        click.echo(f"{hold.id:>5} {hold.product_id:>8} {hold.quantity:>6} {ref:<20} {hold.reason}")
