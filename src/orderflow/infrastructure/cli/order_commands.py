"""CLI commands for the Order aggregate."""

from __future__ import annotations

from datetime import date, datetime

import click

from orderflow.application.cancel_order import CancelOrderHandler
from orderflow.application.create_order import CreateOrderHandler
from orderflow.application.dto import UNSET, OrderDTO, OrderItemSpec, OrderPatch
from orderflow.application.list_orders import DEFAULT_PAGE_SIZE, ListOrdersHandler
from orderflow.application.show_order import ShowOrderHandler
from orderflow.application.update_order import UpdateOrderHandler
from orderflow.domain.exceptions import DomainException
from orderflow.infrastructure.bootstrap import admin_role_id, unit_of_work


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse '1:3@15.00,2:5@25' into OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for part in raw.split(","):
        part = part.strip()
        if ":" not in part or "@" not in part:
            raise click.BadParameter(
                f"Invalid item format '{part}'. Expected 'ProductId:Qty@Price'."
            )
        product, rest = part.split(":", 1)
        qty_str, price = rest.split("@", 1)
        try:
            specs.append(
                OrderItemSpec(
                    product_id=int(product),
                    quantity=int(qty_str),
                    price=price.strip(),
                )
            )
        except ValueError:
            raise click.BadParameter(f"Invalid product id or quantity in '{part}'.")
    return specs


def _parse_date(raw: str) -> date:
    try:
        return datetime.strptime(raw, "%Y-%m-%d").date()
    except ValueError:
        raise click.BadParameter(f"Invalid date '{raw}'. Expected YYYY-MM-DD.")


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status}, payment={dto.payment_status})")
    click.echo(f"User:     {dto.user_id}")
    click.echo(f"Created:  {dto.created_at}")
    if dto.target_delivery_date:
        click.echo(f"Delivery: {dto.target_delivery_date}")
    click.echo()
    click.echo(f"  {'Product':<10} {'Qty':>5} {'Price':>14} {'Total':>14}")
    click.echo(f"  {'-'*46}")
    for item in dto.items:
        click.echo(
            f"  {item.product_id:<10} {item.quantity:>5} {item.unit_price:>14} {item.line_total:>14}"
        )
    click.echo(f"  {'-'*46}")
    click.echo(f"  {'Order Total':<17} {dto.total:>29}")
    for warning in dto.warnings:
        click.echo(f"Warning: {warning}")


@click.command("create")
@click.option("--user", "user_id", required=True, type=int, help="Acting user ID.")
@click.option("--role", "role_id", type=int, default=None, help="Acting user's role ID.")
@click.option("--items", required=True, help="Items as 'ProductId:Qty@Price,...'.")
@click.option("--target-date", default=None, help="Target delivery date (YYYY-MM-DD).")
def order_create(
    user_id: int, role_id: int | None, items: str, target_date: str | None
) -> None:
    """Create a new order (places holds for every line)."""
    specs = _parse_items(items)
    target = _parse_date(target_date) if target_date else None

    handler = CreateOrderHandler(uow=unit_of_work())

    try:
        dto = handler.handle(
            user_id=user_id,
            role_id=role_id,
            item_specs=specs,
            target_delivery_date=target,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} created  (status={dto.status})")
    _display_order(dto)


@click.command("update")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to update.")
@click.option("--status", default=None, help="New status.")
@click.option("--payment-status", default=None, help="New payment status.")
@click.option("--items", default=None, help="Replacement items as 'ProductId:Qty@Price,...'.")
@click.option("--target-date", default=None, help="New target delivery date (YYYY-MM-DD).")
@click.option("--clear-target-date", is_flag=True, default=False, help="Remove the target delivery date.")
def order_update(
    order_id: int,
    status: str | None,
    payment_status: str | None,
    items: str | None,
    target_date: str | None,
    clear_target_date: bool,
) -> None:
    """Update an order's status, payment status, items or delivery date."""
    if target_date and clear_target_date:
        raise click.UsageError("--target-date and --clear-target-date are exclusive")

    if clear_target_date:
        target = None
    elif target_date:
        target = _parse_date(target_date)
    else:
        target = UNSET

    patch = OrderPatch(
        target_delivery_date=target,
        items=_parse_items(items) if items else UNSET,
        status=status if status is not None else UNSET,
        payment_status=payment_status if payment_status is not None else UNSET,
    )

    handler = UpdateOrderHandler(uow=unit_of_work())

    try:
        dto = handler.handle(order_id, patch)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} updated.")
    _display_order(dto)


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
@click.option("--user", "user_id", required=True, type=int, help="Acting user ID.")
@click.option("--role", "role_id", type=int, default=None, help="Acting user's role ID.")
@click.option("--goods-returned", is_flag=True, default=False, help="Goods came back to the warehouse.")
def order_cancel(
    order_id: int, user_id: int, role_id: int | None, goods_returned: bool
) -> None:
    """Cancel an order (releases holds, or restocks returned goods)."""
    handler = CancelOrderHandler(uow=unit_of_work(), admin_role_id=admin_role_id())

    try:
        handler.handle(
            order_id,
            user_id=user_id,
            role_id=role_id,
            goods_returned=goods_returned,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} cancelled.")


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(uow=unit_of_work())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--user", "user_id", required=True, type=int, help="Acting user ID.")
@click.option("--role", "role_id", type=int, default=None, help="Acting user's role ID.")
@click.option("--owner", "owner_id", type=int, default=None, help="Filter by owner (admins only).")
@click.option("--cursor", type=int, default=None, help="Continue after this order ID.")
@click.option("--limit", type=int, default=DEFAULT_PAGE_SIZE, show_default=True, help="Page size.")
def order_list(
    user_id: int,
    role_id: int | None,
    owner_id: int | None,
    cursor: int | None,
    limit: int,
) -> None:
    """List orders, newest first."""
    handler = ListOrdersHandler(uow=unit_of_work(), admin_role_id=admin_role_id())

    try:
        page = handler.handle(
            user_id=user_id,
            role_id=role_id,
            cursor=cursor,
            limit=limit,
            owner_id=owner_id,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not page.orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':>6} {'User':>6} {'Status':<12} {'Payment':<10} {'Total':>14}")
    click.echo("-" * 52)
    for dto in page.orders:
        click.echo(
            f"{dto.id:>6} {dto.user_id:>6} {dto.status:<12} {dto.payment_status:<10} {dto.total:>14}"
        )
    click.echo(f"{len(page.orders)} of {page.total} orders")
    if page.next_cursor is not None:
        click.echo(f"Next cursor: {page.next_cursor}")
