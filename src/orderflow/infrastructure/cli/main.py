import click

from orderflow.infrastructure.cli.admin_commands import db_init, events_dispatch
from orderflow.infrastructure.cli.hold_commands import hold_list, hold_place, hold_release
from orderflow.infrastructure.cli.inventory_commands import (
    inventory_add,
    inventory_adjust,
    inventory_show,
)
from orderflow.infrastructure.cli.order_commands import (
    order_cancel,
    order_create,
    order_list,
    order_show,
    order_update,
)


@click.group()
def cli() -> None:
    """orderflow — Order Lifecycle & Inventory Reservation Engine"""


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def inventory() -> None:
    """Manage the stock ledger."""


@cli.group()
def hold() -> None:
    """Manage inventory holds."""


@cli.group()
def events() -> None:
    """Deliver outbound notifications."""


@cli.group()
def db() -> None:
    """Database administration."""


# Register subcommands
order.add_command(order_cancel)
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_show)
order.add_command(order_update)
inventory.add_command(inventory_add)
inventory.add_command(inventory_adjust)
inventory.add_command(inventory_show)
hold.add_command(hold_list)
hold.add_command(hold_place)
hold.add_command(hold_release)
events.add_command(events_dispatch)
db.add_command(db_init)
