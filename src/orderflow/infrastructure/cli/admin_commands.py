"""CLI commands for database setup and outbox delivery."""

from __future__ import annotations

import click

from orderflow.application.dispatch_events import DispatchEventsHandler
from orderflow.domain.exceptions import DomainException
from orderflow.infrastructure.bootstrap import event_publisher, init_database, unit_of_work


@click.command("init")
def db_init() -> None:
    """Create all tables (idempotent)."""
    try:
        init_database()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo("Database initialised.")


@click.command("dispatch")
@click.option("--limit", default=100, type=int, show_default=True, help="Max events per run.")
def events_dispatch(limit: int) -> None:
    """Deliver pending outbox events."""
    handler = DispatchEventsHandler(uow=unit_of_work(), publisher=event_publisher())

    try:
        result = handler.handle(limit=limit)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Dispatched {result.dispatched} event(s), {result.failed} failed.")
