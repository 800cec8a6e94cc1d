"""Helpers shared by the order use cases."""

from __future__ import annotations

from orderflow.domain.exceptions import EntityNotFoundError
from orderflow.domain.model.order import OrderLineItem
from orderflow.domain.model.outbox import OutboxEvent
from orderflow.domain.repository.unit_of_work import UnitOfWork
from orderflow.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)

ADMIN_ROLE_ID = 1


def require_products(uow: UnitOfWork, items: list[OrderLineItem]) -> None:
    """Fail if any line references a product with no inventory record."""
    wanted = sorted({item.product_id for item in items})
    known = uow.inventory.get_many(wanted)
    missing = [pid for pid in wanted if pid not in known]
    if missing:
        raise EntityNotFoundError(
            f"Product not found: {', '.join(str(pid) for pid in missing)}"
        )


def queue_invoice_update(uow: UnitOfWork, order_id: int) -> None:
    """Record an invoiceUpdate event if the order has a linked invoice."""
    invoice = uow.invoices.find_for_order(order_id)
    if invoice is not None:
        uow.outbox.append(OutboxEvent.invoice_update(invoice))


def reservation_service(uow: UnitOfWork) -> InventoryReservationService:
    return InventoryReservationService(uow.inventory, uow.holds, uow.outbox)
