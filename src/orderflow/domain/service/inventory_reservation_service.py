"""Domain service: Inventory Reservation.

Coordinates the Hold Store and the Inventory Ledger for one order at the
points where the order lifecycle touches stock:

- placement / item replacement: one ACTIVE hold per line
- shipment: stock decremented per line, holds released
- cancellation before shipment: holds released
- cancellation with goods returned: stock incremented per line

It never commits.  Every write lands in the caller's unit of work, so the
whole set of effects of a transition is applied or rolled back together.
Each stock change appends a ``stockUpdate`` event to the outbox.
"""

from __future__ import annotations

from datetime import datetime, timezone

from orderflow.domain.model.hold import REFERENCE_ORDER, InventoryHold
from orderflow.domain.model.inventory import InventoryRecord
from orderflow.domain.model.order import Order, OrderLineItem
from orderflow.domain.model.outbox import OutboxEvent
from orderflow.domain.repository.hold_repository import HoldRepository
from orderflow.domain.repository.inventory_repository import InventoryRepository
from orderflow.domain.repository.outbox_repository import OutboxRepository
from orderflow.logging_config import get_logger

logger = get_logger("domain.reservation")


class InventoryReservationService:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        hold_repo: HoldRepository,
        outbox_repo: OutboxRepository,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._hold_repo = hold_repo
        self._outbox_repo = outbox_repo

    # --- Holds ----------------------------------------------------------------

    def reserve_for_order(
        self, order_id: int, items: list[OrderLineItem]
    ) -> list[InventoryHold]:
        """Create one ACTIVE hold per line at the line's quantity."""
        holds = [
            self._hold_repo.add(
                InventoryHold.for_order(order_id, item.product_id, item.quantity)
            )
            for item in items
        ]
        logger.info(
            "holds_created",
            extra={
                "order_id": order_id,
                "holds": [
                    {"hold_id": h.id, "product_id": h.product_id, "quantity": h.quantity.value}
                    for h in holds
                ],
            },
        )
        return holds

    def release_for_order(self, order_id: int) -> list[InventoryHold]:
        """Release every ACTIVE hold referencing the order."""
        released = self._hold_repo.release_all_for_reference(
            REFERENCE_ORDER, str(order_id), datetime.now(timezone.utc)
        )
        logger.info(
            "holds_released",
            extra={
                "order_id": order_id,
                "count": len(released),
                "holds": [
                    {"hold_id": h.id, "product_id": h.product_id, "quantity": h.quantity.value}
                    for h in released
                ],
            },
        )
        return released

    # --- Ledger ---------------------------------------------------------------

    def ship_order(self, order: Order) -> list[InventoryRecord]:
        """Turn reserved demand into consumption.

        Decrements stock for every line (going negative is allowed and only
        logged), then releases the order's holds.
        """
        deltas = {pid: -qty for pid, qty in order.quantities.items()}
        updated = self.apply_stock_deltas(deltas, reason="shipment", order_id=order.id)
        released = self.release_for_order(order.id)  # type: ignore[arg-type]
        logger.info(
            "order_stock_consumed",
            extra={
                "order_id": order.id,
                "products": len(updated),
                "holds_released": len(released),
            },
        )
        return updated

    def restock_for_order(self, order: Order) -> list[InventoryRecord]:
        """Return every line's quantity to stock after goods came back."""
        deltas = dict(order.quantities)
        return self.apply_stock_deltas(deltas, reason="return", order_id=order.id)

    def apply_stock_deltas(
        self,
        deltas: dict[int, int],
        reason: str,
        order_id: int | None = None,
    ) -> list[InventoryRecord]:
        """Apply signed deltas as one set and emit a stockUpdate per product."""
        if not deltas:
            return []
        updated = self._inventory_repo.adjust_stock(deltas)

        for record in updated:
            self._outbox_repo.append(
                OutboxEvent.stock_update(record.product_id, record.stock_quantity)  # type: ignore[arg-type]
            )

        logger.info(
            "stock_adjusted",
            extra={
                "order_id": order_id,
                "reason": reason,
                "changes": [
                    {"product_id": pid, "delta": delta} for pid, delta in deltas.items()
                ],
            },
        )

        negative = [r for r in updated if r.is_negative]
        if negative:
            logger.warning(
                "negative_stock",
                extra={
                    "order_id": order_id,
                    "reason": reason,
                    "products": [
                        {"product_id": r.product_id, "stock_quantity": r.stock_quantity}
                        for r in negative
                    ],
                },
            )
        return updated
