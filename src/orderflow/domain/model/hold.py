"""InventoryHold — a reservation of stock against a reference.

A hold marks demand without touching physical stock.  Its quantity is fixed
at creation and it is released as a whole, never partially.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from orderflow.domain.exceptions import HoldAlreadyReleasedError
from orderflow.domain.model.value_objects import Quantity

REFERENCE_ORDER = "ORDER"
ORDER_HOLD_REASON = "Order fulfillment"


class HoldStatus(Enum):
    ACTIVE = "ACTIVE"
    RELEASED = "RELEASED"


@dataclass
class InventoryHold:

    id: int | None
    product_id: int
    quantity: Quantity
    reason: str
    reference_type: str | None = None
    reference_value: str | None = None
    status: HoldStatus = HoldStatus.ACTIVE
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    released_at: datetime | None = None

    @staticmethod
    def for_order(order_id: int, product_id: int, quantity: Quantity) -> InventoryHold:
        return InventoryHold(
            id=None,
            product_id=product_id,
            quantity=quantity,
            reason=ORDER_HOLD_REASON,
            reference_type=REFERENCE_ORDER,
            reference_value=str(order_id),
        )

    @property
    def is_active(self) -> bool:
        return self.status is HoldStatus.ACTIVE

    def release(self, at: datetime | None = None) -> None:
        if not self.is_active:
            raise HoldAlreadyReleasedError(f"Hold #{self.id} is already released")
        self.status = HoldStatus.RELEASED
        self.released_at = at or datetime.now(timezone.utc)


def held_quantities(holds: list[InventoryHold]) -> dict[int, int]:
    """Total held quantity per product."""
    totals: dict[int, int] = {}
    for hold in holds:
        totals[hold.product_id] = totals.get(hold.product_id, 0) + hold.quantity.value
    return totals
