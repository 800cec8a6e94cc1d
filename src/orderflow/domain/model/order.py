"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns its line items and the status
state machine.  Non-terminal statuses are ranked and may only move forward;
``Cancelled`` is a terminal side-exit reachable only through the cancellation
path, which is gated on ownership and goods-return confirmation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum

from orderflow.domain.exceptions import (
    AlreadyCancelledError,
    InvalidTransitionError,
    ItemsLockedError,
    ReturnConfirmationRequiredError,
    UnauthorizedError,
    ValidationError,
)
from orderflow.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    TESTING = "Testing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @property
    def rank(self) -> int | None:
        """Position in the forward-only progression; None for Cancelled."""
        return STATUS_RANK.get(self)

    @staticmethod
    def parse(raw: OrderStatus | str) -> OrderStatus:
        if isinstance(raw, OrderStatus):
            return raw
        for status in OrderStatus:
            if status.value.lower() == str(raw).strip().lower():
                return status
        raise InvalidTransitionError(f"Unknown order status: {raw!r}")


# Cancelled is intentionally absent.
STATUS_RANK: dict[OrderStatus, int] = {
    OrderStatus.PENDING: 0,
    OrderStatus.PROCESSING: 1,
    OrderStatus.TESTING: 2,
    OrderStatus.SHIPPED: 3,
    OrderStatus.DELIVERED: 4,
}

SHIPPED_RANK = STATUS_RANK[OrderStatus.SHIPPED]


class PaymentStatus(Enum):
    PENDING = "Pending"
    PAID = "Paid"
    REFUNDED = "Refunded"

    @staticmethod
    def parse(raw: PaymentStatus | str) -> PaymentStatus:
        if isinstance(raw, PaymentStatus):
            return raw
        for status in PaymentStatus:
            if status.value.lower() == str(raw).strip().lower():
                return status
        raise ValidationError(f"Unknown payment status: {raw!r}")


@dataclass(frozen=True)
class OrderLineItem:
    """One product line, with the unit price snapshotted at order time."""

    product_id: int
    quantity: Quantity
    unit_price: Money

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value

    def key(self) -> tuple:
        return (self.product_id, self.quantity.value, self.unit_price.amount)


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MAX_LINE_ITEMS = 50


def normalize_items(items: list[OrderLineItem]) -> list[tuple]:
    """Sort by product id so two item sets can be compared element-wise."""
    return sorted(item.key() for item in items)


def line_quantities(items: list[OrderLineItem]) -> dict[int, int]:
    """Total quantity per product across all lines."""
    totals: dict[int, int] = {}
    for item in items:
        totals[item.product_id] = totals.get(item.product_id, 0) + item.quantity.value
    return totals


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders — it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    user_id: int
    items: list[OrderLineItem]
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    target_delivery_date: date | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        user_id: int,
        items: list[OrderLineItem],
        target_delivery_date: date | None = None,
    ) -> Order:
        """Create a new Pending order, enforcing all invariants."""
        if user_id is None:
            raise ValidationError("Order owner is required")
        validate_items(items)
        return Order(
            id=None,
            user_id=user_id,
            items=list(items),
            target_delivery_date=target_delivery_date,
        )

    # --- State transitions ----------------------------------------------------

    def check_transition(self, target: OrderStatus | str) -> OrderStatus:
        """Validate a move to *target* without applying it.

        Cancelled is rejected outright: the cancel operation carries the
        goods-return gate that a generic update cannot express.
        """
        new_status = OrderStatus.parse(target)
        if new_status is OrderStatus.CANCELLED:
            raise InvalidTransitionError(
                "Use the cancel operation to cancel an order"
            )
        old_rank, new_rank = self.status.rank, new_status.rank
        if old_rank is None or new_rank is None:
            raise InvalidTransitionError(
                f"Invalid status transition: {self.status.value} -> {new_status.value}"
            )
        if new_rank < old_rank:
            raise InvalidTransitionError(
                f"Status downgrade not allowed: {self.status.value} -> {new_status.value}"
            )
        return new_status

    def change_status(self, target: OrderStatus | str) -> OrderStatus:
        """Apply a validated forward transition and return the previous status."""
        new_status = self.check_transition(target)
        previous = self.status
        self.status = new_status
        return previous

    def ensure_cancellable(
        self, user_id: int, is_admin: bool, goods_returned: bool
    ) -> bool:
        """Run the cancellation gates and report whether stock was consumed.

        Returns True when the order had already been shipped (Shipped or
        Delivered), which decides between releasing holds and restocking.
        """
        if not is_admin and self.user_id != user_id:
            raise UnauthorizedError(
                f"User {user_id} may not cancel order #{self.id}"
            )
        if self.status is OrderStatus.CANCELLED:
            raise AlreadyCancelledError(f"Order #{self.id} is already cancelled")
        if self.status is OrderStatus.DELIVERED and not goods_returned:
            raise ReturnConfirmationRequiredError(
                f"Cannot cancel delivered order #{self.id} "
                "without confirming the goods have been returned"
            )
        return self.was_shipped

    def cancel(self) -> OrderStatus:
        previous = self.status
        self.status = OrderStatus.CANCELLED
        return previous

    # --- Line items -----------------------------------------------------------

    def items_differ(self, incoming: list[OrderLineItem]) -> bool:
        current = normalize_items(self.items)
        proposed = normalize_items(incoming)
        if len(current) != len(proposed):
            return True
        return any(a != b for a, b in zip(current, proposed))

    def ensure_items_mutable(self, incoming: list[OrderLineItem]) -> bool:
        """Return whether *incoming* changes the item set.

        Raises ItemsLockedError when it does and the order is dispatched.
        """
        validate_items(incoming)
        changed = self.items_differ(incoming)
        if changed and self.is_dispatched:
            raise ItemsLockedError(
                f"Items of order #{self.id} cannot be modified after shipment"
            )
        return changed

    def replace_items(self, items: list[OrderLineItem]) -> None:
        self.items = list(items)

    # --- Computed properties --------------------------------------------------

    @property
    def is_dispatched(self) -> bool:
        rank = self.status.rank
        return rank is not None and rank >= SHIPPED_RANK

    @property
    def was_shipped(self) -> bool:
        return self.status in (OrderStatus.SHIPPED, OrderStatus.DELIVERED)

    @property
    def total(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.line_total
        return result

    @property
    def quantities(self) -> dict[int, int]:
        return line_quantities(self.items)


def validate_items(items: list[OrderLineItem]) -> None:
    if not items:
        raise ValidationError("Order must contain at least one item")
    if len(items) > MAX_LINE_ITEMS:
        raise ValidationError(f"Maximum {MAX_LINE_ITEMS} items per order")
    for item in items:
        if item.product_id is None:
            raise ValidationError("Every order item needs a product")
