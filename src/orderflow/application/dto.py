"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the outer adapters (CLI, RPC) and the application
layer without exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from orderflow.domain.exceptions import ValidationError
from orderflow.domain.model.hold import InventoryHold
from orderflow.domain.model.inventory import Availability
from orderflow.domain.model.order import Order, OrderLineItem
from orderflow.domain.model.value_objects import Money, Quantity


class _Unset:
    """Marker for a patch field the caller did not supply."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: one requested line (product, quantity, unit price)."""

    product_id: int | None
    quantity: int
    price: Decimal | str | int

    def to_line_item(self) -> OrderLineItem:
        if self.product_id is None:
            raise ValidationError("Every order item needs a product")
        return OrderLineItem(
            product_id=int(self.product_id),
            quantity=Quantity(self.quantity),
            unit_price=Money.of(self.price),
        )


@dataclass(frozen=True)
class OrderPatch:
    """Input: a partial update of an order.

    A field left as ``UNSET`` is not touched.  ``target_delivery_date=None``
    is an explicit request to clear the date.
    """

    target_delivery_date: date | None = UNSET
    items: list[OrderItemSpec] = UNSET
    status: str = UNSET
    payment_status: str = UNSET

    def is_empty(self) -> bool:
        return all(
            value is UNSET
            for value in (
                self.target_delivery_date,
                self.items,
                self.status,
                self.payment_status,
            )
        )


@dataclass(frozen=True)
class OrderLineItemDTO:
    """Output: a single line item as displayed to the user."""

    product_id: int
    quantity: int
    unit_price: str
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    user_id: int
    status: str
    payment_status: str
    target_delivery_date: str | None
    items: list[OrderLineItemDTO]
    total: str
    created_at: str
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class OrderPage:
    orders: list[OrderDTO]
    total: int
    next_cursor: int | None


@dataclass(frozen=True)
class InventoryLineDTO:
    product_id: int
    product_name: str
    stock: int
    reserved: int
    available: int


@dataclass(frozen=True)
class HoldDTO:
    id: int
    product_id: int
    quantity: int
    reason: str
    reference_type: str | None
    reference_value: str | None
    status: str
    released_at: str | None


# --- Mapping --------------------------------------------------------------------


def to_order_dto(order: Order, warnings: list[str] | None = None) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        user_id=order.user_id,
        status=order.status.value,
        payment_status=order.payment_status.value,
        target_delivery_date=(
            order.target_delivery_date.isoformat() if order.target_delivery_date else None
        ),
        items=[
            OrderLineItemDTO(
                product_id=item.product_id,
                quantity=item.quantity.value,
                unit_price=str(item.unit_price),
                line_total=str(item.line_total),
            )
            for item in order.items
        ],
        total=str(order.total),
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        warnings=list(warnings or []),
    )


def to_inventory_line(avail: Availability) -> InventoryLineDTO:
    return InventoryLineDTO(
        product_id=avail.product_id,
        product_name=avail.product_name,
        stock=avail.stock_quantity,
        reserved=avail.reserved_quantity,
        available=avail.available_quantity,
    )


def to_hold_dto(hold: InventoryHold) -> HoldDTO:
    return HoldDTO(
        id=hold.id,  # type: ignore[arg-type]
        product_id=hold.product_id,
        quantity=hold.quantity.value,
        reason=hold.reason,
        reference_type=hold.reference_type,
        reference_value=hold.reference_value,
        status=hold.status.value,
        released_at=hold.released_at.isoformat() if hold.released_at else None,
    )
