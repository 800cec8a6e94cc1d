"""InventoryRecord aggregate — the physical stock counter per product.

Stock is a signed integer.  Selling below zero is an accepted backlog
state, so no floor is enforced here; reservations live in holds.
"""

from __future__ import annotations

from dataclasses import dataclass

from orderflow.domain.exceptions import ValidationError


@dataclass
class InventoryRecord:

    product_id: int | None
    product_name: str
    stock_quantity: int = 0

    @staticmethod
    def create(product_name: str, stock_quantity: int) -> InventoryRecord:
        if not product_name or not product_name.strip():
            raise ValidationError("Product name is required")
        if stock_quantity < 0:
            raise ValidationError("Initial stock quantity cannot be negative")
        return InventoryRecord(
            product_id=None,
            product_name=product_name.strip(),
            stock_quantity=stock_quantity,
        )

    def adjust(self, delta: int) -> int:
        """Apply a signed delta and return the new stock level."""
        self.stock_quantity += delta
        return self.stock_quantity

    @property
    def is_negative(self) -> bool:
        return self.stock_quantity < 0


@dataclass(frozen=True)
class Availability:
    """Derived view: stock minus all active holds for one product."""

    product_id: int
    product_name: str
    stock_quantity: int
    reserved_quantity: int

    @property
    def available_quantity(self) -> int:
        return self.stock_quantity - self.reserved_quantity
