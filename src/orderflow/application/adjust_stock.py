"""Application service: Adjust Stock use case.

Applies a signed delta to one product's stock, e.g. goods received or a
manual correction.  Stock has no floor.
"""

from __future__ import annotations

from orderflow.application.common import reservation_service
from orderflow.application.dto import InventoryLineDTO, to_inventory_line
from orderflow.domain.exceptions import EntityNotFoundError, ValidationError
from orderflow.domain.repository.unit_of_work import UnitOfWork
from orderflow.domain.service.availability import AvailabilityCalculator


class AdjustStockHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: int, delta: int) -> InventoryLineDTO:
        if delta == 0:
            raise ValidationError("Stock adjustment must be non-zero")

        with self._uow as uow:
            if uow.inventory.get_by_product_id(product_id) is None:
                raise EntityNotFoundError(f"Product #{product_id} not found in inventory")

            reservation_service(uow).apply_stock_deltas({product_id: delta}, reason="manual")
            availability = AvailabilityCalculator(uow.inventory, uow.holds).for_product(product_id)
            uow.commit()

        return to_inventory_line(availability)
