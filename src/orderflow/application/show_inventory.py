"""Application service: Show Inventory use case (query)."""

from __future__ import annotations

from orderflow.application.dto import InventoryLineDTO, to_inventory_line
from orderflow.domain.repository.unit_of_work import UnitOfWork
from orderflow.domain.service.availability import AvailabilityCalculator


class ShowInventoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: int | None = None) -> list[InventoryLineDTO]:
        """Stock, reserved and available quantity per product."""
        with self._uow as uow:
            calculator = AvailabilityCalculator(uow.inventory, uow.holds)
            if product_id is not None:
                return [to_inventory_line(calculator.for_product(product_id))]
            return [to_inventory_line(a) for a in calculator.list_all()]
