"""Application service: Add Inventory use case."""

from __future__ import annotations

from orderflow.application.dto import InventoryLineDTO
from orderflow.domain.model.inventory import InventoryRecord
from orderflow.domain.model.outbox import OutboxEvent
from orderflow.domain.repository.unit_of_work import UnitOfWork
from orderflow.logging_config import get_logger

logger = get_logger("application.add_inventory")


class AddInventoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_name: str, stock_quantity: int) -> InventoryLineDTO:
        """Register a product with its opening stock (which cannot be negative)."""
        record = InventoryRecord.create(product_name, stock_quantity)

        with self._uow as uow:
            uow.inventory.add(record)
            uow.outbox.append(
                OutboxEvent.stock_update(record.product_id, record.stock_quantity)  # type: ignore[arg-type]
            )
            uow.commit()

        logger.info(
            "inventory_added",
            extra={
                "product_id": record.product_id,
                "product_name": record.product_name,
                "stock_quantity": record.stock_quantity,
            },
        )
        return InventoryLineDTO(
            product_id=record.product_id,  # type: ignore[arg-type]
            product_name=record.product_name,
            stock=record.stock_quantity,
            reserved=0,
            available=record.stock_quantity,
        )
