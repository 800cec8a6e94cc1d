"""Application service: Create Order use case.

Places a Pending order, snapshots the supplied unit prices, and reserves
stock through one ACTIVE hold per line — all in one transaction.  Low
availability is reported as a warning; the order is still accepted.
"""

from __future__ import annotations

from datetime import date

from orderflow.application.common import (
    queue_invoice_update,
    require_products,
    reservation_service,
)
from orderflow.application.dto import OrderDTO, OrderItemSpec, to_order_dto
from orderflow.domain.model.order import Order
from orderflow.domain.repository.unit_of_work import UnitOfWork
from orderflow.domain.service.availability import AvailabilityCalculator
from orderflow.logging_config import LogContext, get_logger

logger = get_logger("application.create_order")


class CreateOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        user_id: int,
        role_id: int | None,
        item_specs: list[OrderItemSpec],
        target_delivery_date: date | None = None,
    ) -> OrderDTO:
        """Create a new order.

        Steps:
        1. Build line items from the item specs (validates quantity and price).
        2. Let the Order aggregate validate the order as a whole.
        3. Check every product exists, then run the advisory availability check.
        4. Persist the order and its items, then create the holds.
        """
        line_items = [spec.to_line_item() for spec in item_specs]

        with LogContext.bind(actor_id=user_id), self._uow as uow:
            order = Order.create(
                user_id=user_id,
                items=line_items,
                target_delivery_date=target_delivery_date,
            )
            require_products(uow, order.items)
            warnings = AvailabilityCalculator(uow.inventory, uow.holds).check_demand(
                order.quantities
            )

            uow.orders.add(order)
            reservation_service(uow).reserve_for_order(order.id, order.items)  # type: ignore[arg-type]
            queue_invoice_update(uow, order.id)  # type: ignore[arg-type]
            uow.commit()

            logger.info(
                "order_created",
                extra={
                    "order_id": order.id,
                    "role_id": role_id,
                    "to_status": order.status.value,
                    "items": [
                        {"product_id": pid, "quantity": qty}
                        for pid, qty in order.quantities.items()
                    ],
                    "warnings": warnings,
                },
            )

        return to_order_dto(order, warnings)
