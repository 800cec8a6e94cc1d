"""Application service: Update Order use case.

Every check runs against state read under the order row lock before any
write is made.  The writes then follow a fixed order inside the same
transaction:

1. order-level fields (target date, payment status, status)
2. item replacement for orders not yet dispatched: release the old holds,
   replace the items, create fresh holds
3. the shipment hook, when the order moves to Shipped from a lower rank:
   decrement stock per line and release the holds

Re-sending Shipped to a Shipped order is a no-op for stock.
"""

from __future__ import annotations

from orderflow.application.common import (
    queue_invoice_update,
    require_products,
    reservation_service,
)
from orderflow.application.dto import UNSET, OrderDTO, OrderPatch, to_order_dto
from orderflow.domain.exceptions import EntityNotFoundError, ValidationError
from orderflow.domain.model.hold import REFERENCE_ORDER, held_quantities
from orderflow.domain.model.order import (
    SHIPPED_RANK,
    OrderStatus,
    PaymentStatus,
    line_quantities,
)
from orderflow.domain.repository.unit_of_work import UnitOfWork
from orderflow.domain.service.availability import AvailabilityCalculator
from orderflow.logging_config import LogContext, get_logger

logger = get_logger("application.update_order")


class UpdateOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int, patch: OrderPatch) -> OrderDTO:
        if patch.is_empty():
            raise ValidationError("No fields provided to update")

        new_items = None
        if patch.items is not UNSET:
            if patch.items is None:
                raise ValidationError("Items cannot be cleared; supply a non-empty list")
            new_items = [spec.to_line_item() for spec in patch.items]

        with LogContext.bind(order_id=order_id), self._uow as uow:
            order = uow.orders.get_for_update(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            # --- Validate (no writes yet) -------------------------------------
            old_status = order.status
            new_status = order.check_transition(
                old_status if patch.status is UNSET else patch.status
            )
            payment_status = (
                None if patch.payment_status is UNSET
                else PaymentStatus.parse(patch.payment_status)
            )

            warnings: list[str] = []
            items_changed = False
            if new_items is not None:
                items_changed = order.ensure_items_mutable(new_items)
                if items_changed:
                    require_products(uow, new_items)
                    own_holds = uow.holds.list_active(
                        reference_type=REFERENCE_ORDER, reference_value=str(order_id)
                    )
                    warnings = AvailabilityCalculator(
                        uow.inventory, uow.holds
                    ).check_demand(
                        line_quantities(new_items),
                        released=held_quantities(own_holds),
                    )

            # --- Apply --------------------------------------------------------
            if patch.target_delivery_date is not UNSET:
                order.target_delivery_date = patch.target_delivery_date
            if payment_status is not None:
                order.payment_status = payment_status
            order.change_status(new_status)
            uow.orders.save(order)

            svc = reservation_service(uow)

            if items_changed:
                svc.release_for_order(order_id)
                uow.orders.replace_items(order_id, new_items)  # type: ignore[arg-type]
                order.replace_items(new_items)  # type: ignore[arg-type]
                svc.reserve_for_order(order_id, order.items)
                logger.info(
                    "order_items_replaced",
                    extra={
                        "order_id": order_id,
                        "items": [
                            {"product_id": pid, "quantity": qty}
                            for pid, qty in order.quantities.items()
                        ],
                    },
                )

            if old_status.rank < SHIPPED_RANK and new_status is OrderStatus.SHIPPED:  # type: ignore[operator]
                svc.ship_order(order)

            queue_invoice_update(uow, order_id)
            uow.commit()

            if new_status is not old_status:
                logger.info(
                    "order_status_changed",
                    extra={
                        "order_id": order_id,
                        "from_status": old_status.value,
                        "to_status": new_status.value,
                    },
                )

        return to_order_dto(order, warnings)
