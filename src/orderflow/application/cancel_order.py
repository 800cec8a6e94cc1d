"""Application service: Cancel Order use case.

Cancellation is a forward-only terminal transition, not a rollback.  What
it does to stock depends on history, read under the order row lock:

- never shipped: release the order's ACTIVE holds; demand evaporates
- shipped and goods returned: add every line's quantity back to stock
- shipped, goods not returned: no stock effect; stock stays consumed until
  the goods are accepted back through a stock adjustment

In both shipped branches any hold still ACTIVE is released as well.  That
only happens for an order that jumped straight to Delivered and so never
passed through the shipment hook.

A Delivered order additionally requires ``goods_returned=True``.
"""

from __future__ import annotations

from orderflow.application.common import (
    ADMIN_ROLE_ID,
    queue_invoice_update,
    reservation_service,
)
from orderflow.application.dto import OrderDTO, to_order_dto
from orderflow.domain.exceptions import EntityNotFoundError
from orderflow.domain.repository.unit_of_work import UnitOfWork
from orderflow.logging_config import LogContext, get_logger

logger = get_logger("application.cancel_order")


class CancelOrderHandler:

    def __init__(self, uow: UnitOfWork, admin_role_id: int = ADMIN_ROLE_ID) -> None:
        self._uow = uow
        self._admin_role_id = admin_role_id

    def handle(
        self,
        order_id: int,
        user_id: int,
        role_id: int | None,
        goods_returned: bool = False,
    ) -> OrderDTO:
        with LogContext.bind(order_id=order_id, actor_id=user_id), self._uow as uow:
            order = uow.orders.get_for_update(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            was_shipped = order.ensure_cancellable(
                user_id=user_id,
                is_admin=role_id == self._admin_role_id,
                goods_returned=goods_returned,
            )

            svc = reservation_service(uow)
            if was_shipped and goods_returned:
                svc.restock_for_order(order)
                effect = "restocked"
            elif was_shipped:
                effect = "awaiting_return"
            else:
                effect = "holds_released"
            svc.release_for_order(order_id)

            previous = order.cancel()
            uow.orders.save(order)
            queue_invoice_update(uow, order_id)
            uow.commit()

            logger.info(
                "order_cancelled",
                extra={
                    "order_id": order_id,
                    "from_status": previous.value,
                    "to_status": order.status.value,
                    "goods_returned": goods_returned,
                    "effect": effect,
                },
            )

        return to_order_dto(order)
