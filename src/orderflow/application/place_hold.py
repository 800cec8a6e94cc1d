"""Application service: Place Hold use case.

A manual reservation against any reference (a quotation, a customer
request).  Order holds are created by the order use cases instead.
"""

from __future__ import annotations

from orderflow.application.dto import HoldDTO, to_hold_dto
from orderflow.domain.exceptions import EntityNotFoundError, ValidationError
from orderflow.domain.model.hold import REFERENCE_ORDER, InventoryHold
from orderflow.domain.model.value_objects import Quantity
from orderflow.domain.repository.unit_of_work import UnitOfWork
from orderflow.logging_config import get_logger

logger = get_logger("application.place_hold")

DEFAULT_REASON = "Manual hold"


class PlaceHoldHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        product_id: int,
        quantity: int,
        reason: str | None = None,
        reference_type: str | None = None,
        reference_value: str | None = None,
    ) -> HoldDTO:
        if (reference_type or "").strip().upper() == REFERENCE_ORDER:
            raise ValidationError("Order holds are managed by the order operations")

        hold = InventoryHold(
            id=None,
            product_id=product_id,
            quantity=Quantity(quantity),
            reason=(reason or "").strip() or DEFAULT_REASON,
            reference_type=reference_type,
            reference_value=reference_value,
        )

        with self._uow as uow:
            if uow.inventory.get_by_product_id(product_id) is None:
                raise EntityNotFoundError(f"Product #{product_id} not found in inventory")
            uow.holds.add(hold)
            uow.commit()

        logger.info(
            "hold_created",
            extra={
                "hold_id": hold.id,
                "product_id": product_id,
                "quantity": quantity,
                "reference_type": reference_type,
                "reference_value": reference_value,
            },
        )
        return to_hold_dto(hold)
