"""Application service: Release Hold use case."""

from __future__ import annotations

from datetime import datetime, timezone

from orderflow.application.dto import HoldDTO, to_hold_dto
from orderflow.domain.exceptions import EntityNotFoundError, ValidationError
from orderflow.domain.model.hold import REFERENCE_ORDER
from orderflow.domain.repository.unit_of_work import UnitOfWork
from orderflow.logging_config import get_logger

logger = get_logger("application.release_hold")


class ReleaseHoldHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, hold_id: int) -> HoldDTO:
        """Release one hold as a whole.  Raises if it is already released."""
        with self._uow as uow:
            hold = uow.holds.get_by_id(hold_id)
            if hold is None:
                raise EntityNotFoundError(f"Hold #{hold_id} not found")
            if hold.reference_type == REFERENCE_ORDER:
                raise ValidationError(
                    f"Hold #{hold_id} belongs to order {hold.reference_value}; "
                    "cancel or update the order instead"
                )
            hold.release(datetime.now(timezone.utc))
            uow.holds.save(hold)
            uow.commit()

        logger.info(
            "hold_released",
            extra={
                "hold_id": hold_id,
                "product_id": hold.product_id,
                "quantity": hold.quantity.value,
            },
        )
        return to_hold_dto(hold)
