"""Application service: List Holds use case (query)."""

from __future__ import annotations

from orderflow.application.dto import HoldDTO, to_hold_dto
from orderflow.domain.repository.unit_of_work import UnitOfWork


class ListHoldsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        product_id: int | None = None,
        reference_type: str | None = None,
        reference_value: str | None = None,
    ) -> list[HoldDTO]:
        with self._uow as uow:
            holds = uow.holds.list_active(
                product_id=product_id,
                reference_type=reference_type,
                reference_value=reference_value,
            )
        return [to_hold_dto(h) for h in holds]
