"""SQLAlchemy implementation of HoldRepository."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from orderflow.domain.model.hold import HoldStatus, InventoryHold
from orderflow.domain.model.value_objects import Quantity
from orderflow.domain.repository.hold_repository import HoldRepository
from orderflow.infrastructure.persistence.models import InventoryHoldModel

_ACTIVE = HoldStatus.ACTIVE.value


class SqlAlchemyHoldRepository(HoldRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- HoldRepository interface ---------------------------------------------

    def add(self, hold: InventoryHold) -> InventoryHold:
        row = InventoryHoldModel(
            product_id=hold.product_id,
            quantity=hold.quantity.value,
            reason=hold.reason,
            reference_type=hold.reference_type,
            reference_value=hold.reference_value,
            status=hold.status.value,
            created_at=hold.created_at,
            released_at=hold.released_at,
        )
        self._session.add(row)
        self._session.flush()
        hold.id = row.id
        return hold

    def get_by_id(self, hold_id: int) -> InventoryHold | None:
        row = self._session.execute(
            select(InventoryHoldModel)
            .where(InventoryHoldModel.id == hold_id)
            .with_for_update()
        ).scalar_one_or_none()
        return self._to_domain(row) if row is not None else None

    def save(self, hold: InventoryHold) -> None:
        row = self._session.get(InventoryHoldModel, hold.id)
        if row is None:
            raise LookupError(f"Hold #{hold.id} is not persisted")
        row.status = hold.status.value
        row.released_at = hold.released_at
        self._session.flush()

    def release_all_for_reference(
        self, reference_type: str, reference_value: str, at: datetime
    ) -> list[InventoryHold]:
        rows = self._session.execute(
            select(InventoryHoldModel)
            .where(
                InventoryHoldModel.reference_type == reference_type,
                InventoryHoldModel.reference_value == reference_value,
                InventoryHoldModel.status == _ACTIVE,
            )
            .order_by(InventoryHoldModel.id)
            .with_for_update()
        ).scalars().all()
        for row in rows:
            row.status = HoldStatus.RELEASED.value
            row.released_at = at
        self._session.flush()
        return [self._to_domain(row) for row in rows]

    def list_active(
        self,
        product_id: int | None = None,
        reference_type: str | None = None,
        reference_value: str | None = None,
    ) -> list[InventoryHold]:
        stmt = select(InventoryHoldModel).where(InventoryHoldModel.status == _ACTIVE)
        if product_id is not None:
            stmt = stmt.where(InventoryHoldModel.product_id == product_id)
        if reference_type is not None:
            stmt = stmt.where(InventoryHoldModel.reference_type == reference_type)
        if reference_value is not None:
            stmt = stmt.where(InventoryHoldModel.reference_value == reference_value)
        rows = self._session.execute(
            stmt.order_by(InventoryHoldModel.id.desc())
        ).scalars().all()
        return [self._to_domain(row) for row in rows]

    def active_quantities(self, product_ids: list[int] | None = None) -> dict[int, int]:
        stmt = (
            select(InventoryHoldModel.product_id, func.sum(InventoryHoldModel.quantity))
            .where(InventoryHoldModel.status == _ACTIVE)
            .group_by(InventoryHoldModel.product_id)
        )
        if product_ids is not None:
            if not product_ids:
                return {}
            stmt = stmt.where(InventoryHoldModel.product_id.in_(product_ids))
        return {pid: int(total) for pid, total in self._session.execute(stmt).all()}

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_domain(row: InventoryHoldModel) -> InventoryHold:
        return InventoryHold(
            id=row.id,
            product_id=row.product_id,
            quantity=Quantity(row.quantity),
            reason=row.reason,
            reference_type=row.reference_type,
            reference_value=row.reference_value,
            status=HoldStatus(row.status),
            created_at=_aware(row.created_at),
            released_at=_aware(row.released_at) if row.released_at else None,
        )


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes.
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
