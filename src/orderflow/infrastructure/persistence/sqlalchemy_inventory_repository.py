"""SQLAlchemy implementation of InventoryRepository."""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from orderflow.domain.model.inventory import InventoryRecord
from orderflow.domain.repository.inventory_repository import InventoryRepository
from orderflow.infrastructure.persistence.models import InventoryModel


class SqlAlchemyInventoryRepository(InventoryRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- InventoryRepository interface ----------------------------------------

    def add(self, record: InventoryRecord) -> InventoryRecord:
        row = InventoryModel(
            product_name=record.product_name,
            stock_quantity=record.stock_quantity,
        )
        self._session.add(row)
        self._session.flush()
        record.product_id = row.product_id
        return record

    def get_by_product_id(self, product_id: int) -> InventoryRecord | None:
        row = self._session.get(InventoryModel, product_id, populate_existing=True)
        return self._to_domain(row) if row is not None else None

    def get_many(self, product_ids: list[int]) -> dict[int, InventoryRecord]:
        if not product_ids:
            return {}
        rows = self._session.execute(
            select(InventoryModel)
            .where(InventoryModel.product_id.in_(product_ids))
            .execution_options(populate_existing=True)
        ).scalars().all()
        return {row.product_id: self._to_domain(row) for row in rows}

    def list_all(self) -> list[InventoryRecord]:
        rows = self._session.execute(
            select(InventoryModel).order_by(InventoryModel.product_id)
        ).scalars().all()
        return [self._to_domain(row) for row in rows]

    def adjust_stock(self, deltas: dict[int, int]) -> list[InventoryRecord]:
        # Relative updates in product-id order; no read-modify-write.
        for product_id in sorted(deltas):
            self._session.execute(
                update(InventoryModel)
                .where(InventoryModel.product_id == product_id)
                .values(stock_quantity=InventoryModel.stock_quantity + deltas[product_id])
                .execution_options(synchronize_session=False)
            )
        records = self.get_many(sorted(deltas))
        return [records[pid] for pid in sorted(records)]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_domain(row: InventoryModel) -> InventoryRecord:
        return InventoryRecord(
            product_id=row.product_id,
            product_name=row.product_name,
            stock_quantity=row.stock_quantity,
        )
