"""Abstract repository for InventoryRecord aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from orderflow.domain.model.inventory import InventoryRecord


class InventoryRepository(ABC):

    @abstractmethod
    def add(self, record: InventoryRecord) -> InventoryRecord:
        """Persist a new inventory record and assign its product ID."""

    @abstractmethod
    def get_by_product_id(self, product_id: int) -> InventoryRecord | None:
        """Return the inventory record for a product, or None."""

    @abstractmethod
    def get_many(self, product_ids: list[int]) -> dict[int, InventoryRecord]:
        """Return the records that exist among *product_ids*, keyed by ID."""

    @abstractmethod
    def list_all(self) -> list[InventoryRecord]:
        """Return every inventory record."""

    @abstractmethod
    def adjust_stock(self, deltas: dict[int, int]) -> list[InventoryRecord]:
        """Apply signed deltas to stock_quantity, one per product.

        All deltas land in the current transaction; there is no floor.
        Returns the updated records.
        """
