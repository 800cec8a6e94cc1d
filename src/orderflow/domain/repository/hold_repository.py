"""Abstract repository for InventoryHold records (the Hold Store)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from orderflow.domain.model.hold import InventoryHold


class HoldRepository(ABC):

    @abstractmethod
    def add(self, hold: InventoryHold) -> InventoryHold:
        """Insert one ACTIVE hold and assign its ID.

        Never rejects a hold for insufficient stock.
        """

    @abstractmethod
    def get_by_id(self, hold_id: int) -> InventoryHold | None:
        """Return a hold by ID, or None."""

    @abstractmethod
    def save(self, hold: InventoryHold) -> None:
        """Persist status and released_at of an existing hold."""

    @abstractmethod
    def release_all_for_reference(
        self, reference_type: str, reference_value: str, at: datetime
    ) -> list[InventoryHold]:
        """Mark every ACTIVE hold for the reference RELEASED; return them."""

    @abstractmethod
    def list_active(
        self,
        product_id: int | None = None,
        reference_type: str | None = None,
        reference_value: str | None = None,
    ) -> list[InventoryHold]:
        """Return ACTIVE holds, newest first, optionally filtered."""

    @abstractmethod
    def active_quantities(self, product_ids: list[int] | None = None) -> dict[int, int]:
        """Return the summed ACTIVE hold quantity per product."""
