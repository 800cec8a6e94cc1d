"""Domain service: Availability Calculator.

``available = stock_quantity - sum(active hold quantities)``, recomputed on
every call from the Inventory Ledger and the Hold Store.  Nothing is cached,
so there is no second source of truth to keep in sync.

The figure is advisory.  ``check_demand`` reports shortfalls as warnings and
never blocks: selling into negative stock is an accepted backlog state.
"""

from __future__ import annotations

from orderflow.domain.exceptions import EntityNotFoundError
from orderflow.domain.model.inventory import Availability
from orderflow.domain.repository.hold_repository import HoldRepository
from orderflow.domain.repository.inventory_repository import InventoryRepository
from orderflow.logging_config import get_logger

logger = get_logger("domain.availability")


class AvailabilityCalculator:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        hold_repo: HoldRepository,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._hold_repo = hold_repo

    def for_product(self, product_id: int) -> Availability:
        result = self.for_products([product_id])
        if product_id not in result:
            raise EntityNotFoundError(f"Product #{product_id} not found in inventory")
        return result[product_id]

    def for_products(self, product_ids: list[int]) -> dict[int, Availability]:
        records = self._inventory_repo.get_many(product_ids)
        reserved = self._hold_repo.active_quantities(list(records))
        return {
            pid: Availability(
                product_id=pid,
                product_name=rec.product_name,
                stock_quantity=rec.stock_quantity,
                reserved_quantity=reserved.get(pid, 0),
            )
            for pid, rec in records.items()
        }

    def list_all(self) -> list[Availability]:
        records = self._inventory_repo.list_all()
        reserved = self._hold_repo.active_quantities()
        return [
            Availability(
                product_id=rec.product_id,  # type: ignore[arg-type]
                product_name=rec.product_name,
                stock_quantity=rec.stock_quantity,
                reserved_quantity=reserved.get(rec.product_id, 0),  # type: ignore[arg-type]
            )
            for rec in records
        ]

    def check_demand(
        self,
        quantities: dict[int, int],
        released: dict[int, int] | None = None,
    ) -> list[str]:
        """Compare new demand against availability and log any shortfall.

        *released* is stock about to be freed by the same change (an order's
        own holds when its items are replaced) and counts as available.
        Returns the warning messages; never raises for low stock.
        """
        released = released or {}
        availability = self.for_products(list(quantities))
        warnings: list[str] = []
        shortfalls: list[dict] = []
        for product_id, needed in quantities.items():
            avail = availability.get(product_id)
            if avail is None:
                warnings.append(f"Product {product_id} not found in inventory")
                continue
            available = avail.available_quantity + released.get(product_id, 0)
            if available < needed:
                warnings.append(
                    f"Product {product_id}: need {needed}, "
                    f"available {available} (will go negative)"
                )
                shortfalls.append({
                    "product_id": product_id,
                    "requested": needed,
                    "available": available,
                })

        if warnings:
            logger.warning(
                "availability_shortfall",
                extra={"shortfalls": shortfalls, "warnings": warnings},
            )
        return warnings
