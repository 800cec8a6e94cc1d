"""Abstract Unit of Work — the explicit transaction handed to every use case.

Repositories reached through a unit of work share one transaction.  Leaving
the ``with`` block without calling ``commit()``, or because of an exception,
rolls everything back.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from orderflow.domain.repository.hold_repository import HoldRepository
from orderflow.domain.repository.inventory_repository import InventoryRepository
from orderflow.domain.repository.invoice_lookup import InvoiceLookup
from orderflow.domain.repository.order_repository import OrderRepository
from orderflow.domain.repository.outbox_repository import OutboxRepository


class UnitOfWork(ABC):

    orders: OrderRepository
    inventory: InventoryRepository
    holds: HoldRepository
    outbox: OutboxRepository
    invoices: InvoiceLookup

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Make every write in this unit of work durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted writes. Safe to call after commit."""
