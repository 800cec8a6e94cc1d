"""Read-only port onto invoices, which are owned by another subsystem."""

from __future__ import annotations

from abc import ABC, abstractmethod

from orderflow.domain.model.outbox import InvoiceRef


class InvoiceLookup(ABC):

    @abstractmethod
    def find_for_order(self, order_id: int) -> InvoiceRef | None:
        """Return the invoice linked to an order, if any."""
