"""Outbound notifications recorded inside the business transaction.

Events are appended alongside the writes that cause them and delivered
later by a dispatcher, so a dead notification channel can never fail or
block an order transaction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

STOCK_UPDATE = "stockUpdate"
INVOICE_UPDATE = "invoiceUpdate"


@dataclass
class OutboxEvent:

    id: int | None
    event_type: str
    payload: dict[str, Any]
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    dispatched_at: datetime | None = None
    attempts: int = 0

    @staticmethod
    def stock_update(product_id: int, stock_quantity: int) -> OutboxEvent:
        return OutboxEvent(
            id=None,
            event_type=STOCK_UPDATE,
            payload={"product_id": product_id, "stock_quantity": stock_quantity},
        )

    @staticmethod
    def invoice_update(invoice: InvoiceRef) -> OutboxEvent:
        return OutboxEvent(
            id=None,
            event_type=INVOICE_UPDATE,
            payload={
                "invoice_id": invoice.invoice_id,
                "invoice_number": invoice.invoice_number,
                "total_value": str(invoice.total_value),
                "issue_date": invoice.issue_date.isoformat() if invoice.issue_date else None,
            },
        )

    @property
    def is_pending(self) -> bool:
        return self.dispatched_at is None


@dataclass(frozen=True)
class InvoiceRef:
    """The few invoice fields the core forwards; invoices are owned elsewhere."""

    invoice_id: int
    order_id: int
    invoice_number: str
    total_value: Decimal
    issue_date: date | None = None
