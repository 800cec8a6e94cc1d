"""SQLAlchemy implementation of InvoiceLookup."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from orderflow.domain.model.outbox import InvoiceRef
from orderflow.domain.repository.invoice_lookup import InvoiceLookup
from orderflow.infrastructure.persistence.models import CustomerInvoiceModel


class SqlAlchemyInvoiceLookup(InvoiceLookup):

    def __init__(self, session: Session) -> None:
        self._session = session

    def find_for_order(self, order_id: int) -> InvoiceRef | None:
        row = self._session.execute(
            select(CustomerInvoiceModel)
            .where(CustomerInvoiceModel.order_id == order_id)
            .order_by(CustomerInvoiceModel.invoice_id)
            .limit(1)
        ).scalar_one_or_none()
        if row is None:
            return None
        return InvoiceRef(
            invoice_id=row.invoice_id,
            order_id=row.order_id,
            invoice_number=row.invoice_number,
            total_value=row.total_value,
            issue_date=row.issue_date,
        )
