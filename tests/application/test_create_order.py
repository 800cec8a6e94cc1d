"""Integration tests for the CreateOrder use case.

Uses in-memory fake repositories — no database.
"""

from datetime import date
from decimal import Decimal

import pytest

from orderflow.application.create_order import CreateOrderHandler
from orderflow.application.dto import OrderItemSpec
from orderflow.domain.exceptions import EntityNotFoundError, ValidationError
from orderflow.domain.model.hold import HoldStatus
from orderflow.domain.model.inventory import InventoryRecord
from orderflow.domain.model.order import OrderStatus
from orderflow.domain.model.outbox import INVOICE_UPDATE, InvoiceRef
from tests.fakes import FakeUnitOfWork


def _setup(invoices: list[InvoiceRef] | None = None) -> tuple[CreateOrderHandler, FakeUnitOfWork]:
    uow = FakeUnitOfWork(
        inventory=[
            InventoryRecord(product_id=1, product_name="Widget", stock_quantity=10),
            InventoryRecord(product_id=2, product_name="Gadget", stock_quantity=2),
        ],
        invoices=invoices,
    )
    return CreateOrderHandler(uow), uow


class TestCreateOrderHappyPath:

    def test_creates_pending_order_with_holds(self):
        handler, uow = _setup()

        dto = handler.handle(
            user_id=7,
            role_id=2,
            item_specs=[OrderItemSpec(1, 5, "15.00"), OrderItemSpec(2, 1, "25.00")],
        )

        assert dto.id == 1
        assert dto.status == "Pending"
        assert dto.payment_status == "Pending"
        assert dto.total == "INR 100.00"
        assert dto.warnings == []
        assert uow.commits == 1

        holds = uow.holds.list_active(reference_value="1")
        assert sorted((h.product_id, h.quantity.value) for h in holds) == [(1, 5), (2, 1)]
        assert all(h.status is HoldStatus.ACTIVE for h in holds)

    def test_stock_is_not_touched(self):
        handler, uow = _setup()
        handler.handle(7, None, [OrderItemSpec(1, 5, "15.00")])
        assert uow.inventory.stock(1) == 10

    def test_unit_price_is_snapshotted(self):
        handler, uow = _setup()
        dto = handler.handle(7, None, [OrderItemSpec(1, 2, "9.99")])
        order = uow.orders.get_by_id(dto.id)
        assert order.items[0].unit_price.amount == Decimal("9.99")

    def test_target_delivery_date_kept(self):
        handler, uow = _setup()
        dto = handler.handle(7, None, [OrderItemSpec(1, 1, "1")], date(2025, 3, 1))
        assert dto.target_delivery_date == "2025-03-01"
        assert uow.orders.get_by_id(dto.id).status is OrderStatus.PENDING


class TestCreateOrderAdvisoryStock:

    def test_low_stock_warns_but_accepts(self):
        handler, uow = _setup()

        dto = handler.handle(7, None, [OrderItemSpec(2, 5, "25.00")])

        assert dto.id is not None
        assert len(dto.warnings) == 1
        assert "Product 2" in dto.warnings[0]
        assert uow.holds.active_quantities() == {2: 5}

    def test_previous_holds_count_against_availability(self):
        handler, _ = _setup()
        handler.handle(7, None, [OrderItemSpec(1, 8, "1")])
        dto = handler.handle(8, None, [OrderItemSpec(1, 3, "1")])
        assert dto.warnings


class TestCreateOrderValidation:

    def test_empty_items_rejected(self):
        handler, uow = _setup()
        with pytest.raises(ValidationError, match="at least one item"):
            handler.handle(7, None, [])
        assert uow.commits == 0

    def test_zero_quantity_rejected(self):
        handler, _ = _setup()
        with pytest.raises(ValidationError, match="must be positive"):
            handler.handle(7, None, [OrderItemSpec(1, 0, "1")])

    def test_missing_product_rejected(self):
        handler, _ = _setup()
        with pytest.raises(ValidationError, match="needs a product"):
            handler.handle(7, None, [OrderItemSpec(None, 1, "1")])

    def test_unknown_product_rejected(self):
        handler, uow = _setup()
        with pytest.raises(EntityNotFoundError, match="Product not found: 99"):
            handler.handle(7, None, [OrderItemSpec(99, 1, "1")])
        assert uow.holds.all() == []
        assert uow.commits == 0


class TestCreateOrderEvents:

    def test_invoice_update_queued_when_invoice_linked(self):
        invoice = InvoiceRef(invoice_id=5, order_id=1, invoice_number="INV-5", total_value=Decimal("75"))
        handler, uow = _setup(invoices=[invoice])

        handler.handle(7, None, [OrderItemSpec(1, 5, "15.00")])

        events = uow.outbox.of_type(INVOICE_UPDATE)
        assert len(events) == 1
        assert events[0].payload["invoice_number"] == "INV-5"

    def test_no_invoice_no_event(self):
        handler, uow = _setup()
        handler.handle(7, None, [OrderItemSpec(1, 5, "15.00")])
        assert uow.outbox.events == []
