"""Integration tests for the CancelOrder use case."""

import pytest

from orderflow.application.cancel_order import CancelOrderHandler
from orderflow.application.create_order import CreateOrderHandler
from orderflow.application.dto import OrderItemSpec, OrderPatch
from orderflow.application.update_order import UpdateOrderHandler
from orderflow.domain.exceptions import (
    AlreadyCancelledError,
    EntityNotFoundError,
    ReturnConfirmationRequiredError,
    UnauthorizedError,
)
from orderflow.domain.model.inventory import InventoryRecord
from orderflow.domain.model.order import OrderStatus
from tests.fakes import FakeUnitOfWork

OWNER = 7
ADMIN_ROLE = 1


def _setup(stock: int = 10, qty: int = 5):
    uow = FakeUnitOfWork(
        inventory=[InventoryRecord(product_id=1, product_name="Widget", stock_quantity=stock)]
    )
    dto = CreateOrderHandler(uow).handle(OWNER, None, [OrderItemSpec(1, qty, "10.00")])
    return CancelOrderHandler(uow, admin_role_id=ADMIN_ROLE), UpdateOrderHandler(uow), uow, dto.id


class TestCancelBeforeShipment:

    def test_releases_holds_and_keeps_stock(self):
        cancel, _, uow, order_id = _setup()

        dto = cancel.handle(order_id, user_id=OWNER, role_id=None)

        assert dto.status == "Cancelled"
        assert uow.holds.active_quantities() == {}
        assert uow.inventory.stock(1) == 10
        assert uow.outbox.events == []

    def test_goods_returned_flag_is_ignored_before_shipment(self):
        cancel, update, uow, order_id = _setup()
        update.handle(order_id, OrderPatch(status="Testing"))

        cancel.handle(order_id, OWNER, None, goods_returned=True)

        assert uow.inventory.stock(1) == 10


class TestCancelAfterShipment:

    def test_happy_path_round_trip(self):
        cancel, update, uow, order_id = _setup()
        assert uow.inventory.stock(1) == 10

        update.handle(order_id, OrderPatch(status="Shipped"))
        assert uow.inventory.stock(1) == 5

        cancel.handle(order_id, OWNER, None, goods_returned=True)
        assert uow.inventory.stock(1) == 10
        assert uow.orders.get_by_id(order_id).status is OrderStatus.CANCELLED

    def test_backlog_round_trip(self):
        cancel, update, uow, order_id = _setup(stock=2)
        assert uow.holds.active_quantities() == {1: 5}

        update.handle(order_id, OrderPatch(status="Shipped"))
        assert uow.inventory.stock(1) == -3

        cancel.handle(order_id, OWNER, None, goods_returned=True)
        assert uow.inventory.stock(1) == 2

    def test_shipped_without_return_leaves_stock(self):
        cancel, update, uow, order_id = _setup()
        update.handle(order_id, OrderPatch(status="Shipped"))

        cancel.handle(order_id, OWNER, None, goods_returned=False)

        assert uow.inventory.stock(1) == 5
        assert uow.holds.active_quantities() == {}

    def test_delivered_without_shipment_releases_holds(self):
        cancel, update, uow, order_id = _setup()
        update.handle(order_id, OrderPatch(status="Delivered"))
        assert uow.holds.active_quantities() == {1: 5}

        cancel.handle(order_id, OWNER, None, goods_returned=True)

        assert uow.holds.active_quantities() == {}
        assert all(not h.is_active for h in uow.holds.all())

    def test_delivered_without_return_rejected(self):
        cancel, update, uow, order_id = _setup()
        update.handle(order_id, OrderPatch(status="Delivered"))

        with pytest.raises(ReturnConfirmationRequiredError):
            cancel.handle(order_id, OWNER, None, goods_returned=False)

        assert uow.orders.get_by_id(order_id).status is OrderStatus.DELIVERED


class TestCancelGates:

    def test_missing_order(self):
        cancel, _, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            cancel.handle(999, OWNER, None)

    def test_other_user_rejected(self):
        cancel, _, uow, order_id = _setup()
        with pytest.raises(UnauthorizedError):
            cancel.handle(order_id, user_id=8, role_id=2)
        assert uow.holds.active_quantities() == {1: 5}

    def test_admin_may_cancel(self):
        cancel, _, _, order_id = _setup()
        dto = cancel.handle(order_id, user_id=99, role_id=ADMIN_ROLE)
        assert dto.status == "Cancelled"

    def test_double_cancel_rejected(self):
        cancel, _, _, order_id = _setup()
        cancel.handle(order_id, OWNER, None)
        with pytest.raises(AlreadyCancelledError):
            cancel.handle(order_id, OWNER, None)

    def test_takes_the_order_lock(self):
        cancel, _, uow, order_id = _setup()
        cancel.handle(order_id, OWNER, None)
        assert uow.orders.locked == [order_id]
