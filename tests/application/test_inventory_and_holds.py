"""Tests for stock ledger and manual hold use cases."""

import pytest

from orderflow.application.add_inventory import AddInventoryHandler
from orderflow.application.adjust_stock import AdjustStockHandler
from orderflow.application.create_order import CreateOrderHandler
from orderflow.application.dto import OrderItemSpec
from orderflow.application.list_holds import ListHoldsHandler
from orderflow.application.place_hold import DEFAULT_REASON, PlaceHoldHandler
from orderflow.application.release_hold import ReleaseHoldHandler
from orderflow.domain.exceptions import (
    EntityNotFoundError,
    HoldAlreadyReleasedError,
    ValidationError,
)
from orderflow.domain.model.outbox import STOCK_UPDATE
from tests.fakes import FakeUnitOfWork


class TestAddInventory:

    def test_add(self):
        uow = FakeUnitOfWork()
        line = AddInventoryHandler(uow).handle("Widget", 12)
        assert (line.product_id, line.stock, line.available) == (1, 12, 12)
        assert uow.outbox.of_type(STOCK_UPDATE)[0].payload == {"product_id": 1, "stock_quantity": 12}

    def test_negative_opening_stock_rejected(self):
        with pytest.raises(ValidationError):
            AddInventoryHandler(FakeUnitOfWork()).handle("Widget", -1)


class TestAdjustStock:

    def _uow(self) -> FakeUnitOfWork:
        uow = FakeUnitOfWork()
        AddInventoryHandler(uow).handle("Widget", 3)
        return uow

    def test_no_floor(self):
        uow = self._uow()
        line = AdjustStockHandler(uow).handle(1, -5)
        assert line.stock == -2
        assert uow.outbox.events[-1].payload == {"product_id": 1, "stock_quantity": -2}

    def test_zero_delta_rejected(self):
        with pytest.raises(ValidationError):
            AdjustStockHandler(self._uow()).handle(1, 0)

    def test_unknown_product(self):
        with pytest.raises(EntityNotFoundError):
            AdjustStockHandler(self._uow()).handle(5, 1)


class TestHolds:

    def _uow(self) -> FakeUnitOfWork:
        uow = FakeUnitOfWork()
        AddInventoryHandler(uow).handle("Widget", 3)
        return uow

    def test_place_beyond_stock_is_allowed(self):
        uow = self._uow()
        hold = PlaceHoldHandler(uow).handle(1, 10, reference_type="QUOTE", reference_value="Q-1")
        assert hold.status == "ACTIVE"
        assert hold.reason == DEFAULT_REASON
        assert uow.holds.active_quantities() == {1: 10}

    def test_place_for_unknown_product(self):
        with pytest.raises(EntityNotFoundError):
            PlaceHoldHandler(self._uow()).handle(9, 1)

    def test_place_non_positive_quantity(self):
        with pytest.raises(ValidationError):
            PlaceHoldHandler(self._uow()).handle(1, 0)

    def test_release(self):
        uow = self._uow()
        hold = PlaceHoldHandler(uow).handle(1, 2)
        released = ReleaseHoldHandler(uow).handle(hold.id)
        assert released.status == "RELEASED"
        assert released.released_at is not None
        assert ListHoldsHandler(uow).handle() == []

    def test_release_twice(self):
        uow = self._uow()
        hold = PlaceHoldHandler(uow).handle(1, 2)
        ReleaseHoldHandler(uow).handle(hold.id)
        with pytest.raises(HoldAlreadyReleasedError):
            ReleaseHoldHandler(uow).handle(hold.id)

    def test_release_missing(self):
        with pytest.raises(EntityNotFoundError):
            ReleaseHoldHandler(self._uow()).handle(77)

    def test_list_filters(self):
        uow = self._uow()
        place = PlaceHoldHandler(uow)
        place.handle(1, 1, reference_type="QUOTE", reference_value="Q-1")
        place.handle(1, 2, reference_type="QUOTE", reference_value="Q-2")

        holds = ListHoldsHandler(uow).handle(reference_type="QUOTE", reference_value="Q-2")
        assert [h.quantity for h in holds] == [2]
        assert [h.id for h in ListHoldsHandler(uow).handle(product_id=1)] == [2, 1]


class TestOrderHoldsAreOffLimits:

    def _uow_with_order(self) -> FakeUnitOfWork:
        uow = FakeUnitOfWork()
        AddInventoryHandler(uow).handle("Widget", 10)
        CreateOrderHandler(uow).handle(7, None, [OrderItemSpec(1, 5, "1.00")])
        return uow

    def test_release_of_order_hold_rejected(self):
        uow = self._uow_with_order()
        [order_hold] = uow.holds.list_active()

        with pytest.raises(ValidationError, match="belongs to order 1"):
            ReleaseHoldHandler(uow).handle(order_hold.id)

        assert uow.holds.active_quantities() == {1: 5}

    @pytest.mark.parametrize("reference_type", ["ORDER", " order "])
    def test_place_with_order_reference_rejected(self, reference_type):
        uow = self._uow_with_order()

        with pytest.raises(ValidationError, match="managed by the order operations"):
            PlaceHoldHandler(uow).handle(
                1, 3, reference_type=reference_type, reference_value="1"
            )

        assert uow.holds.active_quantities() == {1: 5}
