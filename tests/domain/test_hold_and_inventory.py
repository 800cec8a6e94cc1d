"""Unit tests for InventoryHold and InventoryRecord."""

from datetime import datetime, timezone

import pytest

from orderflow.domain.exceptions import HoldAlreadyReleasedError, ValidationError
from orderflow.domain.model.hold import (
    ORDER_HOLD_REASON,
    REFERENCE_ORDER,
    HoldStatus,
    InventoryHold,
)
from orderflow.domain.model.inventory import Availability, InventoryRecord
from orderflow.domain.model.value_objects import Quantity


class TestInventoryHold:

    def test_order_hold_references_the_order(self):
        hold = InventoryHold.for_order(42, product_id=3, quantity=Quantity(5))
        assert hold.status is HoldStatus.ACTIVE
        assert hold.reference_type == REFERENCE_ORDER
        assert hold.reference_value == "42"
        assert hold.reason == ORDER_HOLD_REASON

    def test_release(self):
        hold = InventoryHold.for_order(1, 1, Quantity(2))
        at = datetime(2024, 1, 1, tzinfo=timezone.utc)
        hold.release(at)
        assert hold.status is HoldStatus.RELEASED
        assert hold.released_at == at
        assert not hold.is_active

    def test_release_twice_rejected(self):
        hold = InventoryHold.for_order(1, 1, Quantity(2))
        hold.release()
        with pytest.raises(HoldAlreadyReleasedError):
            hold.release()


class TestInventoryRecord:

    def test_create(self):
        record = InventoryRecord.create("  Widget ", 10)
        assert record.product_name == "Widget"
        assert record.stock_quantity == 10

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError, match="name is required"):
            InventoryRecord.create(" ", 1)

    def test_negative_initial_stock_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            InventoryRecord.create("Widget", -1)

    def test_adjust_may_go_negative(self):
        record = InventoryRecord(product_id=1, product_name="Widget", stock_quantity=2)
        assert record.adjust(-5) == -3
        assert record.is_negative

    def test_availability_is_stock_minus_reserved(self):
        avail = Availability(1, "Widget", stock_quantity=2, reserved_quantity=5)
        assert avail.available_quantity == -3
