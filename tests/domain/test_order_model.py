"""Unit tests for the Order aggregate and its status state machine."""

import pytest

from orderflow.domain.exceptions import (
    AlreadyCancelledError,
    InvalidTransitionError,
    ItemsLockedError,
    ReturnConfirmationRequiredError,
    UnauthorizedError,
    ValidationError,
)
from orderflow.domain.model.order import (
    MAX_LINE_ITEMS,
    Order,
    OrderLineItem,
    OrderStatus,
    PaymentStatus,
    line_quantities,
)
from orderflow.domain.model.value_objects import Money, Quantity


def _make_item(product_id: int = 1, qty: int = 1, price: str = "15.00") -> OrderLineItem:
    """Helper to build a valid line item."""
    return OrderLineItem(
        product_id=product_id,
        quantity=Quantity(qty),
        unit_price=Money.of(price),
    )


def _order(status: OrderStatus = OrderStatus.PENDING, user_id: int = 7) -> Order:
    return Order(id=1, user_id=user_id, items=[_make_item(qty=5)], status=status)


class TestOrderCreation:

    def test_happy_path(self):
        order = Order.create(user_id=7, items=[_make_item(qty=2, price="10.00")])
        assert order.user_id == 7
        assert order.status == OrderStatus.PENDING
        assert order.payment_status == PaymentStatus.PENDING
        assert order.id is None
        assert order.total == Money.of("20.00")

    def test_total_is_sum_of_line_items(self):
        order = Order.create(
            7, [_make_item(1, qty=3, price="15.00"), _make_item(2, qty=2, price="25.00")]
        )
        assert order.total == Money.of("95.00")

    def test_empty_items_rejected(self):
        with pytest.raises(ValidationError, match="at least one item"):
            Order.create(7, [])

    def test_too_many_items_rejected(self):
        items = [_make_item(product_id=i) for i in range(MAX_LINE_ITEMS + 1)]
        with pytest.raises(ValidationError):
            Order.create(7, items)

    def test_missing_owner_rejected(self):
        with pytest.raises(ValidationError, match="owner"):
            Order.create(None, [_make_item()])

    def test_duplicate_product_lines_are_summed(self):
        items = [_make_item(1, qty=2), _make_item(1, qty=3), _make_item(2, qty=1)]
        assert line_quantities(items) == {1: 5, 2: 1}


class TestStatusParsing:

    def test_parse_is_case_insensitive(self):
        assert OrderStatus.parse("shipped") is OrderStatus.SHIPPED

    def test_unknown_status_is_invalid_transition(self):
        with pytest.raises(InvalidTransitionError, match="Unknown order status"):
            OrderStatus.parse("Teleported")

    def test_cancelled_has_no_rank(self):
        assert OrderStatus.CANCELLED.rank is None
        assert OrderStatus.PENDING.rank < OrderStatus.DELIVERED.rank

    def test_unknown_payment_status_is_validation_error(self):
        with pytest.raises(ValidationError):
            PaymentStatus.parse("Bartered")


class TestTransitions:

    @pytest.mark.parametrize("target", ["Processing", "Testing", "Shipped", "Delivered"])
    def test_forward_moves_allowed(self, target):
        order = _order()
        previous = order.change_status(target)
        assert previous is OrderStatus.PENDING
        assert order.status.value == target

    def test_same_status_is_allowed(self):
        order = _order(OrderStatus.SHIPPED)
        order.change_status("Shipped")
        assert order.status is OrderStatus.SHIPPED

    def test_downgrade_rejected(self):
        order = _order(OrderStatus.SHIPPED)
        with pytest.raises(InvalidTransitionError, match="downgrade"):
            order.check_transition("Processing")
        assert order.status is OrderStatus.SHIPPED

    def test_cancelled_via_update_rejected(self):
        with pytest.raises(InvalidTransitionError, match="cancel operation"):
            _order().check_transition("Cancelled")

    def test_no_transition_out_of_cancelled(self):
        order = _order(OrderStatus.CANCELLED)
        with pytest.raises(InvalidTransitionError, match="Invalid status transition"):
            order.check_transition("Delivered")


class TestCancellationGates:

    def test_owner_may_cancel(self):
        assert _order().ensure_cancellable(user_id=7, is_admin=False, goods_returned=False) is False

    def test_admin_may_cancel_any_order(self):
        assert _order().ensure_cancellable(user_id=99, is_admin=True, goods_returned=False) is False

    def test_stranger_rejected(self):
        with pytest.raises(UnauthorizedError):
            _order().ensure_cancellable(user_id=99, is_admin=False, goods_returned=False)

    def test_already_cancelled_rejected(self):
        with pytest.raises(AlreadyCancelledError):
            _order(OrderStatus.CANCELLED).ensure_cancellable(7, False, True)

    def test_delivered_needs_return_confirmation(self):
        with pytest.raises(ReturnConfirmationRequiredError):
            _order(OrderStatus.DELIVERED).ensure_cancellable(7, False, False)

    def test_delivered_with_return_reports_shipped(self):
        assert _order(OrderStatus.DELIVERED).ensure_cancellable(7, False, True) is True

    def test_shipped_without_return_is_allowed(self):
        assert _order(OrderStatus.SHIPPED).ensure_cancellable(7, False, False) is True

    def test_cancel_sets_terminal_status(self):
        order = _order(OrderStatus.TESTING)
        assert order.cancel() is OrderStatus.TESTING
        assert order.status is OrderStatus.CANCELLED


class TestItemMutation:

    def test_reordered_items_are_not_a_change(self):
        order = Order(id=1, user_id=7, items=[_make_item(1, 2), _make_item(2, 3)])
        assert order.ensure_items_mutable([_make_item(2, 3), _make_item(1, 2)]) is False

    def test_price_change_is_a_change(self):
        order = _order()
        assert order.items_differ([_make_item(qty=5, price="16.00")]) is True

    def test_changed_items_after_shipment_locked(self):
        order = _order(OrderStatus.SHIPPED)
        with pytest.raises(ItemsLockedError):
            order.ensure_items_mutable([_make_item(qty=6)])

    def test_identical_items_after_shipment_pass(self):
        order = _order(OrderStatus.DELIVERED)
        assert order.ensure_items_mutable([_make_item(qty=5)]) is False

    def test_cancelled_order_items_are_not_locked(self):
        order = _order(OrderStatus.CANCELLED)
        assert order.ensure_items_mutable([_make_item(qty=9)]) is True

    def test_empty_replacement_rejected(self):
        with pytest.raises(ValidationError):
            _order().ensure_items_mutable([])
