"""Unit tests for the Order aggregate and its lifecycle rules."""

from datetime import datetime, timedelta, timezone

import pytest

from fulfillment.domain.exceptions import ValidationError
from fulfillment.domain.model.order import (
    InsufficientStock,
    Order,
    OrderLineItem,
    OrderStatus,
    generate_order_id,
)
from fulfillment.domain.model.value_objects import Money, Quantity

T0 = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
P2S = timedelta(seconds=10)
S2D = timedelta(seconds=20)


def _make_item(name: str = "Keyboard", qty: int = 1, price: str = "15.00") -> OrderLineItem:
    """Helper to build a valid line item."""
    return OrderLineItem(
        item_id="1",
        item_name=name,
        unit_price=Money.of(price),
        quantity=Quantity(qty),
    )


def _make_order(**overrides) -> Order:
    kwargs = dict(
        order_id="ORD1",
        user_id="alice",
        items=[_make_item()],
        shipping_address="1 Main St",
        at=T0,
    )
    kwargs.update(overrides)
    return Order.create(**kwargs)


class TestOrderCreation:

    def test_happy_path(self):
        order = _make_order(items=[_make_item(qty=2, price="10.00")])
        assert order.user_id == "alice"
        assert order.status == OrderStatus.PENDING
        assert len(order.items) == 1
        assert order.total_amount == Money.of("20.00")

    def test_status_change_time_starts_at_order_time(self):
        order = _make_order()
        assert order.order_time == T0
        assert order.status_change_time == T0

    def test_sub_second_precision_dropped(self):
        order = _make_order(at=T0.replace(microsecond=750000))
        assert order.order_time == T0

    def test_total_is_sum_of_line_items(self):
        items = [
            _make_item("Keyboard", qty=3, price="15.00"),
            _make_item("Lamp", qty=5, price="25.00"),
        ]
        order = _make_order(items=items)
        assert order.total_amount == Money.of("170.00")
        assert order.item_count == 8

    def test_empty_items_rejected(self):
        with pytest.raises(ValidationError, match="at least one item"):
            _make_order(items=[])

    def test_blank_user_rejected(self):
        with pytest.raises(ValidationError, match="User id is required"):
            _make_order(user_id="  ")

    def test_reconstituted_order_keeps_stored_total(self):
        order = Order(
            order_id="ORD1",
            user_id="alice",
            items=[_make_item(qty=1, price="10.00")],
            order_time=T0,
            total_amount=Money.of("999.00"),
            shipping_address="x",
        )
        assert order.total_amount == Money.of("999.00")
        assert order.status_change_time == T0


class TestOrderId:

    def test_deterministic(self):
        assert generate_order_id("alice", T0) == generate_order_id("alice", T0)

    def test_format(self):
        order_id = generate_order_id("alice", T0)
        assert order_id.startswith("ORD")
        assert len(order_id) == 19
        assert order_id[3:] == order_id[3:].upper()

    def test_differs_by_user_and_second(self):
        base = generate_order_id("alice", T0)
        assert generate_order_id("bob", T0) != base
        assert generate_order_id("alice", T0 + timedelta(seconds=1)) != base

    def test_same_second_collides(self):
        assert generate_order_id("alice", T0) == generate_order_id(
            "alice", T0.replace(microsecond=400000)
        )

    def test_surrounding_whitespace_ignored(self):
        assert generate_order_id(" alice ", T0) == generate_order_id("alice", T0)


class TestOrderLifecycle:

    def test_advance_moves_one_step(self):
        order = _make_order()
        later = T0 + timedelta(seconds=30)
        assert order.advance(later) == OrderStatus.SHIPPED
        assert order.status_change_time == later
        assert order.advance(later) == OrderStatus.DELIVERED

    def test_delivered_cannot_advance(self):
        order = _make_order()
        order.set_status(OrderStatus.DELIVERED, T0)
        with pytest.raises(ValidationError, match="already Delivered"):
            order.advance(T0)

    def test_set_status_allows_any_jump(self):
        order = _make_order()
        order.set_status(OrderStatus.DELIVERED, T0 + timedelta(seconds=1))
        order.set_status(OrderStatus.PENDING, T0 + timedelta(seconds=2))
        assert order.status == OrderStatus.PENDING
        assert order.status_change_time == T0 + timedelta(seconds=2)

    def test_pending_due_at_threshold(self):
        order = _make_order()
        assert not order.is_due(T0 + timedelta(seconds=9), P2S, S2D)
        assert order.is_due(T0 + timedelta(seconds=10), P2S, S2D)

    def test_shipped_uses_second_duration(self):
        order = _make_order()
        order.set_status(OrderStatus.SHIPPED, T0)
        assert not order.is_due(T0 + timedelta(seconds=19), P2S, S2D)
        assert order.is_due(T0 + timedelta(seconds=20), P2S, S2D)

    def test_delivered_never_due(self):
        order = _make_order()
        order.set_status(OrderStatus.DELIVERED, T0)
        assert not order.is_due(T0 + timedelta(days=365), P2S, S2D)

    def test_successors(self):
        assert OrderStatus.PENDING.next == OrderStatus.SHIPPED
        assert OrderStatus.SHIPPED.next == OrderStatus.DELIVERED
        assert OrderStatus.DELIVERED.next is None


class TestOrderAddress:

    def test_change_address(self):
        order = _make_order()
        order.change_address("  2 Side St ")
        assert order.shipping_address == "2 Side St"

    def test_blank_address_rejected(self):
        order = _make_order()
        with pytest.raises(ValidationError, match="address is required"):
            order.change_address("")


class TestStatusLabels:

    @pytest.mark.parametrize(
        "label, expected",
        [
            ("Pending", OrderStatus.PENDING),
            ("SHIPPED", OrderStatus.SHIPPED),
            (" Delivered ", OrderStatus.DELIVERED),
            ("待发货", OrderStatus.PENDING),
            ("已发货", OrderStatus.SHIPPED),
            ("已签收", OrderStatus.DELIVERED),
        ],
    )
    def test_known_labels(self, label, expected):
        assert OrderStatus.from_label(label) == expected

    def test_unknown_label_rejected(self):
        with pytest.raises(ValidationError, match="Unknown order status"):
            OrderStatus.from_label("Lost")


class TestInsufficientStock:

    def test_message(self):
        shortfall = InsufficientStock("1", "Keyboard", requested=5, available=2)
        assert shortfall.message == "Insufficient stock for Keyboard (requested 5, available 2)"
        assert str(shortfall) == shortfall.message
