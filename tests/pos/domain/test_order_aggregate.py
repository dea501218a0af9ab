"""Tests for the Order aggregate: creation, snapshots and invariants."""

import pytest
from pos.money import price_lines
from pos.order.events import OrderCreated
from pos.order.order import Order, OrderPricing, OrderStatus, OrderType
from protean.exceptions import ValidationError


class TestOrderCreation:
    def test_new_order_is_preparing(self, order_factory):
        order = order_factory()
        assert order.status == OrderStatus.PREPARING.value

    def test_takeaway_without_table(self, order_factory):
        order = order_factory()
        assert order.order_type == OrderType.TAKEAWAY.value
        assert order.table_id is None

    def test_dine_in_with_table(self, order_factory):
        order = order_factory(table_id="table-3")
        assert order.order_type == OrderType.DINE_IN.value
        assert order.table_id == "table-3"

    def test_pricing_matches_items(self, order_factory):
        order = order_factory()
        assert order.pricing.subtotal == 580.0
        assert order.pricing.tax_amount == 58.0
        assert order.pricing.total == 638.0

    def test_line_items_keep_commit_order(self, order_factory):
        order = order_factory()
        assert [item["product_name"] for item in order.line_items()] == ["Burger", "Soda"]

    def test_active_until_terminal(self, order_factory):
        order = order_factory()
        assert order.is_active and not order.is_terminal

        order.serve()
        assert order.is_active and not order.is_terminal

        order.bill()
        assert order.is_terminal and not order.is_active

    def test_created_at_is_set(self, order_factory):
        order = order_factory()
        assert order.created_at is not None

    def test_raises_order_created_event(self, line_factory):
        items = [line_factory()]
        order = Order.create(order_number=7, items_data=items, pricing=price_lines(items))
        events = [e for e in order._events if isinstance(e, OrderCreated)]
        assert len(events) == 1
        assert events[0].order_number == 7
        assert events[0].total == 250.0


class TestOrderInvariants:
    def test_empty_items_rejected(self):
        with pytest.raises(ValidationError):
            Order.create(order_number=1, items_data=[], pricing=price_lines([]))

    def test_subtotal_must_match_items(self, line_factory):
        items = [line_factory(quantity=2)]
        pricing = {"subtotal": 100.0, "tax_amount": 0.0, "total": 100.0}
        with pytest.raises(ValidationError):
            Order.create(order_number=1, items_data=items, pricing=pricing)

    def test_total_must_equal_subtotal_plus_tax(self):
        with pytest.raises(ValidationError):
            OrderPricing(subtotal=580.0, tax_amount=58.0, total=700.0)

    def test_quantity_must_be_positive(self, line_factory):
        items = [line_factory(quantity=0)]
        with pytest.raises(ValidationError):
            Order.create(order_number=1, items_data=items, pricing=price_lines(items))

    def test_takeaway_cannot_gain_a_table(self, order_factory):
        order = order_factory()
        with pytest.raises(ValidationError):
            order.table_id = "table-9"
