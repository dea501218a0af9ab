"""Tests for the kitchen queue projection."""

from datetime import timedelta

from pos.kitchen.queue import elapsed_minutes, kitchen_tickets


class TestKitchenTickets:
    def test_only_preparing_orders(self, order_factory):
        preparing = order_factory(1)
        served = order_factory(2)
        served.serve()
        cancelled = order_factory(3)
        cancelled.cancel()

        tickets = kitchen_tickets([preparing, served, cancelled], now=preparing.created_at)
        assert [t.order_number for t in tickets] == [1]

    def test_keeps_source_order(self, order_factory):
        orders = [order_factory(3), order_factory(1), order_factory(2)]
        tickets = kitchen_tickets(orders, now=orders[0].created_at)
        assert [t.order_number for t in tickets] == [3, 1, 2]

    def test_urgent_after_fifteen_minutes(self, order_factory):
        order = order_factory()
        ticket = kitchen_tickets([order], now=order.created_at + timedelta(minutes=16))[0]
        assert ticket.elapsed_minutes == 16
        assert ticket.urgent is True

    def test_not_urgent_at_ten_minutes(self, order_factory):
        order = order_factory()
        ticket = kitchen_tickets([order], now=order.created_at + timedelta(minutes=10))[0]
        assert ticket.elapsed_minutes == 10
        assert ticket.urgent is False

    def test_exactly_fifteen_minutes_is_not_urgent(self, order_factory):
        order = order_factory()
        ticket = kitchen_tickets([order], now=order.created_at + timedelta(minutes=15, seconds=30))[0]
        assert ticket.elapsed_minutes == 15
        assert ticket.urgent is False

    def test_custom_threshold(self, order_factory):
        order = order_factory()
        ticket = kitchen_tickets([order], now=order.created_at + timedelta(minutes=6), urgent_after=5)[0]
        assert ticket.urgent is True

    def test_projection_is_idempotent(self, order_factory):
        orders = [order_factory(1), order_factory(2)]
        now = orders[0].created_at + timedelta(minutes=3)
        assert kitchen_tickets(orders, now=now) == kitchen_tickets(orders, now=now)

    def test_projection_does_not_mutate_orders(self, order_factory):
        order = order_factory()
        kitchen_tickets([order], now=order.created_at + timedelta(minutes=30))
        assert order.status == "preparing"


class TestElapsedMinutes:
    def test_naive_timestamps_are_treated_as_utc(self, order_factory):
        created_at = order_factory().created_at
        naive = created_at.replace(tzinfo=None)
        assert elapsed_minutes(naive, created_at + timedelta(minutes=4)) == 4

    def test_clock_skew_never_goes_negative(self, order_factory):
        created_at = order_factory().created_at
        assert elapsed_minutes(created_at, created_at - timedelta(minutes=2)) == 0
