"""Kitchen queue — preparing orders with their waiting time.

The queue is a projection recomputed on every refresh from the terminal's
order snapshot. It never mutates an order itself; marking an order served is
delegated to the lifecycle manager.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

from pos.order.order import OrderStatus

URGENT_AFTER_MINUTES = 15


@dataclass(frozen=True)
class KitchenTicket:
    order: object
    elapsed_minutes: int
    urgent: bool

    @property
    def order_id(self) -> str:
        return str(self.order.id)

    @property
    def order_number(self) -> int:
        return self.order.order_number


def _as_utc(moment):
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def elapsed_minutes(created_at, now) -> int:
    """Whole minutes between ``created_at`` and ``now``, never negative."""
    seconds = (_as_utc(now) - _as_utc(created_at)).total_seconds()
    return max(int(seconds // 60), 0)


def kitchen_tickets(orders, now=None, urgent_after=URGENT_AFTER_MINUTES) -> list[KitchenTicket]:
    """Tickets for every ``preparing`` order, in source order."""
    now = now or datetime.now(UTC)
    tickets = []
    for order in orders:
        if order.status != OrderStatus.PREPARING.value:
            continue
        minutes = elapsed_minutes(order.created_at, now)
        tickets.append(KitchenTicket(order=order, elapsed_minutes=minutes, urgent=minutes > urgent_after))
    return tickets


class KitchenQueue:
    """Kitchen display backed by a terminal feed."""

    def __init__(self, feed, lifecycle, urgent_after=URGENT_AFTER_MINUTES):
        self.feed = feed
        self.lifecycle = lifecycle
        self.urgent_after = urgent_after

    def current(self, now=None) -> list[KitchenTicket]:
        return kitchen_tickets(self.feed.orders, now=now, urgent_after=self.urgent_after)

    async def mark_served(self, order_id):
        return await self.lifecycle.serve(order_id)
