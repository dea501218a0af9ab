"""Terminal order feed — polls the order store on a fixed cadence.

Each terminal (kitchen display, floor view, order history) keeps its own
feed. Projections read ``feed.orders``, the last snapshot that was fetched
successfully. A failed refresh keeps that snapshot in place, so views never
show a state the store did not confirm, and at worst lag one interval.
"""

import asyncio
from datetime import UTC, datetime

import structlog

from pos.errors import TransportError
from pos.order.order import OrderStatus

logger = structlog.get_logger(__name__)


async def with_retry(operation, attempts=3, base_delay=0.2, max_delay=2.0):
    """Await ``operation()``, retrying ``TransportError`` with exponential backoff.

    The last ``TransportError`` is re-raised once ``attempts`` are used up.
    """
    if attempts < 1:
        raise ValueError(f"attempts must be at least 1, got {attempts}")

    delay = base_delay
    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except TransportError as exc:
            if attempt == attempts:
                raise
            logger.warning(
                "Order store unreachable, retrying",
                attempt=attempt,
                retry_in=delay,
                error=str(exc),
            )
            await asyncio.sleep(delay)
            delay = min(delay * 2, max_delay)


class OrderFeed:
    def __init__(self, store, interval=5.0, status=None, attempts=3, base_delay=0.2):
        if attempts < 1:
            raise ValueError(f"attempts must be at least 1, got {attempts}")
        self.store = store
        self.interval = interval
        self.status = status
        self.attempts = attempts
        self.base_delay = base_delay
        self.orders = []
        self.refreshed_at = None
        self.last_error = None

    async def refresh(self) -> bool:
        """Pull a fresh snapshot. Returns False when the previous one was kept."""
        try:
            orders = await with_retry(
                lambda: self.store.list_orders(self.status),
                attempts=self.attempts,
                base_delay=self.base_delay,
            )
        except TransportError as exc:
            self.last_error = exc
            logger.warning(
                "Order feed refresh failed, keeping last snapshot",
                snapshot_size=len(self.orders),
                refreshed_at=self.refreshed_at.isoformat() if self.refreshed_at else None,
                error=str(exc),
            )
            return False

        self.orders = list(orders)
        self.refreshed_at = datetime.now(UTC)
        self.last_error = None
        return True

    async def run(self, stop_event: asyncio.Event) -> None:
        """Refresh every ``interval`` seconds until ``stop_event`` is set."""
        while not stop_event.is_set():
            await self.refresh()
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.interval)
            except TimeoutError:
                continue


def kitchen_feed(store, settings) -> OrderFeed:
    """Preparing orders, polled at the kitchen display cadence."""
    return OrderFeed(store, interval=settings.kitchen_poll_seconds, status=OrderStatus.PREPARING.value)


def history_feed(store, settings) -> OrderFeed:
    """Every order, polled at the floor and history cadence."""
    return OrderFeed(store, interval=settings.orders_poll_seconds)
