"""Notification and print sinks fed by the lifecycle manager.

A sink is told about every order that was created and every status change
that was applied. Sinks run after the store has committed the change, so a
failing sink can never undo it; ``notify`` logs the failure and moves on.
"""

import structlog

logger = structlog.get_logger(__name__)


class OrderEventSink:
    """Base sink. Override the hooks you care about."""

    async def order_created(self, order) -> None:
        pass

    async def status_changed(self, order, previous_status: str) -> None:
        pass


class LoggingSink(OrderEventSink):
    """Writes order activity to the structured log."""

    async def order_created(self, order) -> None:
        logger.info(
            "Order created",
            order_id=str(order.id),
            order_number=order.order_number,
            order_type=order.order_type,
            total=order.pricing.total,
        )

    async def status_changed(self, order, previous_status: str) -> None:
        logger.info(
            "Order status changed",
            order_id=str(order.id),
            order_number=order.order_number,
            previous_status=previous_status,
            new_status=order.status,
        )


class RecordingSink(OrderEventSink):
    """Keeps received notifications in memory (kitchen printers, test doubles)."""

    def __init__(self):
        self.events = []

    async def order_created(self, order) -> None:
        self.events.append(("created", str(order.id), order.status))

    async def status_changed(self, order, previous_status: str) -> None:
        self.events.append(("status_changed", str(order.id), previous_status, order.status))


async def notify(sinks, hook: str, *args) -> None:
    """Call ``hook`` on every sink, isolating failures."""
    for sink in sinks:
        try:
            await getattr(sink, hook)(*args)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Order event sink failed",
                sink=type(sink).__name__,
                hook=hook,
                error=str(exc),
            )
