"""Order lifecycle manager — the single entry point for order mutations.

Terminals create orders and request status changes through this manager.
It validates requests against the transition graph, delegates the atomic
check-then-set to the order store, and fans successful changes out to the
notification sinks. A failed request raises and leaves every cached view
untouched.
"""

import structlog

from pos.errors import InvalidTransitionError
from pos.order.order import OrderStatus
from pos.order.sinks import notify

logger = structlog.get_logger(__name__)


class OrderLifecycleManager:
    def __init__(self, store, sinks=None):
        self.store = store
        self.sinks = list(sinks or [])

    async def create(self, draft: dict):
        """Submit a cart draft; the new order starts in ``preparing``."""
        order = await self.store.create_order(draft)
        await notify(self.sinks, "order_created", order)
        return order

    async def transition(self, order_id: str, target_status):
        """Move an order to ``target_status``.

        Raises:
            InvalidTransitionError: target unknown or not reachable from the
                order's current status (as seen by the store).
            TransportError: the store could not be reached; nothing changed.
        """
        target = target_status.value if isinstance(target_status, OrderStatus) else str(target_status)
        if target not in {status.value for status in OrderStatus}:
            raise InvalidTransitionError("unknown", target)

        try:
            change = await self.store.update_order_status(order_id, target)
        except InvalidTransitionError as exc:
            logger.warning(
                "Order transition rejected",
                order_id=str(order_id),
                current_status=exc.current,
                target_status=target,
            )
            raise

        await notify(self.sinks, "status_changed", change.order, change.previous_status)
        return change.order

    async def serve(self, order_id: str):
        return await self.transition(order_id, OrderStatus.SERVED)

    async def bill(self, order_id: str):
        return await self.transition(order_id, OrderStatus.BILLED)

    async def cancel(self, order_id: str):
        return await self.transition(order_id, OrderStatus.CANCELLED)

    async def get(self, order_id: str):
        return await self.store.get_order(order_id)

    async def list(self, status: str | None = None):
        return await self.store.list_orders(status)
