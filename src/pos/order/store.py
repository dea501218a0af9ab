"""Order store — the asynchronous boundary every terminal talks to.

``OrderStore`` is the contract terminals depend on. ``DomainOrderStore``
fulfils it in-process by dispatching Protean commands; a networked client
implementing the same four coroutines can replace it without touching the
lifecycle manager, the projections, or the terminal feed.

The store is the final arbiter of validity. Creations are serialized so that
order numbers and table bindings are decided one at a time, and each order
has its own lock so that a status change is a single check-then-set.
"""

import asyncio
import json
import weakref
from abc import ABC, abstractmethod
from dataclasses import dataclass

from protean.utils.globals import current_domain

from pos.order.creation import PlaceOrder
from pos.order.order import Order
from pos.order.status import ChangeOrderStatus


@dataclass(frozen=True)
class StatusChange:
    """An applied status change: the updated order and the status it left."""

    order: Order
    previous_status: str


class OrderStore(ABC):
    @abstractmethod
    async def create_order(self, draft: dict) -> Order:
        """Persist a new order from a cart draft and return it."""

    @abstractmethod
    async def update_order_status(self, order_id: str, status: str) -> StatusChange:
        """Atomically move an order to ``status``.

        ``previous_status`` is the status the change was checked against, read
        in the same atomic step as the write.
        """

    @abstractmethod
    async def list_orders(self, status: str | None = None) -> list[Order]:
        """Every order in creation order, optionally restricted to one status."""

    @abstractmethod
    async def get_order(self, order_id: str) -> Order:
        """Fetch one order; raises ``ObjectNotFoundError`` if unknown."""


class DomainOrderStore(OrderStore):
    """Order store backed by the ``pos`` domain's repository.

    Must be awaited inside an active ``pos`` domain context.
    """

    def __init__(self, allow_bill_from_preparing=True):
        self.allow_bill_from_preparing = allow_bill_from_preparing
        self._create_lock = asyncio.Lock()
        # A lock lives only while some request for that order holds it
        self._order_locks = weakref.WeakValueDictionary()

    @property
    def _repo(self):
        return current_domain.repository_for(Order)

    def _lock_for(self, order_id) -> asyncio.Lock:
        lock = self._order_locks.get(str(order_id))
        if lock is None:
            lock = asyncio.Lock()
            self._order_locks[str(order_id)] = lock
        return lock

    async def create_order(self, draft: dict) -> Order:
        pricing = draft["pricing"]
        command = PlaceOrder(
            table_id=draft.get("table_id"),
            items=json.dumps(draft["items"]),
            subtotal=pricing["subtotal"],
            tax_amount=pricing.get("tax_amount", 0.0),
            total=pricing["total"],
            currency=pricing.get("currency", "Rs."),
            customer_name=draft.get("customer_name"),
            notes=draft.get("notes"),
        )
        async with self._create_lock:
            order_id = current_domain.process(command, asynchronous=False)
        return self._repo.get(order_id)

    async def update_order_status(self, order_id: str, status: str) -> StatusChange:
        async with self._lock_for(order_id):
            previous_status = current_domain.process(
                ChangeOrderStatus(
                    order_id=order_id,
                    status=status,
                    allow_bill_from_preparing=self.allow_bill_from_preparing,
                ),
                asynchronous=False,
            )
            return StatusChange(order=self._repo.get(order_id), previous_status=previous_status)

    async def list_orders(self, status: str | None = None) -> list[Order]:
        if status:
            return self._repo.find_by_status(status)
        return self._repo.find_all()

    async def get_order(self, order_id: str) -> Order:
        return self._repo.get(order_id)
