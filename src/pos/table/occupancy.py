"""Table occupancy — derived on every read from the live order set.

A table is ``occupied`` while an order in ``preparing`` or ``served``
references it and ``available`` otherwise. Nothing here mutates orders or
tables, and nothing is cached: cancelling or billing the bound order frees
the table on the next recomputation without a reset step.
"""

from protean.fields import Float, Identifier, Integer, String

from pos.domain import pos
from pos.order.order import is_active_status
from pos.table.table import TableStatus


@pos.value_object
class TableOccupancy:
    """One row of the floor view."""

    table_id = Identifier(required=True)
    name = String(required=True, max_length=50)
    capacity = Integer(required=True)
    status = String(required=True, choices=TableStatus)
    order_id = Identifier()
    order_number = Integer()
    order_total = Float()


def _table_key(table):
    return str(table.id) if hasattr(table, "id") else str(table)


def active_order(table, orders):
    """The live order bound to ``table`` (object or id), or ``None``."""
    table_id = _table_key(table)
    for order in orders:
        if order.table_id and str(order.table_id) == table_id and is_active_status(order.status):
            return order
    return None


def table_status(table, orders) -> TableStatus:
    if active_order(table, orders) is not None:
        return TableStatus.OCCUPIED
    return TableStatus.AVAILABLE


def occupancy_board(tables, orders) -> list[TableOccupancy]:
    """Occupancy rows for ``tables``, in the order given."""
    rows = []
    for table in tables:
        order = active_order(table, orders)
        rows.append(
            TableOccupancy(
                table_id=str(table.id),
                name=table.name,
                capacity=table.capacity,
                status=(TableStatus.OCCUPIED if order else TableStatus.AVAILABLE).value,
                order_id=str(order.id) if order else None,
                order_number=order.order_number if order else None,
                order_total=order.pricing.total if order else None,
            )
        )
    return rows


def conflicting_tables(orders) -> dict:
    """Tables referenced by more than one live order, mapped to their order numbers.

    Always empty while the store enforces single binding; terminals use it as
    a consistency probe over polled snapshots.
    """
    live = {}
    for order in orders:
        if order.table_id and is_active_status(order.status):
            live.setdefault(str(order.table_id), []).append(order.order_number)
    return {table_id: numbers for table_id, numbers in live.items() if len(numbers) > 1}


class TableOccupancyTracker:
    """Floor view over a terminal's order feed."""

    def __init__(self, feed, tables=()):
        self.feed = feed
        self.tables = list(tables)

    def status(self, table) -> TableStatus:
        return table_status(table, self.feed.orders)

    def active_order(self, table):
        return active_order(table, self.feed.orders)

    def board(self) -> list[TableOccupancy]:
        return occupancy_board(self.tables, self.feed.orders)
