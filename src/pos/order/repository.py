"""Repository for the Order aggregate with the queries the engine needs."""

from pos.domain import pos
from pos.order.order import ACTIVE_STATUSES, Order

# Rows fetched per round-trip when a query must return every match.
PAGE_SIZE = 200


def fetch_all(query) -> list:
    """Every row ``query`` matches, fetched one page at a time."""
    items = []
    offset = 0
    while True:
        page = query.offset(offset).limit(PAGE_SIZE).all()
        items.extend(page.items)
        if not page.has_next:
            return items
        offset += PAGE_SIZE


@pos.repository(part_of=Order)
class OrderRepository:
    def latest_order_number(self) -> int:
        """Highest order number issued so far, or 0 when no orders exist."""
        latest = self._dao.query.order_by("-order_number").limit(1).all().first
        return latest.order_number if latest else 0

    def find_active_for_table(self, table_id) -> Order | None:
        """The preparing or served order bound to ``table_id``, if any."""
        for status in ACTIVE_STATUSES:
            results = self._dao.query.filter(table_id=str(table_id), status=status.value).limit(1).all()
            if results and results.items:
                return results.first
        return None

    def find_by_status(self, status) -> list[Order]:
        """Orders in ``status``, oldest first."""
        return fetch_all(self._dao.query.filter(status=status).order_by("order_number"))

    def find_all(self) -> list[Order]:
        """Every order, oldest first."""
        return fetch_all(self._dao.query.order_by("order_number"))
