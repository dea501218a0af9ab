"""Order history search — a filtered, read-only view over an order list."""

ALL_STATUSES = "all"


def matches_text(order, text) -> bool:
    """Order number contains ``text``, or customer name contains it (any case)."""
    if not text:
        return True
    if text in str(order.order_number):
        return True
    return bool(order.customer_name) and text.lower() in order.customer_name.lower()


def matches_status(order, status) -> bool:
    if not status or status == ALL_STATUSES:
        return True
    return order.status == status


def search_orders(orders, text=None, status=None) -> list:
    """Orders matching both the text and the status filter, in source order."""
    return [order for order in orders if matches_text(order, text) and matches_status(order, status)]
