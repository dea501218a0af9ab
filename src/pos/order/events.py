"""Domain events for the Order aggregate.

Events are immutable facts written to the event store when an order is
placed or changes status. Print and notification sinks consume the same
facts through the lifecycle manager.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from pos.domain import pos


@pos.event(part_of="Order")
class OrderCreated:
    """An order was committed from a terminal's cart."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    order_number = Integer(required=True)
    order_type = String(required=True)
    table_id = Identifier()
    items = Text(required=True)  # JSON: list of line item dicts
    subtotal = Float(required=True)
    tax_amount = Float(required=True)
    total = Float(required=True)
    currency = String()
    customer_name = String()
    created_at = DateTime(required=True)


@pos.event(part_of="Order")
class OrderStatusChanged:
    """An order moved along the status graph."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    order_number = Integer(required=True)
    table_id = Identifier()
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)
