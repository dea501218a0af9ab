"""Order placement — command and handler.

The handler is where invariants spanning several orders are enforced: order
numbers keep increasing, orders bind only registered tables, and a table never
carries two live orders.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from pos.domain import pos
from pos.errors import TableConflictError
from pos.order.order import Order
from pos.table.table import DiningTable

logger = structlog.get_logger(__name__)


@pos.command(part_of="Order")
class PlaceOrder:
    table_id = Identifier()  # Omitted for takeaway
    items = Text(required=True)  # JSON: list of line item dicts
    subtotal = Float(required=True)
    tax_amount = Float(default=0.0)
    total = Float(required=True)
    currency = String(max_length=10, default="Rs.")
    customer_name = String(max_length=255)
    notes = Text()


@pos.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        repo = current_domain.repository_for(Order)
        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items

        if command.table_id:
            try:
                current_domain.repository_for(DiningTable).get(command.table_id)
            except ObjectNotFoundError:
                raise ValidationError({"table_id": [f"Table {command.table_id} is not registered"]}) from None

            bound = repo.find_active_for_table(command.table_id)
            if bound is not None:
                raise TableConflictError(str(command.table_id), bound.order_number)

        order = Order.create(
            order_number=repo.latest_order_number() + 1,
            items_data=items_data,
            pricing={
                "subtotal": command.subtotal,
                "tax_amount": command.tax_amount or 0.0,
                "total": command.total,
                "currency": command.currency or "Rs.",
            },
            table_id=command.table_id,
            customer_name=command.customer_name,
            notes=command.notes,
        )
        repo.add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            order_type=order.order_type,
            table_id=str(order.table_id) if order.table_id else None,
            total=order.pricing.total,
        )
        return str(order.id)
