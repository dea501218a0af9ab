"""Order aggregate — the authoritative record of a committed order.

An order is created from a cart snapshot and is never structurally edited
afterwards: line items, prices, table and timestamps are frozen at commit.
Only ``status`` changes, and only along the transition graph.

State Machine (4 states):
    PREPARING → SERVED → BILLED
    PREPARING → BILLED            (when billing before serve is allowed)
    PREPARING/SERVED → CANCELLED
    BILLED and CANCELLED are terminal.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from pos.domain import pos
from pos.errors import InvalidTransitionError
from pos.money import subtotal_of
from pos.order.events import OrderCreated, OrderStatusChanged


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PREPARING = "preparing"
    SERVED = "served"
    BILLED = "billed"
    CANCELLED = "cancelled"


class OrderType(Enum):
    DINE_IN = "dine-in"
    TAKEAWAY = "takeaway"


ACTIVE_STATUSES = frozenset({OrderStatus.PREPARING, OrderStatus.SERVED})
TERMINAL_STATUSES = frozenset({OrderStatus.BILLED, OrderStatus.CANCELLED})

# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PREPARING: {
        OrderStatus.SERVED,
        OrderStatus.BILLED,  # Only when billing before serve is allowed
        OrderStatus.CANCELLED,
    },
    OrderStatus.SERVED: {OrderStatus.BILLED, OrderStatus.CANCELLED},
    OrderStatus.BILLED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


def allowed_transitions(status, allow_bill_from_preparing=True):
    """Return the set of statuses reachable from ``status`` in one step."""
    current = OrderStatus(status)
    targets = set(_VALID_TRANSITIONS[current])
    if current == OrderStatus.PREPARING and not allow_bill_from_preparing:
        targets.discard(OrderStatus.BILLED)
    return targets


def is_active_status(status) -> bool:
    """True while the order still holds its table and kitchen slot."""
    return OrderStatus(status) in ACTIVE_STATUSES


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@pos.value_object(part_of="Order")
class OrderPricing:
    """Amounts locked at commit time.

    Later catalogue or tax changes never reach an existing order.
    """

    subtotal = Float(default=0.0, min_value=0.0)
    tax_amount = Float(default=0.0, min_value=0.0)
    total = Float(default=0.0, min_value=0.0)
    currency = String(max_length=10, default="Rs.")

    @invariant.post
    def total_must_equal_subtotal_plus_tax(self):
        if self.total != self.subtotal + self.tax_amount:
            raise ValidationError({"total": ["Total must equal subtotal plus tax"]})


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@pos.entity(part_of="Order")
class OrderItem:
    """A line item with the product name and price copied from the catalogue."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    variant = String(max_length=100)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    notes = String(max_length=500)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@pos.aggregate
class Order:
    order_number = Integer(required=True, min_value=1)
    order_type = String(required=True, choices=OrderType)
    table_id = Identifier()
    items = HasMany(OrderItem)
    pricing = ValueObject(OrderPricing)
    status = String(choices=OrderStatus, default=OrderStatus.PREPARING.value)
    customer_name = String(max_length=255)
    notes = Text()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def table_must_match_order_type(self):
        if self.order_type == OrderType.DINE_IN.value and not self.table_id:
            raise ValidationError({"table_id": ["Dine-in orders must reference a table"]})
        if self.order_type == OrderType.TAKEAWAY.value and self.table_id:
            raise ValidationError({"table_id": ["Takeaway orders cannot reference a table"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        order_number,
        items_data,
        pricing,
        table_id=None,
        customer_name=None,
        notes=None,
    ):
        """Create a new order in PREPARING state from a cart snapshot.

        Args:
            order_number: Display number assigned by the store.
            items_data: List of dicts with product_id, product_name, variant,
                        quantity, unit_price and notes.
            pricing: Dict with subtotal, tax_amount, total, currency.
            table_id: Table for dine-in orders; ``None`` means takeaway.
        """
        if not items_data:
            raise ValidationError({"items": ["An order needs at least one item"]})
        if pricing.get("subtotal") != subtotal_of(items_data):
            raise ValidationError({"pricing": ["Subtotal does not match line items"]})

        now = datetime.now(UTC)
        order_type = OrderType.DINE_IN if table_id else OrderType.TAKEAWAY

        order = cls(
            order_number=order_number,
            order_type=order_type.value,
            table_id=table_id,
            items=[
                OrderItem(
                    product_id=item["product_id"],
                    product_name=item["product_name"],
                    variant=item.get("variant"),
                    quantity=item["quantity"],
                    unit_price=item["unit_price"],
                    notes=item.get("notes"),
                )
                for item in items_data
            ],
            pricing=OrderPricing(
                subtotal=pricing["subtotal"],
                tax_amount=pricing.get("tax_amount", 0.0),
                total=pricing["total"],
                currency=pricing.get("currency", "Rs."),
            ),
            status=OrderStatus.PREPARING.value,
            customer_name=customer_name,
            notes=notes,
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderCreated(
                order_id=str(order.id),
                order_number=order.order_number,
                order_type=order.order_type,
                table_id=str(table_id) if table_id else None,
                items=json.dumps(order.line_items()),
                subtotal=order.pricing.subtotal,
                tax_amount=order.pricing.tax_amount,
                total=order.pricing.total,
                currency=order.pricing.currency,
                customer_name=customer_name,
                created_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Read helpers
    # -------------------------------------------------------------------
    @property
    def is_active(self):
        return is_active_status(self.status)

    @property
    def is_terminal(self):
        return OrderStatus(self.status) in TERMINAL_STATUSES

    def line_items(self):
        """Line items as plain dicts, in commit order."""
        return [
            {
                "product_id": str(item.product_id),
                "product_name": item.product_name,
                "variant": item.variant,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "notes": item.notes,
            }
            for item in self.items
        ]

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def transition_to(self, target_status, allow_bill_from_preparing=True):
        """Move the order to ``target_status`` if the graph allows it.

        Raises:
            InvalidTransitionError: target unknown, not reachable from the
                current status, or the order is already terminal.
        """
        current = OrderStatus(self.status)
        try:
            target = OrderStatus(target_status.value if isinstance(target_status, OrderStatus) else target_status)
        except ValueError:
            raise InvalidTransitionError(current.value, target_status) from None

        if target not in allowed_transitions(current, allow_bill_from_preparing):
            raise InvalidTransitionError(current.value, target.value)

        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                table_id=str(self.table_id) if self.table_id else None,
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )

    def serve(self):
        """Kitchen confirms the order left the pass."""
        self.transition_to(OrderStatus.SERVED)

    def bill(self, allow_bill_from_preparing=True):
        self.transition_to(OrderStatus.BILLED, allow_bill_from_preparing)

    def cancel(self):
        self.transition_to(OrderStatus.CANCELLED)
