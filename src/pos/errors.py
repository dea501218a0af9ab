"""Typed failures raised by the order engine.

Rule violations subclass Protean's ``ValidationError`` so that adapters can
treat them like any other domain validation failure, while callers that care
can catch the specific type.
"""

from protean.exceptions import ValidationError


class EmptyCartError(ValidationError):
    """Commit attempted on a cart without line items."""

    def __init__(self):
        super().__init__({"cart": ["Cannot commit an empty cart"]})


class InvalidTransitionError(ValidationError):
    """Status change not present in the transition graph."""

    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__({"status": [f"Cannot transition from {current} to {target}"]})


class TableConflictError(ValidationError):
    """Table is already bound to a preparing or served order."""

    def __init__(self, table_id, order_number=None):
        self.table_id = table_id
        self.order_number = order_number
        detail = f"Table {table_id} already has an active order"
        if order_number is not None:
            detail += f" (#{order_number})"
        super().__init__({"table_id": [detail]})


class TransportError(Exception):
    """A round-trip to the order store failed; safe to retry."""
