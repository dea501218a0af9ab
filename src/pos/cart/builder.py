"""Cart builder — one terminal's session around its cart.

The builder owns the cart exclusively; carts are never shared or merged
between terminals. Committing hands the priced draft to the lifecycle
manager and, only once the order exists, resets the cart and releases the
table to the new order.
"""

import structlog

from pos.cart.cart import Cart
from pos.settings import PosSettings

logger = structlog.get_logger(__name__)


class CartBuilder:
    def __init__(self, lifecycle, settings=None, terminal_id=None):
        self.lifecycle = lifecycle
        self.settings = settings or PosSettings()
        self.cart = Cart.create(terminal_id=terminal_id)
        self.table = None

    # -------------------------------------------------------------------
    # Lines
    # -------------------------------------------------------------------
    def add_item(self, product, variant=None, quantity=1):
        return self.cart.add_item(product, variant=variant, quantity=quantity)

    def remove_item(self, product_id, variant=None):
        self.cart.remove_item(product_id, variant=variant)

    def set_quantity(self, product_id, quantity, variant=None):
        self.cart.set_quantity(product_id, quantity, variant=variant)

    def set_notes(self, product_id, notes, variant=None):
        self.cart.set_notes(product_id, notes, variant=variant)

    @property
    def lines(self):
        return self.cart.snapshot_lines()

    def totals(self):
        return self.cart.totals(self.settings.tax_rate, self.settings.currency)

    # -------------------------------------------------------------------
    # Table focus
    # -------------------------------------------------------------------
    def assign_table(self, table):
        """Serve ``table`` (dine-in), or ``None`` for takeaway."""
        self.table = table
        self.cart.assign_table(table.id if table is not None else None)

    def toggle_table(self, table):
        """Select ``table``, or deselect it if it is already the current one."""
        if self.table is not None and str(self.table.id) == str(table.id):
            self.assign_table(None)
        else:
            self.assign_table(table)
        return self.table

    @property
    def is_takeaway(self):
        return self.cart.table_id is None

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def discard(self):
        self.cart.clear()
        self.table = None

    async def commit(self, customer_name=None, notes=None):
        """Turn the cart into an order.

        Raises:
            EmptyCartError: nothing to commit; the cart is unchanged.
            TableConflictError: the table already has a live order.
        """
        draft = self.cart.to_draft(
            tax_rate=self.settings.tax_rate,
            currency=self.settings.currency,
            customer_name=customer_name,
            notes=notes,
        )
        order = await self.lifecycle.create(draft)
        logger.info(
            "Cart committed",
            terminal_id=self.cart.terminal_id,
            order_id=str(order.id),
            order_number=order.order_number,
            line_count=len(draft["items"]),
        )
        self.discard()
        return order
