"""Cart aggregate — a terminal's staging area for the next order.

The cart lives only as long as the terminal session that owns it and is
never persisted. Lines merge on product + variant, quantities stay at one or
more (dropping a quantity to zero removes the line), and the optional table
decides between dine-in and takeaway.
"""

from protean.exceptions import ValidationError
from protean.fields import Float, HasMany, Identifier, Integer, String

from pos.domain import pos
from pos.errors import EmptyCartError
from pos.money import price_lines


@pos.entity(part_of="Cart")
class CartLine:
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    variant = String(max_length=100)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    notes = String(max_length=500)


@pos.aggregate
class Cart:
    terminal_id = String(max_length=100)
    table_id = Identifier()  # None means takeaway
    lines = HasMany(CartLine)

    @classmethod
    def create(cls, terminal_id=None):
        return cls(terminal_id=terminal_id)

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def _find_line(self, product_id, variant=None):
        return next(
            (
                line
                for line in self.lines
                if str(line.product_id) == str(product_id) and (line.variant or None) == (variant or None)
            ),
            None,
        )

    def _require_line(self, product_id, variant=None):
        line = self._find_line(product_id, variant)
        if line is None:
            raise ValidationError({"product_id": ["Item not found in cart"]})
        return line

    def add_item(self, product, variant=None, quantity=1):
        """Add a catalogue product, or increase the quantity of a matching line."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if not product.is_available:
            raise ValidationError({"product_id": [f"{product.name} is not available"]})
        if variant and variant not in (product.variants or []):
            raise ValidationError({"variant": [f"{product.name} has no variant {variant}"]})

        existing = self._find_line(product.product_id, variant)
        if existing:
            # A line keeps one price and name; merging must not reprice it
            if existing.unit_price != product.price or existing.product_name != product.name:
                raise ValidationError(
                    {"product_id": [f"{product.name} is already in the cart at a different price or name"]}
                )
            existing.quantity += quantity
            return existing

        line = CartLine(
            product_id=product.product_id,
            product_name=product.name,
            variant=variant,
            quantity=quantity,
            unit_price=product.price,
        )
        self.add_lines(line)
        return line

    def remove_item(self, product_id, variant=None):
        self.remove_lines(self._require_line(product_id, variant))

    def set_quantity(self, product_id, quantity, variant=None):
        """Set a line's quantity; zero or less removes the line."""
        line = self._require_line(product_id, variant)
        if quantity < 1:
            self.remove_lines(line)
            return
        line.quantity = quantity

    def set_notes(self, product_id, notes, variant=None):
        self._require_line(product_id, variant).notes = notes or None

    def assign_table(self, table_id):
        """Bind the cart to a table, or pass ``None`` for takeaway."""
        self.table_id = str(table_id) if table_id else None

    def clear(self):
        """Drop every line and release the table."""
        for line in list(self.lines):
            self.remove_lines(line)
        self.table_id = None

    # -------------------------------------------------------------------
    # Pricing and commit snapshot
    # -------------------------------------------------------------------
    @property
    def is_empty(self):
        return not self.lines

    def snapshot_lines(self):
        return [
            {
                "product_id": str(line.product_id),
                "product_name": line.product_name,
                "variant": line.variant,
                "quantity": line.quantity,
                "unit_price": line.unit_price,
                "notes": line.notes,
            }
            for line in self.lines
        ]

    def totals(self, tax_rate=0.0, currency="Rs."):
        return price_lines(self.snapshot_lines(), tax_rate, currency)

    def to_draft(self, tax_rate=0.0, currency="Rs.", customer_name=None, notes=None):
        """Freeze the cart into an order draft.

        Raises:
            EmptyCartError: the cart has no lines.
        """
        if self.is_empty:
            raise EmptyCartError()

        lines = self.snapshot_lines()
        return {
            "table_id": self.table_id,
            "items": lines,
            "pricing": price_lines(lines, tax_rate, currency),
            "customer_name": customer_name or None,
            "notes": notes or None,
        }
