"""Catalogue snapshots as seen by the cart at build time."""

from protean.fields import Boolean, Float, Identifier, List, String

from pos.domain import pos


@pos.value_object
class ProductSnapshot:
    """A product as the catalogue served it when the cashier tapped it.

    Only the name and price are copied onto cart lines; later catalogue edits
    never reach an order that was already committed.
    """

    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    variants = List(content_type=String)
    is_available = Boolean(default=True)
    category_id = Identifier()
