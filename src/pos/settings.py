"""Deployment settings consumed by the engine (currency, tax, policy flags)."""

import os

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Integer, String

from pos.domain import pos

_TRUTHY = {"1", "true", "yes", "on"}


@pos.value_object
class PosSettings:
    """Settings snapshot for a deployment.

    ``tax_rate`` is a percentage applied to the order subtotal.
    ``allow_bill_from_preparing`` lets cashiers bill an order the kitchen has
    not confirmed as served yet.
    """

    currency = String(max_length=10, default="Rs.")
    tax_rate = Float(default=0.0, min_value=0.0)
    allow_bill_from_preparing = Boolean(default=True)
    urgent_after_minutes = Integer(default=15, min_value=1)
    kitchen_poll_seconds = Float(default=5.0)
    orders_poll_seconds = Float(default=10.0)

    @invariant.post
    def poll_intervals_must_be_positive(self):
        if self.kitchen_poll_seconds <= 0 or self.orders_poll_seconds <= 0:
            raise ValidationError({"poll_seconds": ["Poll intervals must be positive"]})


def _env_flag(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def load_settings() -> PosSettings:
    """Build settings from ``POS_*`` environment variables."""
    return PosSettings(
        currency=os.getenv("POS_CURRENCY", "Rs."),
        tax_rate=float(os.getenv("POS_TAX_RATE", "0")),
        allow_bill_from_preparing=_env_flag("POS_ALLOW_BILL_FROM_PREPARING", True),
        urgent_after_minutes=int(os.getenv("POS_URGENT_AFTER_MINUTES", "15")),
        kitchen_poll_seconds=float(os.getenv("POS_KITCHEN_POLL_SECONDS", "5")),
        orders_poll_seconds=float(os.getenv("POS_ORDERS_POLL_SECONDS", "10")),
    )
