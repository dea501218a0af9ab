"""Money arithmetic over order line items.

Prices travel as floats (as stored on aggregates) but every sum and the tax
computation happen in ``Decimal`` so that cents never drift. Tax is rounded
half-up to two places. ``total`` is defined as ``subtotal + tax_amount`` of the
stored values, so the identity holds exactly on every priced order.
"""

from decimal import ROUND_HALF_UP, Decimal

CENTS = Decimal("0.01")


def to_decimal(amount) -> Decimal:
    return Decimal(str(amount))


def line_total(unit_price, quantity) -> Decimal:
    """Price of one line: unit price × quantity."""
    return to_decimal(unit_price) * int(quantity)


def subtotal_of(lines) -> float:
    """Sum of line totals.

    Args:
        lines: Iterable of objects or dicts exposing ``unit_price`` and
            ``quantity``.
    """
    total = Decimal("0")
    for line in lines:
        if isinstance(line, dict):
            total += line_total(line["unit_price"], line["quantity"])
        else:
            total += line_total(line.unit_price, line.quantity)
    return float(total.quantize(CENTS, rounding=ROUND_HALF_UP))


def tax_for(subtotal, tax_rate) -> float:
    """Tax on a subtotal at ``tax_rate`` percent, rounded to cents."""
    amount = to_decimal(subtotal) * to_decimal(tax_rate) / Decimal("100")
    return float(amount.quantize(CENTS, rounding=ROUND_HALF_UP))


def price_lines(lines, tax_rate=0.0, currency="Rs.") -> dict:
    """Compute the pricing summary for a set of lines."""
    subtotal = subtotal_of(lines)
    tax_amount = tax_for(subtotal, tax_rate)
    return {
        "subtotal": subtotal,
        "tax_amount": tax_amount,
        "total": subtotal + tax_amount,
        "currency": currency,
    }


def format_amount(amount, currency="Rs.") -> str:
    """Render an amount with its currency label, e.g. ``Rs. 1,250.00``."""
    value = to_decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)
    return f"{currency} {value:,.2f}"
