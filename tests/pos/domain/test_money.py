"""Tests for line-item arithmetic and tax."""

from pos.money import format_amount, line_total, price_lines, subtotal_of, tax_for


class TestSubtotal:
    def test_line_total(self):
        assert line_total(250.0, 2) == 500

    def test_subtotal_of_dicts(self, line_factory):
        lines = [line_factory(quantity=2), line_factory("prod-soda", "Soda", 1, 80.0)]
        assert subtotal_of(lines) == 580.0

    def test_subtotal_does_not_drift_on_cents(self, line_factory):
        lines = [line_factory(unit_price=0.1, quantity=1), line_factory("p2", "Tea", 1, 0.2)]
        assert subtotal_of(lines) == 0.3

    def test_empty_subtotal_is_zero(self):
        assert subtotal_of([]) == 0.0


class TestTax:
    def test_ten_percent(self):
        assert tax_for(580.0, 10) == 58.0

    def test_rounds_half_up_to_cents(self):
        assert tax_for(0.25, 10) == 0.03

    def test_zero_rate(self):
        assert tax_for(580.0, 0) == 0.0


class TestPriceLines:
    def test_burgers_and_soda(self, line_factory):
        lines = [line_factory(quantity=2), line_factory("prod-soda", "Soda", 1, 80.0)]
        pricing = price_lines(lines, tax_rate=10)
        assert pricing["subtotal"] == 580.0
        assert pricing["tax_amount"] == 58.0
        assert pricing["total"] == 638.0

    def test_total_is_subtotal_plus_tax(self, line_factory):
        lines = [line_factory(unit_price=120.5, quantity=3), line_factory("p2", "Tea", 7, 33.33)]
        pricing = price_lines(lines, tax_rate=13)
        assert pricing["total"] == pricing["subtotal"] + pricing["tax_amount"]

    def test_currency_is_carried(self, line_factory):
        assert price_lines([line_factory()], currency="USD")["currency"] == "USD"


def test_format_amount():
    assert format_amount(1250, "Rs.") == "Rs. 1,250.00"
