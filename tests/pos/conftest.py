"""Builders shared by the POS test suite."""

from types import SimpleNamespace

import pytest
from protean import current_domain
from pos.cart.catalog import ProductSnapshot
from pos.money import price_lines
from pos.order.order import Order
from pos.table.table import DiningTable


def line(product_id="prod-burger", name="Burger", quantity=1, unit_price=250.0, variant=None, notes=None):
    return {
        "product_id": product_id,
        "product_name": name,
        "variant": variant,
        "quantity": quantity,
        "unit_price": unit_price,
        "notes": notes,
    }


def make_draft(table_id=None, customer_name=None, items=None, tax_rate=10.0):
    """Two burgers and a soda unless ``items`` says otherwise."""
    items = items or [line(quantity=2), line("prod-soda", "Soda", 1, 80.0)]
    return {
        "table_id": table_id,
        "items": items,
        "pricing": price_lines(items, tax_rate),
        "customer_name": customer_name,
        "notes": None,
    }


def make_order(order_number=1, table_id=None, customer_name=None, items=None, tax_rate=10.0):
    """An in-memory order (not persisted) in ``preparing``."""
    draft = make_draft(table_id=table_id, customer_name=customer_name, items=items, tax_rate=tax_rate)
    order = Order.create(
        order_number=order_number,
        items_data=draft["items"],
        pricing=draft["pricing"],
        table_id=table_id,
        customer_name=customer_name,
    )
    order._events.clear()
    return order


@pytest.fixture()
def menu():
    return SimpleNamespace(
        burger=ProductSnapshot(
            product_id="prod-burger", name="Burger", price=250.0, variants=["Regular", "Large"], category_id="mains"
        ),
        soda=ProductSnapshot(product_id="prod-soda", name="Soda", price=80.0),
        fries=ProductSnapshot(product_id="prod-fries", name="Fries", price=120.5),
        soup=ProductSnapshot(product_id="prod-soup", name="Soup", price=90.0, is_available=False),
    )


@pytest.fixture()
def order_factory():
    return make_order


@pytest.fixture()
def draft_factory():
    return make_draft


@pytest.fixture()
def line_factory():
    return line


@pytest.fixture()
def floor():
    """Tables 3 and 4, registered with the table repository."""
    repo = current_domain.repository_for(DiningTable)
    tables = {
        "table-3": DiningTable(id="table-3", name="Table 3", capacity=4),
        "table-4": DiningTable(id="table-4", name="Table 4", capacity=2),
    }
    for table in tables.values():
        repo.add(table)
    return tables
