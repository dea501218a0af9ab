from protean import current_domain

from pos.table.registration import RegisterTable, list_tables
from pos.table.table import DiningTable


def test_register_table():
    table_id = current_domain.process(RegisterTable(name="Table 3", capacity=4), asynchronous=False)

    table = current_domain.repository_for(DiningTable).get(table_id)
    assert table.name == "Table 3"
    assert table.capacity == 4


def test_list_tables_orders_by_name():
    for name in ("Table 2", "Patio", "Table 1"):
        current_domain.process(RegisterTable(name=name, capacity=2), asynchronous=False)

    assert [table.name for table in list_tables()] == ["Patio", "Table 1", "Table 2"]


def test_no_tables_registered():
    assert list_tables() == []
