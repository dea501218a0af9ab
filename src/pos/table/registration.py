"""Table registration — command and handler."""

import structlog
from protean import handle
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from pos.domain import pos
from pos.order.repository import fetch_all
from pos.table.table import DiningTable

logger = structlog.get_logger(__name__)


@pos.command(part_of="DiningTable")
class RegisterTable:
    name = String(required=True, max_length=50)
    capacity = Integer(required=True, min_value=1)


@pos.command_handler(part_of=DiningTable)
class RegisterTableHandler:
    @handle(RegisterTable)
    def register_table(self, command):
        table = DiningTable.register(name=command.name, capacity=command.capacity)
        current_domain.repository_for(DiningTable).add(table)
        logger.info("Table registered", table_id=str(table.id), name=table.name, capacity=table.capacity)
        return str(table.id)


def list_tables():
    """Every registered table, ordered by name."""
    repo = current_domain.repository_for(DiningTable)
    return fetch_all(repo._dao.query.order_by("name"))
