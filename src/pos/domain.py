"""Point-of-sale bounded context — orders, tables, carts and kitchen queue.

Handles the order lifecycle (preparing → served → billed, or cancelled),
table occupancy derived from live orders, and the per-terminal cart that
commits into an order.
"""

import structlog
from protean.domain import Domain

pos = Domain(name="pos")

logger = structlog.get_logger(__name__)
