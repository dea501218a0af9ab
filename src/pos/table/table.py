"""Dining table aggregate — static floor plan data.

Tables only know their name and capacity. Whether a table is occupied is
never stored here; see ``pos.table.occupancy``.
"""

from enum import Enum

from protean.fields import Integer, String

from pos.domain import pos


class TableStatus(Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"


@pos.aggregate
class DiningTable:
    name = String(required=True, max_length=50)
    capacity = Integer(required=True, min_value=1)

    @classmethod
    def register(cls, name, capacity):
        return cls(name=name, capacity=capacity)
