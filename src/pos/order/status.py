"""Order status changes — command and handler."""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from pos.domain import pos
from pos.order.order import Order


@pos.command(part_of="Order")
class ChangeOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    allow_bill_from_preparing = Boolean(default=True)


@pos.command_handler(part_of=Order)
class ChangeOrderStatusHandler:
    @handle(ChangeOrderStatus)
    def change_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous_status = order.status
        order.transition_to(command.status, command.allow_bill_from_preparing)
        repo.add(order)
        return previous_status
