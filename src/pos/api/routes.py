"""FastAPI routes for the POS — orders, kitchen queue and tables.

Every request is a fresh read of the store, so these endpoints are what
terminals poll. Mutations go through the lifecycle manager.
"""

from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from pos.api.schemas import (
    ChangeStatusRequest,
    KitchenTicketResponse,
    OrderLineSchema,
    OrderPlacedResponse,
    OrderResponse,
    PlaceOrderRequest,
    RegisterTableRequest,
    TableIdResponse,
    TableOccupancyResponse,
)
from pos.cart.builder import CartBuilder
from pos.cart.catalog import ProductSnapshot
from pos.errors import InvalidTransitionError, TableConflictError, TransportError
from pos.kitchen.queue import kitchen_tickets
from pos.order.lifecycle import OrderLifecycleManager
from pos.order.order import OrderStatus
from pos.order.search import search_orders
from pos.order.sinks import LoggingSink
from pos.order.store import DomainOrderStore
from pos.settings import load_settings
from pos.table.occupancy import occupancy_board
from pos.table.registration import RegisterTable, list_tables


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------
@lru_cache
def get_settings():
    return load_settings()


@lru_cache
def get_store():
    return DomainOrderStore(allow_bill_from_preparing=get_settings().allow_bill_from_preparing)


def get_lifecycle(store=Depends(get_store)) -> OrderLifecycleManager:
    return OrderLifecycleManager(store, sinks=[LoggingSink()])


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, (InvalidTransitionError, TableConflictError)):
        return HTTPException(status_code=409, detail=exc.messages)
    if isinstance(exc, ObjectNotFoundError):
        return HTTPException(status_code=404, detail="Order not found")
    if isinstance(exc, TransportError):
        return HTTPException(status_code=503, detail=str(exc))
    return HTTPException(status_code=400, detail=exc.messages)


def _order_response(order) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        order_number=order.order_number,
        order_type=order.order_type,
        table_id=str(order.table_id) if order.table_id else None,
        status=order.status,
        customer_name=order.customer_name,
        notes=order.notes,
        items=[OrderLineSchema(**line) for line in order.line_items()],
        subtotal=order.pricing.subtotal,
        tax_amount=order.pricing.tax_amount,
        total=order.pricing.total,
        currency=order.pricing.currency,
        created_at=order.created_at,
    )


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderPlacedResponse)
async def place_order(
    body: PlaceOrderRequest,
    lifecycle: OrderLifecycleManager = Depends(get_lifecycle),
    settings=Depends(get_settings),
) -> OrderPlacedResponse:
    builder = CartBuilder(lifecycle, settings=settings, terminal_id="api")
    line_notes = {}
    try:
        for line in body.items:
            # Repeated lines merge into one cart line, which holds a single note
            key = (line.product_id, line.variant)
            if key in line_notes and line_notes[key] != line.notes:
                raise HTTPException(
                    status_code=400,
                    detail={"items": [f"Lines for {line.product_name} carry different notes"]},
                )
            line_notes[key] = line.notes
            product = ProductSnapshot(
                product_id=line.product_id,
                name=line.product_name,
                price=line.unit_price,
                variants=[line.variant] if line.variant else [],
            )
            builder.add_item(product, variant=line.variant, quantity=line.quantity)
            if line.notes:
                builder.set_notes(line.product_id, line.notes, variant=line.variant)
        if body.table_id:
            builder.cart.assign_table(body.table_id)
        order = await builder.commit(customer_name=body.customer_name, notes=body.notes)
    except (ValidationError, TransportError) as exc:
        raise _http_error(exc) from exc
    return OrderPlacedResponse(order_id=str(order.id), order_number=order.order_number)


@order_router.get("", response_model=list[OrderResponse])
async def list_orders(
    q: str | None = None,
    status: str | None = None,
    store: DomainOrderStore = Depends(get_store),
) -> list[OrderResponse]:
    orders = await store.list_orders()
    # Newest first, as the order history screen shows them
    return [_order_response(order) for order in reversed(search_orders(orders, text=q, status=status))]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, store: DomainOrderStore = Depends(get_store)) -> OrderResponse:
    try:
        order = await store.get_order(order_id)
    except ObjectNotFoundError as exc:
        raise _http_error(exc) from exc
    return _order_response(order)


@order_router.patch("/{order_id}/status", response_model=OrderResponse)
async def change_order_status(
    order_id: str,
    body: ChangeStatusRequest,
    lifecycle: OrderLifecycleManager = Depends(get_lifecycle),
) -> OrderResponse:
    try:
        order = await lifecycle.transition(order_id, body.status)
    except (ValidationError, ObjectNotFoundError, TransportError) as exc:
        raise _http_error(exc) from exc
    return _order_response(order)


# ---------------------------------------------------------------------------
# Kitchen Router
# ---------------------------------------------------------------------------
kitchen_router = APIRouter(prefix="/kitchen", tags=["kitchen"])


@kitchen_router.get("/queue", response_model=list[KitchenTicketResponse])
async def kitchen_queue(
    store: DomainOrderStore = Depends(get_store),
    settings=Depends(get_settings),
) -> list[KitchenTicketResponse]:
    orders = await store.list_orders(OrderStatus.PREPARING.value)
    return [
        KitchenTicketResponse(
            order_id=ticket.order_id,
            order_number=ticket.order_number,
            order_type=ticket.order.order_type,
            table_id=str(ticket.order.table_id) if ticket.order.table_id else None,
            items=[OrderLineSchema(**line) for line in ticket.order.line_items()],
            notes=ticket.order.notes,
            elapsed_minutes=ticket.elapsed_minutes,
            urgent=ticket.urgent,
        )
        for ticket in kitchen_tickets(orders, urgent_after=settings.urgent_after_minutes)
    ]


# ---------------------------------------------------------------------------
# Table Router
# ---------------------------------------------------------------------------
table_router = APIRouter(prefix="/tables", tags=["tables"])


@table_router.post("", status_code=201, response_model=TableIdResponse)
async def register_table(body: RegisterTableRequest) -> TableIdResponse:
    command = RegisterTable(name=body.name, capacity=body.capacity)
    result = current_domain.process(command, asynchronous=False)
    return TableIdResponse(table_id=result)


@table_router.get("", response_model=list[TableOccupancyResponse])
async def table_board(store: DomainOrderStore = Depends(get_store)) -> list[TableOccupancyResponse]:
    orders = await store.list_orders(OrderStatus.PREPARING.value) + await store.list_orders(OrderStatus.SERVED.value)
    return [TableOccupancyResponse(**row.to_dict()) for row in occupancy_board(list_tables(), orders)]
