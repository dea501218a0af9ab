"""Pydantic request/response schemas for the POS API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands and aggregates.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class OrderLineSchema(BaseModel):
    product_id: str
    product_name: str
    variant: str | None = None
    quantity: int = Field(ge=1)
    unit_price: float = Field(ge=0)
    notes: str | None = None


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    items: list[OrderLineSchema]
    table_id: str | None = None
    customer_name: str | None = None
    notes: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [
                        {
                            "product_id": "prod-burger",
                            "product_name": "Burger",
                            "variant": None,
                            "quantity": 2,
                            "unit_price": 250.0,
                        }
                    ],
                    "table_id": None,
                    "customer_name": "Asha",
                }
            ]
        }
    }


class ChangeStatusRequest(BaseModel):
    status: str


class RegisterTableRequest(BaseModel):
    name: str
    capacity: int = Field(ge=1)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderPlacedResponse(BaseModel):
    order_id: str
    order_number: int


class OrderResponse(BaseModel):
    order_id: str
    order_number: int
    order_type: str
    table_id: str | None = None
    status: str
    customer_name: str | None = None
    notes: str | None = None
    items: list[OrderLineSchema]
    subtotal: float
    tax_amount: float
    total: float
    currency: str
    created_at: datetime | None = None


class KitchenTicketResponse(BaseModel):
    order_id: str
    order_number: int
    order_type: str
    table_id: str | None = None
    items: list[OrderLineSchema]
    notes: str | None = None
    elapsed_minutes: int
    urgent: bool


class TableIdResponse(BaseModel):
    table_id: str


class TableOccupancyResponse(BaseModel):
    table_id: str
    name: str
    capacity: int
    status: str
    order_id: str | None = None
    order_number: int | None = None
    order_total: float | None = None
