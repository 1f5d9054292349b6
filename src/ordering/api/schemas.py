"""Pydantic request/response schemas for the Ordering API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from catalogue.api.schemas import ProductResponse

# --- Request Schemas ---


class CartItemRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    product_id: int = Field(..., ge=1)
    quantity: int = Field(1, ge=1)


class AddCartItemsRequest(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={"examples": [{"items": [{"product_id": 3, "quantity": 2}, {"product_id": 8}]}]},
    )

    items: list[CartItemRequest] = Field(..., min_length=1)


class CreateOrderRequest(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={"examples": [{"product_id": 3, "quantity": 1}]},
    )

    product_id: int = Field(..., ge=1)
    quantity: int = Field(1, ge=1)
    shipping_address_id: int | None = Field(None, ge=1)


# --- Response Schemas ---


class CartItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product: ProductResponse
    quantity: int


class CartCountResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"count": 3}]}}

    count: int


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: int
    product: ProductResponse | None = None
    quantity: int
    shipping_address_id: int | None = None
    ordered_at: datetime
