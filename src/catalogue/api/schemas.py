"""Pydantic request/response schemas for the Catalogue API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# --- Request Schemas ---


class PriceFields(BaseModel):
    model_config = ConfigDict(extra="forbid", from_attributes=True)

    current: float = Field(..., ge=0)
    old: float | None = Field(None, ge=0)


class CreateProductRequest(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "examples": [
                {
                    "name": "Classic Black T-Shirt",
                    "category_id": 1,
                    "price": {"current": 19.99, "old": 24.99},
                    "description": "Premium cotton crew-neck tee in black.",
                    "quantity": 120,
                }
            ]
        },
    )

    name: str = Field(..., min_length=1, max_length=255)
    category_id: int = Field(..., ge=1)
    price: PriceFields
    description: str = ""
    quantity: int = Field(0, ge=0)
    rating: int | None = Field(None, ge=0, le=5)


class CreateCategoryRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", json_schema_extra={"examples": [{"name": "Electronics"}]})

    name: str = Field(..., min_length=1, max_length=100)


# --- Response Schemas ---


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    category_id: int
    price: PriceFields
    rating: int | None = None
    description: str = ""
    quantity: int = 0


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class IdResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"id": 7}]}}

    id: int
