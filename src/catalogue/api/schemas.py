"""Pydantic request/response schemas for the Catalogue API."""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- Product Request Schemas ---


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "title": "Classic Black T-Shirt",
                    "seller_id": "seller-042",
                    "category_id": "cat-apparel-001",
                    "price": 19.99,
                    "currency": "USD",
                    "stock": 120,
                }
            ]
        }
    }

    title: str = Field(..., max_length=255)
    seller_id: str | None = None
    category_id: str | None = None
    price: float = Field(..., ge=0)
    currency: str = Field("USD", max_length=3)
    stock: int = Field(0, ge=0)


class ChangePriceRequest(BaseModel):
    price: float = Field(..., ge=0)


class AdjustStockRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"delta": -3, "reason": "Damaged in warehouse"}]}}

    delta: int
    reason: str | None = Field(None, max_length=255)


# --- Response Schemas ---


class ProductIdResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"product_id": "prod-abc123"}]}}

    product_id: str


class ProductResponse(BaseModel):
    product_id: str
    title: str
    seller_id: str | None = None
    category_id: str | None = None
    price: float
    currency: str
    stock: int
    status: str


class StatusResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "ok"}]}}

    status: str = "ok"
