from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class OrderCreate(BaseModel):
    """Body of POST /receive (camelCase on the wire)."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    buyer_id: str = Field(..., alias="buyerId", description="ID of the buyer")
    product1_quantity: int = Field(0, alias="product1Quantity")
    product2_quantity: int = Field(0, alias="product2Quantity")
    total_price: float = Field(..., alias="totalPrice")


class OrderStatusUpdate(BaseModel):
    # Left untyped: the 1..3 check belongs to OrderService so that bad
    # values come back as 400, not as a schema 422.
    status: Any = None


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    buyer_id: str
    product1_quantity: int
    product2_quantity: int
    total_price: float
    status: int
    cashier: Optional[int] = None
    timestamp: datetime


class MessageResponse(BaseModel):
    message: str


class InsertResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    insert_id: int = Field(..., alias="insertId")
    affected_rows: int = Field(..., alias="affectedRows")


class OrderCreatedResponse(BaseModel):
    message: str
    results: InsertResult
