"""Billing Schemas"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BillItemCreate(BaseModel):
    """Cart line as the POS sends it; ``id`` is the product id"""
    id: int
    name: str = Field(..., min_length=1, max_length=200)
    price: Decimal = Field(..., ge=0)
    quantity: int = Field(1, ge=1)
    total: Decimal = Field(..., ge=0)


class BillCreate(BaseModel):
    items: List[BillItemCreate] = Field(..., min_length=1)
    subtotal: Decimal = Field(..., ge=0)
    gst: Decimal = Field(..., ge=0)
    service: Decimal = Field(..., ge=0)
    total: Decimal = Field(..., ge=0)
    payment_method: str = Field(..., min_length=1, max_length=20)
    platform: str = Field("Direct", min_length=1, max_length=20)
    customer_name: Optional[str] = Field(None, max_length=100)
    customer_phone: Optional[str] = Field(None, max_length=20)
    date: Optional[datetime] = Field(
        None,
        description="Sale instant; naive values are read as UTC. Defaults to now.",
    )


class BillItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    product_name: str
    price: Decimal
    quantity: int
    total: Decimal


class BillResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    token_number: int
    bill_number: str
    subtotal: Decimal
    gst: Decimal
    service_charge: Decimal
    total: Decimal
    payment_method: str
    platform: str
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    created_at: datetime
    items: List[BillItemResponse] = []
