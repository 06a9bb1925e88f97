"""Expense Schemas"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ExpenseCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class ExpenseCategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    is_active: bool


class ExpenseCreate(BaseModel):
    date: Optional[datetime] = Field(None, description="Local date/time; defaults to now")
    amount: Decimal = Field(..., gt=0)
    category_id: int
    payment_method: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=500)
    vendor_name: Optional[str] = Field(None, max_length=100)
    receipt_image_path: Optional[str] = Field(None, max_length=500)


class ExpenseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    date: datetime
    amount: Decimal
    category_id: int
    category_name: str
    payment_method: str
    description: Optional[str] = None
    vendor_name: Optional[str] = None
    receipt_image_path: Optional[str] = None
    created_at: datetime


class CategoryExpenseSummary(BaseModel):
    category_name: str
    total_amount: Decimal


class ExpenseSummary(BaseModel):
    today_total: Decimal
    month_total: Decimal
    total_filtered: Decimal
    top_categories: List[CategoryExpenseSummary] = []
