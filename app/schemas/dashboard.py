"""Dashboard Schemas"""

from datetime import datetime
from decimal import Decimal
from typing import List

from pydantic import BaseModel

from app.schemas.responses import PaginationMeta


class SummaryItem(BaseModel):
    name: str
    amount: Decimal
    count: int


class ChartPoint(BaseModel):
    label: str
    value: Decimal
    count: int = 0


class RecentOrder(BaseModel):
    id: int
    bill_number: str
    total: Decimal
    subtotal: Decimal
    payment_method: str
    platform: str
    date: datetime


class DashboardSummary(BaseModel):
    total_revenue: Decimal
    gross_revenue: Decimal
    total_orders: int
    avg_order_value: Decimal
    peak_order_time: str
    revenue_trend: float
    orders_trend: float
    aov_trend: float
    payment_methods: List[SummaryItem] = []
    platform_breakdown: List[SummaryItem] = []
    revenue_chart: List[ChartPoint] = []
    order_volume_chart: List[ChartPoint] = []
    best_selling_products: List[SummaryItem] = []
    recent_orders: List[RecentOrder] = []


class DashboardStats(BaseModel):
    """``pagination`` applies to ``summary.recent_orders``"""
    summary: DashboardSummary
    pagination: PaginationMeta
