"""Dashboard Service - sales statistics over a local date range"""

from collections import defaultdict
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.billing import Bill
from app.schemas.responses import PaginationMeta
from app.schemas.dashboard import ChartPoint, DashboardStats, DashboardSummary, RecentOrder, SummaryItem
from app.utils.time import now_local, start_of_day

ZERO = Decimal("0")


def calculate_trend(current: Decimal, previous: Decimal) -> float:
    """Percent change; 100 when growing from nothing, 0 when both are zero."""
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return float((Decimal(current) - Decimal(previous)) / Decimal(previous) * 100)


def peak_hour_label(bills: Iterable[Bill]) -> str:
    counts: Dict[int, int] = defaultdict(int)
    for bill in bills:
        counts[bill.created_at.hour] += 1
    hour = max(counts, key=lambda h: (counts[h], -h)) if counts else 0
    return f"{hour:02d}:00 - {(hour + 1) % 24:02d}:00"


def _group(bills: Iterable[Bill], key) -> List[SummaryItem]:
    amounts: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    counts: Dict[str, int] = defaultdict(int)
    for bill in bills:
        name = key(bill)
        amounts[name] += bill.total
        counts[name] += 1
    return [SummaryItem(name=name, amount=amounts[name], count=counts[name]) for name in amounts]


def _hour_key(bill: Bill) -> int:
    return bill.created_at.hour


def _day_key(bill: Bill) -> date:
    return bill.created_at.date()


def _month_key(bill: Bill) -> Tuple[int, int]:
    return bill.created_at.year, bill.created_at.month


def _add_month(moment: datetime) -> datetime:
    return (moment.replace(day=28) + timedelta(days=4)).replace(day=1)


def chart_points(
    bills: List[Bill],
    start: datetime,
    end: datetime,
) -> Tuple[List[ChartPoint], List[ChartPoint]]:
    """
    Revenue and order-volume series for ``[start, end)``.

    Up to two days is bucketed by hour (24 points), more than sixty days by
    month, anything in between by day.
    """
    span_days = (end - start).total_seconds() / 86400

    if span_days <= 2:
        buckets = [(f"{hour:02d}:00", hour) for hour in range(24)]
        bucket_of = _hour_key
    elif span_days > 60:
        buckets = []
        cursor = start.replace(day=1)
        while cursor < end:
            buckets.append((cursor.strftime("%b %Y"), (cursor.year, cursor.month)))
            cursor = _add_month(cursor)
        bucket_of = _month_key
    else:
        buckets = []
        cursor = start
        while cursor < end:
            buckets.append((cursor.strftime("%b %d"), cursor.date()))
            cursor += timedelta(days=1)
        bucket_of = _day_key

    revenue: Dict[object, Decimal] = defaultdict(lambda: ZERO)
    orders: Dict[object, int] = defaultdict(int)
    for bill in bills:
        key = bucket_of(bill)
        revenue[key] += bill.total
        orders[key] += 1

    revenue_chart = [ChartPoint(label=label, value=revenue[key]) for label, key in buckets]
    order_chart = [
        ChartPoint(label=label, value=Decimal(orders[key]), count=orders[key])
        for label, key in buckets
    ]
    return revenue_chart, order_chart


def best_sellers(bills: Iterable[Bill]) -> List[SummaryItem]:
    amounts: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    quantities: Dict[str, int] = defaultdict(int)
    for bill in bills:
        for item in bill.items:
            amounts[item.product_name] += item.total
            quantities[item.product_name] += item.quantity
    ranked = sorted(quantities, key=lambda name: quantities[name], reverse=True)
    return [SummaryItem(name=name, amount=amounts[name], count=quantities[name]) for name in ranked]


class DashboardService:
    @staticmethod
    async def _bills(db: AsyncSession, owner_id: int, start: datetime, end: datetime) -> List[Bill]:
        result = await db.execute(
            select(Bill).where(
                Bill.user_id == owner_id,
                Bill.created_at >= start,
                Bill.created_at < end,
            )
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_stats(
        db: AsyncSession,
        owner_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        page: int = 1,
        page_size: int = 10,
    ) -> DashboardStats:
        """
        Stats for the local days ``start_date..end_date`` (both inclusive,
        default today), with trends against the equally long period right
        before it.
        """
        today = now_local().date()
        start = start_of_day(start_date or today)
        end = start_of_day(end_date or today) + timedelta(days=1)
        previous_start = start - (end - start)

        current = await DashboardService._bills(db, owner_id, start, end)
        previous = await DashboardService._bills(db, owner_id, previous_start, start)

        total_revenue = sum((b.total for b in current), ZERO)
        gross_revenue = sum((b.subtotal for b in current), ZERO)
        total_orders = len(current)
        avg_order_value = total_revenue / total_orders if total_orders else ZERO

        prev_revenue = sum((b.total for b in previous), ZERO)
        prev_orders = len(previous)
        prev_aov = prev_revenue / prev_orders if prev_orders else ZERO

        revenue_chart, order_chart = chart_points(current, start, end)

        newest_first = sorted(current, key=lambda b: (b.created_at, b.id), reverse=True)
        offset = (page - 1) * page_size
        recent = [
            RecentOrder(
                id=b.id,
                bill_number=b.bill_number,
                total=b.total,
                subtotal=b.subtotal,
                payment_method=b.payment_method,
                platform=b.platform,
                date=b.created_at,
            )
            for b in newest_first[offset:offset + page_size]
        ]

        summary = DashboardSummary(
            total_revenue=total_revenue,
            gross_revenue=gross_revenue,
            total_orders=total_orders,
            avg_order_value=avg_order_value,
            peak_order_time=peak_hour_label(current),
            revenue_trend=calculate_trend(total_revenue, prev_revenue),
            orders_trend=calculate_trend(Decimal(total_orders), Decimal(prev_orders)),
            aov_trend=calculate_trend(avg_order_value, prev_aov),
            payment_methods=_group(current, lambda b: b.payment_method),
            platform_breakdown=_group(current, lambda b: b.platform),
            revenue_chart=revenue_chart,
            order_volume_chart=order_chart,
            best_selling_products=best_sellers(current),
            recent_orders=recent,
        )
        return DashboardStats(
            summary=summary,
            pagination=PaginationMeta.build(page, page_size, total_orders),
        )
