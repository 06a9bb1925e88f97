"""Unit tests for dashboard statistics."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from app.models.billing import Bill
from app.services.dashboard_service import (
    DashboardService,
    calculate_trend,
    chart_points,
    peak_hour_label,
)


def _bill(created_at: datetime, total: str = "100.00") -> Bill:
    return Bill(created_at=created_at, total=Decimal(total), subtotal=Decimal(total))


@pytest.mark.parametrize(
    "current, previous, expected",
    [
        (Decimal("150"), Decimal("100"), 50.0),
        (Decimal("50"), Decimal("100"), -50.0),
        (Decimal("10"), Decimal("0"), 100.0),
        (Decimal("0"), Decimal("0"), 0.0),
    ],
)
def test_calculate_trend(current, previous, expected):
    assert calculate_trend(current, previous) == pytest.approx(expected)


def test_peak_hour_prefers_busiest_then_earliest():
    bills = [
        _bill(datetime(2025, 3, 7, 13, 5)),
        _bill(datetime(2025, 3, 7, 13, 40)),
        _bill(datetime(2025, 3, 7, 20, 0)),
        _bill(datetime(2025, 3, 7, 20, 30)),
        _bill(datetime(2025, 3, 7, 23, 10)),
    ]
    assert peak_hour_label(bills) == "13:00 - 14:00"
    assert peak_hour_label([_bill(datetime(2025, 3, 7, 23, 10))]) == "23:00 - 00:00"
    assert peak_hour_label([]) == "00:00 - 01:00"


def test_single_day_is_bucketed_by_hour():
    revenue, orders = chart_points(
        [_bill(datetime(2025, 3, 7, 9, 15), "40.00"), _bill(datetime(2025, 3, 7, 9, 45), "60.00")],
        datetime(2025, 3, 7),
        datetime(2025, 3, 8),
    )
    assert len(revenue) == 24
    assert revenue[9].label == "09:00"
    assert revenue[9].value == Decimal("100.00")
    assert orders[9].count == 2
    assert orders[10].count == 0


def test_week_is_bucketed_by_day_without_extra_point():
    revenue, _ = chart_points([], datetime(2025, 3, 1), datetime(2025, 3, 8))
    assert [p.label for p in revenue] == [
        "Mar 01", "Mar 02", "Mar 03", "Mar 04", "Mar 05", "Mar 06", "Mar 07",
    ]


def test_long_range_is_bucketed_by_month():
    revenue, orders = chart_points(
        [_bill(datetime(2025, 2, 14, 12, 0))],
        datetime(2025, 1, 15),
        datetime(2025, 4, 20),
    )
    assert [p.label for p in revenue] == ["Jan 2025", "Feb 2025", "Mar 2025", "Apr 2025"]
    assert orders[1].count == 1


@pytest.mark.asyncio
async def test_stats_compare_against_previous_period(db, user, make_bill):
    # Previous day: one bill; selected day: two bills
    await make_bill(user.id, datetime(2025, 3, 6, 12, 0), "BILL-20250306-001", total="100.00")
    await make_bill(user.id, datetime(2025, 3, 7, 12, 0), "BILL-20250307-001", total="100.00", payment_method="UPI")
    await make_bill(user.id, datetime(2025, 3, 7, 19, 0), "BILL-20250307-002", total="200.00", platform="Swiggy")

    stats = await DashboardService.get_stats(
        db, user.id, date(2025, 3, 7), date(2025, 3, 7), page=1, page_size=1
    )
    summary = stats.summary

    assert summary.total_orders == 2
    assert summary.total_revenue == Decimal("300.00")
    assert summary.avg_order_value == Decimal("150.00")
    assert summary.revenue_trend == pytest.approx(200.0)
    assert summary.orders_trend == pytest.approx(100.0)
    assert {p.name: p.count for p in summary.payment_methods} == {"Cash": 1, "UPI": 1}
    assert {p.name for p in summary.platform_breakdown} == {"Direct", "Swiggy"}
    assert summary.best_selling_products[0].name == "Masala Dosa"
    assert summary.best_selling_products[0].count == 2

    assert [o.bill_number for o in summary.recent_orders] == ["BILL-20250307-002"]
    assert stats.pagination.total == 2


@pytest.mark.asyncio
async def test_stats_are_owner_scoped(db, user, make_bill):
    await make_bill(user.id + 1000, datetime(2025, 3, 7, 12, 0), "BILL-20250307-001")

    stats = await DashboardService.get_stats(db, user.id, date(2025, 3, 7), date(2025, 3, 7))

    assert stats.summary.total_orders == 0
    assert stats.summary.revenue_trend == 0.0
