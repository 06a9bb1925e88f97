"""Integration tests: Report settings and manual report runs."""

from datetime import datetime
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from app.core.exceptions import EmailDeliveryError
from app.models.reporting import ReportSchedule
from app.services.schedule_service import ScheduleService


@pytest.fixture
async def seeded(session_factory):
    async with session_factory() as session:
        await ScheduleService.ensure_default_schedules(session)


@pytest.mark.asyncio
async def test_list_schedules(async_client: AsyncClient, api_base: str, owner: dict, seeded):
    resp = await async_client.get(f"{api_base}/report-settings/schedules", headers=owner["headers"])
    assert resp.status_code == 200
    schedules = resp.json()["data"]
    assert len(schedules) == 6
    assert schedules[0]["report_type"] == "Daily_Sales"
    assert schedules[0]["scheduled_time"] == "22:00"


@pytest.mark.asyncio
async def test_update_schedule_resets_last_run(
    async_client: AsyncClient, api_base: str, owner: dict, seeded, session_factory
):
    async with session_factory() as session:
        schedule = await session.get(ReportSchedule, 3)
        schedule.last_run = datetime(2025, 3, 9, 22, 0)
        await session.commit()

    resp = await async_client.put(
        f"{api_base}/report-settings/schedules/3",
        json={"is_active": True, "scheduled_time": "21:15", "day_of_week": 5},
        headers=owner["headers"],
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["report_type"] == "Weekly_Sales"
    assert data["scheduled_time"] == "21:15"
    assert data["day_of_week"] == 5
    assert data["last_run"] is None


@pytest.mark.asyncio
async def test_update_schedule_bad_time(async_client: AsyncClient, api_base: str, owner: dict, seeded):
    resp = await async_client.put(
        f"{api_base}/report-settings/schedules/1",
        json={"is_active": True, "scheduled_time": "quarter past"},
        headers=owner["headers"],
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "Invalid time format. Use HH:mm"

    missing = await async_client.put(
        f"{api_base}/report-settings/schedules/99",
        json={"is_active": True, "scheduled_time": "22:00"},
        headers=owner["headers"],
    )
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_report_emails_round_trip(async_client: AsyncClient, api_base: str, owner: dict):
    resp = await async_client.get(f"{api_base}/report-settings/emails", headers=owner["headers"])
    assert resp.json()["data"]["emails"] == ""

    resp = await async_client.put(
        f"{api_base}/report-settings/emails",
        json={"emails": "a@x.com, b@y.com"},
        headers=owner["headers"],
    )
    assert resp.status_code == 200

    resp = await async_client.get(f"{api_base}/report-settings/emails", headers=owner["headers"])
    assert resp.json()["data"]["emails"] == "a@x.com, b@y.com"


@pytest.mark.asyncio
async def test_run_rejects_unknown_type(async_client: AsyncClient, api_base: str, owner: dict):
    resp = await async_client.post(f"{api_base}/report-settings/run/Hourly", headers=owner["headers"])
    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "Invalid report type: Hourly"


@pytest.mark.asyncio
async def test_run_with_no_data(async_client: AsyncClient, api_base: str, owner: dict, reports_dir):
    with patch("app.services.report_service.send_email_async", new_callable=AsyncMock) as send:
        resp = await async_client.post(f"{api_base}/report-settings/run/Daily", headers=owner["headers"])

    assert resp.status_code == 200
    body = resp.json()
    assert body["data"]["sent"] is False
    assert body["message"] == "No data found for Daily report period"
    send.assert_not_awaited()


@pytest.mark.asyncio
async def test_run_requires_both_dates(async_client: AsyncClient, api_base: str, owner: dict):
    resp = await async_client.post(
        f"{api_base}/report-settings/run/Daily",
        params={"start_date": "2025-03-01"},
        headers=owner["headers"],
    )
    assert resp.status_code == 400


async def _post_bill(client: AsyncClient, api_base: str, headers: dict) -> None:
    resp = await client.post(
        f"{api_base}/bills",
        json={
            "items": [{"id": 1, "name": "Vada", "price": "50.00", "quantity": 1, "total": "50.00"}],
            "subtotal": "50.00",
            "gst": "0",
            "service": "0",
            "total": "50.00",
            "payment_method": "Cash",
            "date": "2025-03-07T06:00:00Z",
        },
        headers=headers,
    )
    assert resp.status_code == 201


@pytest.mark.asyncio
async def test_run_for_explicit_period(async_client: AsyncClient, api_base: str, owner: dict, reports_dir):
    await _post_bill(async_client, api_base, owner["headers"])
    await async_client.put(
        f"{api_base}/report-settings/emails",
        json={"emails": "owner@x.com, accountant@y.com"},
        headers=owner["headers"],
    )

    with patch("app.services.report_service.send_email_async", new_callable=AsyncMock) as send:
        resp = await async_client.post(
            f"{api_base}/report-settings/run/Weekly_Sales",
            params={"start_date": "2025-03-07", "end_date": "2025-03-07"},
            headers=owner["headers"],
        )

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["message"] == "Weekly_Sales report triggered successfully"
    assert body["data"]["sent"] is True
    assert body["data"]["bill_count"] == 1
    assert body["data"]["recipients"] == ["owner@x.com", "accountant@y.com"]
    assert send.await_count == 2
    assert (reports_dir / "Weekly_Sales_Report_20250307_20250308.csv").exists()


@pytest.mark.asyncio
async def test_run_delivery_failure_is_bad_gateway(
    async_client: AsyncClient, api_base: str, owner: dict, reports_dir
):
    await _post_bill(async_client, api_base, owner["headers"])

    with patch(
        "app.services.report_service.send_email_async",
        new=AsyncMock(side_effect=EmailDeliveryError("RESEND_API_KEY not set")),
    ):
        resp = await async_client.post(
            f"{api_base}/report-settings/run/Daily_All",
            params={"start_date": "2025-03-07", "end_date": "2025-03-07"},
            headers=owner["headers"],
        )

    assert resp.status_code == 502
    assert resp.json()["error"]["code"] == "EMAIL_DELIVERY_FAILED"


@pytest.mark.asyncio
async def test_general_settings(async_client: AsyncClient, api_base: str, owner: dict):
    resp = await async_client.get(f"{api_base}/report-settings/general", headers=owner["headers"])
    assert resp.status_code == 200
    defaults = resp.json()["data"]
    assert defaults["gst_enabled"] is True
    assert defaults["restaurant_name"] == "My Restaurant"

    update = dict(defaults, gst_enabled=False, gst_percentage="12", restaurant_name="Saravana Bhavan")
    resp = await async_client.put(f"{api_base}/report-settings/general", json=update, headers=owner["headers"])
    assert resp.status_code == 200

    resp = await async_client.get(f"{api_base}/report-settings/general", headers=owner["headers"])
    data = resp.json()["data"]
    assert data["gst_enabled"] is False
    assert data["gst_percentage"] == "12"
    assert data["restaurant_name"] == "Saravana Bhavan"


@pytest.mark.asyncio
async def test_run_reports_undelivered_mail(async_client: AsyncClient, api_base: str, owner: dict, reports_dir):
    await _post_bill(async_client, api_base, owner["headers"])

    # Outbound mail is skipped in the test environment
    resp = await async_client.post(
        f"{api_base}/report-settings/run/Daily_Sales",
        params={"start_date": "2025-03-07", "end_date": "2025-03-07"},
        headers=owner["headers"],
    )

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["data"]["sent"] is False
    assert body["data"]["bill_count"] == 1
    assert body["message"] == "Daily_Sales report generated but not delivered"
