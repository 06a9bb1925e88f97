"""Integration tests: Bills."""

import pytest
from httpx import AsyncClient

from app.utils.time import now_local


def _bill_payload(**overrides) -> dict:
    payload = {
        "items": [
            {"id": 1, "name": "Masala Dosa", "price": "80.00", "quantity": 2, "total": "160.00"},
            {"id": 2, "name": "Filter Coffee", "price": "30.00", "quantity": 1, "total": "30.00"},
        ],
        "subtotal": "190.00",
        "gst": "9.50",
        "service": "9.50",
        "total": "209.00",
        "payment_method": "Cash",
        "platform": "Direct",
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_tokens_increment_within_the_day(async_client: AsyncClient, api_base: str, owner: dict):
    first = await async_client.post(f"{api_base}/bills", json=_bill_payload(), headers=owner["headers"])
    second = await async_client.post(f"{api_base}/bills", json=_bill_payload(), headers=owner["headers"])

    assert first.status_code == 201, first.text
    assert second.status_code == 201
    today = now_local().strftime("%Y%m%d")
    assert first.json()["data"]["token_number"] == 1
    assert second.json()["data"]["token_number"] == 2
    assert second.json()["data"]["bill_number"] == f"BILL-{today}-002"
    assert len(first.json()["data"]["items"]) == 2
    assert first.json()["data"]["service_charge"] == "9.50"


@pytest.mark.asyncio
async def test_bill_date_is_converted_to_local_day(async_client: AsyncClient, api_base: str, owner: dict):
    # 20:00 UTC is 01:30 the next morning in Kolkata
    resp = await async_client.post(
        f"{api_base}/bills",
        json=_bill_payload(date="2025-03-07T20:00:00Z"),
        headers=owner["headers"],
    )
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["bill_number"] == "BILL-20250308-001"
    assert data["created_at"].startswith("2025-03-08T01:30")


@pytest.mark.asyncio
async def test_empty_cart_rejected(async_client: AsyncClient, api_base: str, owner: dict):
    resp = await async_client.post(f"{api_base}/bills", json=_bill_payload(items=[]), headers=owner["headers"])
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_bill_listing_and_lookup(
    async_client: AsyncClient, api_base: str, owner: dict, other_owner: dict
):
    created = await async_client.post(
        f"{api_base}/bills", json=_bill_payload(date="2025-03-07T06:00:00Z"), headers=owner["headers"]
    )
    await async_client.post(
        f"{api_base}/bills", json=_bill_payload(date="2025-03-09T06:00:00Z"), headers=owner["headers"]
    )
    bill_id = created.json()["data"]["id"]

    resp = await async_client.get(
        f"{api_base}/bills",
        params={"start_date": "2025-03-07", "end_date": "2025-03-07"},
        headers=owner["headers"],
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["meta"]["total"] == 1
    assert body["data"][0]["id"] == bill_id

    resp = await async_client.get(f"{api_base}/bills/{bill_id}", headers=owner["headers"])
    assert resp.json()["data"]["items"][0]["product_name"] == "Masala Dosa"

    # Other owners neither see it nor share its token sequence
    resp = await async_client.get(f"{api_base}/bills/{bill_id}", headers=other_owner["headers"])
    assert resp.status_code == 404
    theirs = await async_client.post(
        f"{api_base}/bills", json=_bill_payload(date="2025-03-07T06:00:00Z"), headers=other_owner["headers"]
    )
    assert theirs.json()["data"]["bill_number"] == "BILL-20250307-001"
