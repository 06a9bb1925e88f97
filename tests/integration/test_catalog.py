"""Integration tests: Products and product categories."""

import pytest
from httpx import AsyncClient


async def _create_product(client: AsyncClient, api_base: str, headers: dict, **overrides) -> dict:
    payload = {"name": "Masala Dosa", "price": "80.00", "category": "Breakfast", "is_favorite": False}
    payload.update(overrides)
    resp = await client.post(f"{api_base}/products", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


@pytest.mark.asyncio
async def test_product_crud(async_client: AsyncClient, api_base: str, owner: dict):
    headers = owner["headers"]
    product = await _create_product(async_client, api_base, headers)
    assert product["price"] == "80.00"

    resp = await async_client.put(
        f"{api_base}/products/{product['id']}",
        json={"name": "Ghee Dosa", "price": "95.50", "category": "Breakfast", "is_favorite": True},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["name"] == "Ghee Dosa"
    assert resp.json()["data"]["is_favorite"] is True

    resp = await async_client.delete(f"{api_base}/products/{product['id']}", headers=headers)
    assert resp.status_code == 200

    listing = await async_client.get(f"{api_base}/products", headers=headers)
    assert listing.json()["data"] == []
    gone = await async_client.get(f"{api_base}/products/{product['id']}", headers=headers)
    assert gone.status_code == 404


@pytest.mark.asyncio
async def test_products_sorted_by_name(async_client: AsyncClient, api_base: str, owner: dict):
    for name in ("Vada", "Idli", "Upma"):
        await _create_product(async_client, api_base, owner["headers"], name=name)

    resp = await async_client.get(f"{api_base}/products", headers=owner["headers"])
    assert [p["name"] for p in resp.json()["data"]] == ["Idli", "Upma", "Vada"]


@pytest.mark.asyncio
async def test_product_price_must_be_positive(async_client: AsyncClient, api_base: str, owner: dict):
    resp = await async_client.post(
        f"{api_base}/products",
        json={"name": "Free", "price": "0", "category": "Misc"},
        headers=owner["headers"],
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_products_are_owner_scoped(
    async_client: AsyncClient, api_base: str, owner: dict, other_owner: dict
):
    product = await _create_product(async_client, api_base, owner["headers"])

    resp = await async_client.get(f"{api_base}/products/{product['id']}", headers=other_owner["headers"])
    assert resp.status_code == 404
    listing = await async_client.get(f"{api_base}/products", headers=other_owner["headers"])
    assert listing.json()["data"] == []


@pytest.mark.asyncio
async def test_category_rename_moves_products(async_client: AsyncClient, api_base: str, owner: dict):
    headers = owner["headers"]
    resp = await async_client.post(f"{api_base}/product-categories", json={"name": "Breakfast"}, headers=headers)
    assert resp.status_code == 201
    category_id = resp.json()["data"]["id"]
    await _create_product(async_client, api_base, headers, name="Idli", category="Breakfast")
    await _create_product(async_client, api_base, headers, name="Thali", category="Lunch")

    resp = await async_client.put(
        f"{api_base}/product-categories/{category_id}", json={"name": "Tiffin"}, headers=headers
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["name"] == "Tiffin"

    products = {p["name"]: p["category"] for p in (await async_client.get(f"{api_base}/products", headers=headers)).json()["data"]}
    assert products == {"Idli": "Tiffin", "Thali": "Lunch"}


@pytest.mark.asyncio
async def test_category_soft_delete(async_client: AsyncClient, api_base: str, owner: dict):
    headers = owner["headers"]
    resp = await async_client.post(f"{api_base}/product-categories", json={"name": "Drinks"}, headers=headers)
    category_id = resp.json()["data"]["id"]

    resp = await async_client.delete(f"{api_base}/product-categories/{category_id}", headers=headers)
    assert resp.status_code == 200

    listing = await async_client.get(f"{api_base}/product-categories", headers=headers)
    assert listing.json()["data"] == []

    missing = await async_client.delete(f"{api_base}/product-categories/9999", headers=headers)
    assert missing.status_code == 404
