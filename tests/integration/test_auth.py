"""Integration tests: Auth endpoints."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_signup_returns_token_pair(async_client: AsyncClient, api_base: str, unique_suffix: str):
    resp = await async_client.post(
        f"{api_base}/auth/signup",
        json={"name": "Asha", "email": f"asha_{unique_suffix}@test.com", "password": "Secret123!"},
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["token_type"] == "bearer"
    assert body["data"]["access_token"]
    assert body["data"]["refresh_token"]


@pytest.mark.asyncio
async def test_signup_duplicate_email(async_client: AsyncClient, api_base: str, owner: dict):
    resp = await async_client.post(
        f"{api_base}/auth/signup",
        json={"name": "Again", "email": owner["email"], "password": "Secret123!"},
    )
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "CONFLICT"


@pytest.mark.asyncio
async def test_signup_validation_error(async_client: AsyncClient, api_base: str):
    resp = await async_client.post(
        f"{api_base}/auth/signup",
        json={"name": "x", "email": "not-an-email", "password": "123"},
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_login(async_client: AsyncClient, api_base: str, owner: dict):
    resp = await async_client.post(
        f"{api_base}/auth/login",
        json={"email": owner["email"], "password": owner["password"]},
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["id"] == owner["user_id"]


@pytest.mark.asyncio
async def test_login_wrong_password(async_client: AsyncClient, api_base: str, owner: dict):
    resp = await async_client.post(
        f"{api_base}/auth/login",
        json={"email": owner["email"], "password": "wrong-password"},
    )
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid email or password"


@pytest.mark.asyncio
async def test_refresh_rotates_token(async_client: AsyncClient, api_base: str, owner: dict):
    resp = await async_client.post(
        f"{api_base}/auth/refresh-token", json={"refresh_token": owner["refresh_token"]}
    )
    assert resp.status_code == 200
    new_token = resp.json()["data"]["refresh_token"]
    assert new_token != owner["refresh_token"]

    # The presented token is now revoked
    reuse = await async_client.post(
        f"{api_base}/auth/refresh-token", json={"refresh_token": owner["refresh_token"]}
    )
    assert reuse.status_code == 400

    again = await async_client.post(
        f"{api_base}/auth/refresh-token", json={"refresh_token": new_token}
    )
    assert again.status_code == 200


@pytest.mark.asyncio
async def test_revoke_token(async_client: AsyncClient, api_base: str, owner: dict):
    resp = await async_client.post(
        f"{api_base}/auth/revoke-token", json={"refresh_token": owner["refresh_token"]}
    )
    assert resp.status_code == 200

    twice = await async_client.post(
        f"{api_base}/auth/revoke-token", json={"refresh_token": owner["refresh_token"]}
    )
    assert twice.status_code == 400


@pytest.mark.asyncio
async def test_protected_route_requires_token(async_client: AsyncClient, api_base: str):
    resp = await async_client.get(f"{api_base}/products")
    assert resp.status_code in (401, 403)

    bad = await async_client.get(f"{api_base}/products", headers={"Authorization": "Bearer garbage"})
    assert bad.status_code == 401


@pytest.mark.asyncio
async def test_expired_access_token_rejected(async_client: AsyncClient, api_base: str, owner: dict):
    from datetime import timedelta

    from app.core.security import create_access_token

    token = create_access_token(data={"sub": str(owner["user_id"])}, expires_delta=timedelta(minutes=-1))
    resp = await async_client.get(f"{api_base}/products", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
