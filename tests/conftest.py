"""Shared pytest fixtures: in-memory SQLite (aiosqlite) and an ASGI test client."""

import os
import uuid
from datetime import datetime
from decimal import Decimal

# Settings are read at import time; pin a self-contained test environment first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "false"
os.environ["REPORT_SCHEDULER_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LOG_FORMAT"] = "text"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401  register models on Base.metadata
from app.config import settings
from app.database import Base, get_db
from app.main import app
from app.models.billing import Bill, BillItem
from app.models.expense import Expense, ExpenseCategory
from app.models.user import User


@pytest.fixture
async def session_factory():
    """Fresh in-memory database per test; StaticPool keeps one shared connection."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    yield factory
    await engine.dispose()


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def reports_dir(tmp_path, monkeypatch):
    """Point report exports at a temporary directory."""
    target = tmp_path / "reports"
    monkeypatch.setattr(settings, "REPORTS_DIR", str(target))
    return target


@pytest.fixture
def api_base() -> str:
    return f"http://test{settings.API_V1_PREFIX}"


@pytest.fixture
async def async_client(session_factory, api_base: str):
    """Async HTTP client bound to the test database."""

    async def _override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url=api_base, timeout=30.0) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def unique_suffix() -> str:
    """Unique suffix for test data to avoid collisions."""
    return str(uuid.uuid4())[:8]


async def _signup(client: AsyncClient, api_base: str, email: str, password: str) -> dict:
    resp = await client.post(
        f"{api_base}/auth/signup",
        json={"name": "Owner", "email": email, "password": password},
    )
    assert resp.status_code == 201, resp.text
    data = resp.json()["data"]
    return {
        "email": email,
        "password": password,
        "user_id": data["id"],
        "refresh_token": data["refresh_token"],
        "headers": {"Authorization": f"Bearer {data['access_token']}"},
    }


@pytest.fixture
async def owner(async_client: AsyncClient, api_base: str, unique_suffix: str) -> dict:
    """Signed-up restaurant owner: email, password, user_id, refresh_token, headers."""
    return await _signup(async_client, api_base, f"owner_{unique_suffix}@test.com", "Secret123!")


@pytest.fixture
async def other_owner(async_client: AsyncClient, api_base: str, unique_suffix: str) -> dict:
    return await _signup(async_client, api_base, f"other_{unique_suffix}@test.com", "Secret123!")


@pytest.fixture
async def user(db) -> User:
    """Owner row created directly, for service-level tests."""
    account = User(name="Owner", email=f"svc_{uuid.uuid4().hex[:8]}@test.com", hashed_password="x")
    db.add(account)
    await db.commit()
    return account


@pytest.fixture
def make_bill(db):
    """Insert a finished single-line bill, bypassing token allocation."""

    async def _make(
        owner_id: int,
        created_at: datetime,
        bill_number: str,
        total: str = "100.00",
        payment_method: str = "Cash",
        platform: str = "Direct",
    ) -> Bill:
        amount = Decimal(total)
        bill = Bill(
            user_id=owner_id,
            token_number=int(bill_number.rsplit("-", 1)[-1]),
            bill_number=bill_number,
            subtotal=amount,
            gst=Decimal("0"),
            service_charge=Decimal("0"),
            total=amount,
            payment_method=payment_method,
            platform=platform,
            created_at=created_at,
            items=[
                BillItem(product_id=1, product_name="Masala Dosa", price=amount, quantity=1, total=amount)
            ],
        )
        db.add(bill)
        await db.commit()
        return bill

    return _make


@pytest.fixture
def make_expense(db):
    """Insert an expense in a fresh category."""

    async def _make(
        owner_id: int,
        spent_at: datetime,
        amount: str = "40.00",
        payment_method: str = "Cash",
        category_name: str = "Vegetables",
    ) -> Expense:
        category = ExpenseCategory(user_id=owner_id, name=category_name)
        db.add(category)
        await db.flush()
        expense = Expense(
            user_id=owner_id,
            date=spent_at,
            amount=Decimal(amount),
            category_id=category.id,
            payment_method=payment_method,
            description="Market run",
            vendor_name="Ravi Traders",
        )
        db.add(expense)
        await db.commit()
        return expense

    return _make
