"""Database engine, session factory and the FastAPI session dependency"""

import re
import ssl
from typing import AsyncGenerator, Dict, Tuple

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

from app.config import settings

_SSLMODE = re.compile(r"[?&]sslmode=([^&]+)", re.I)


def resolve_database_url(raw_url: str) -> Tuple[str, Dict]:
    """
    Return an async driver URL and the ``connect_args`` it needs.

    ``postgresql://`` becomes ``postgresql+asyncpg://``. asyncpg rejects the
    libpq ``sslmode`` query option, so a requiring mode is turned into an SSL
    context (encrypting, not verifying) and the option is dropped.
    """
    url = raw_url.replace("postgresql://", "postgresql+asyncpg://")
    args: Dict = {}

    match = _SSLMODE.search(url)
    if match:
        if match.group(1).lower() in ("require", "required", "verify-full"):
            ctx = ssl.create_default_context()
            ctx.check_hostname = False
            ctx.verify_mode = ssl.CERT_NONE
            args["ssl"] = ctx
        url = _SSLMODE.sub("", url)
        if "?" not in url and "&" in url:
            url = url.replace("&", "?", 1)

    if url.startswith("sqlite"):
        args["check_same_thread"] = False
    return url, args


database_url, connect_args = resolve_database_url(settings.DATABASE_URL)

engine_options = {
    "connect_args": connect_args,
    "echo": settings.DEBUG,
    "future": True,
}
# SQLite (local runs, tests) has no server-side pool to tune
if not settings.is_sqlite:
    engine_options.update(
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
    )

engine = create_async_engine(database_url, **engine_options)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session. Commits when the endpoint returns, rolls back
    when it raises.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create missing tables (development and SQLite; production uses Alembic)"""
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    await engine.dispose()
