"""Pytest configuration and fixtures for DrayBoard tests.

API tests run against an in-memory SQLite database created per test; the
redis cache is switched off so no external service is needed.
"""

from datetime import datetime, timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from drayboard.config import settings
from drayboard.database import Base, get_db
from drayboard.main import app
from drayboard.models.container import Container
from drayboard.models.yard import Yard


# ── Test Database Setup ──────────────────────────────────────────

@pytest.fixture(autouse=True)
def _disable_cache(monkeypatch):
    monkeypatch.setattr(settings, "cache_enabled", False)


@pytest_asyncio.fixture
async def test_engine():
    """Fresh in-memory database with all tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for seeding and inspecting data outside of requests."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Test client whose requests each get their own committed session."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# ── Test Data Fixtures ───────────────────────────────────────────

BASE_TIME = datetime(2026, 1, 5, 8, 0, 0)


@pytest_asyncio.fixture
async def make_container(db_session: AsyncSession):
    """Factory inserting a committed container.

    ``age`` (minutes before BASE_TIME) controls created_at, so tie-break
    order is deterministic: a smaller age is a newer container.
    """

    async def _make(case_number: str, age: int = 0, **fields) -> Container:
        fields.setdefault("status", "AT_TERMINAL")
        container = Container(
            case_number=case_number,
            created_at=BASE_TIME - timedelta(minutes=age),
            **fields,
        )
        db_session.add(container)
        await db_session.commit()
        return container

    return _make


@pytest_asyncio.fixture
async def make_yard(db_session: AsyncSession):
    async def _make(name: str, **fields) -> Yard:
        yard = Yard(name=name, **fields)
        db_session.add(yard)
        await db_session.commit()
        return yard

    return _make


# ── Test Markers ─────────────────────────────────────────────────

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "api: HTTP API tests")
    config.addinivalue_line("markers", "integration: Integration tests")
