"""Shared fixtures: an in-memory SQLite database behind the real app.

Run with:
    pip install -e ".[test]" && python -m pytest -v
"""
import os

# Must be set before app.core.database builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.client.api import PortfolioClient
from app.core.database import Base, get_db
from app.main import app, limiter

BASE_URL = "http://testserver"


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def app_db(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    yield app
    app.dependency_overrides.clear()
    limiter.enabled = True


@pytest_asyncio.fixture
async def client(app_db):
    async with AsyncClient(transport=ASGITransport(app=app_db), base_url=BASE_URL) as c:
        yield c


@pytest_asyncio.fixture
async def portfolio(app_db):
    async with PortfolioClient(BASE_URL, transport=ASGITransport(app=app_db)) as api:
        yield api


@pytest_asyncio.fixture
async def property_id(client) -> int:
    resp = await client.post(
        "/api/properties",
        json={"property_name": "Oak St", "address": "1 Oak St", "owner": "Jane", "city": "Austin", "state": "TX"},
    )
    assert resp.status_code == 201
    return resp.json()["property_id"]
