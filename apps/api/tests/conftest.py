"""Shared fixtures for API tests."""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["GOOGLE_API_KEY"] = "test-key"
os.environ["INITIAL_RETRY_DELAY"] = "0"
os.environ["MAX_RETRIES"] = "3"
os.environ["PAGES_PER_BATCH"] = "5"
os.environ["DEBUG"] = "false"

from collections.abc import AsyncGenerator  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.db.models import Base  # noqa: E402
from app.db.session import get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.routers import documents as documents_router  # noqa: E402
from app.services import processing  # noqa: E402
from app.services.processing import get_model_adapter  # noqa: E402
from stubs import MemoryStorage, ReplayAdapter  # noqa: E402


@pytest_asyncio.fixture
async def session_maker() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
def storage(monkeypatch: pytest.MonkeyPatch) -> MemoryStorage:
    store = MemoryStorage()
    for name in ("upload_file", "download_file", "get_presigned_url", "delete_file"):
        monkeypatch.setattr(documents_router, name, getattr(store, name))
    return store


@pytest.fixture
def progress_events(monkeypatch: pytest.MonkeyPatch) -> list[tuple[int, dict]]:
    """Captures progress events instead of publishing them to Redis."""
    events: list[tuple[int, dict]] = []

    async def record(document_id: int, event: dict[str, Any]) -> None:
        events.append((document_id, event))

    monkeypatch.setattr(processing, "publish_progress", record)
    return events


@pytest.fixture
def adapter() -> ReplayAdapter:
    return ReplayAdapter()


@pytest_asyncio.fixture
async def client(
    session_maker: async_sessionmaker[AsyncSession],
    storage: MemoryStorage,
    progress_events: list[tuple[int, dict]],
    adapter: ReplayAdapter,
) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_model_adapter] = lambda: adapter

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http

    app.dependency_overrides.clear()
