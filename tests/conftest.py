"""Shared fixtures for stashgate tests."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from stashgate import models  # noqa: F401
from stashgate.core.config import settings
from stashgate.core.database import Base, enable_sqlite_foreign_keys, get_db
from stashgate.core.errors import UpstreamFailure
from stashgate.core.minio_client import get_storage
from stashgate.dependencies.services import get_clock
from stashgate.models.api_key import APIKey
from stashgate.models.file import File
from stashgate.services.identity import TenantIdentity
from stashgate.services.ownership import build_storage_key
from stashgate.utils.keys import generate_api_key

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from sqlalchemy.ext.asyncio import AsyncEngine


class InMemoryObjectStorage:
    """Stands in for the MinIO adapter; records every call."""

    def __init__(self):
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_on: set[str] = set()

    def _record(self, operation: str, key: str) -> None:
        self.calls.append((operation, key))
        if operation in self.fail_on:
            raise UpstreamFailure()

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        self._record("put", key)
        self.objects[key] = (data, content_type)

    async def delete(self, key: str) -> None:
        self._record("delete", key)
        self.objects.pop(key, None)

    async def presigned_get_url(self, key: str, ttl_seconds: int) -> str:
        self._record("presign", key)
        return f"https://objects.example.com/{key}?X-Amz-Expires={ttl_seconds}"

    async def ping(self) -> None:
        self._record("ping", "")


class FrozenClock:
    def __init__(self, now: datetime | None = None):
        self.now = now or datetime(2026, 1, 15, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    monkeypatch.setattr(settings, "SHARE_PASSWORD_BCRYPT_ROUNDS", 4)


@pytest.fixture
async def async_engine() -> AsyncIterator[AsyncEngine]:
    """Async in-memory SQLite engine with all tables created."""
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    enable_sqlite_foreign_keys(eng)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def async_session(session_factory) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage() -> InMemoryObjectStorage:
    return InMemoryObjectStorage()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def make_tenant(session_factory):
    async def _make(name: str = "tenant", is_active: bool = True) -> tuple[TenantIdentity, str]:
        key = generate_api_key()
        async with session_factory() as session:
            record = APIKey(key=key, name=name, is_active=is_active)
            session.add(record)
            await session.commit()
            return TenantIdentity(id=record.id, name=record.name), key

    return _make


@pytest.fixture
def make_file(session_factory, clock):
    async def _make(
        tenant: TenantIdentity,
        name: str = "document.pdf",
        *,
        custom_name: str | None = None,
        path: str | None = None,
        mime: str = "application/pdf",
        size: int = 1234,
        created_at: datetime | None = None,
    ) -> File:
        created_at = created_at or clock()
        async with session_factory() as session:
            record = File(
                name=name,
                custom_name=custom_name,
                key=build_storage_key(tenant.id, path, name, created_at),
                path=path,
                mime=mime,
                size=size,
                created_at=created_at,
                updated_at=created_at,
            )
            session.add(record)
            await session.commit()
            return record

    return _make


@pytest.fixture
async def client(session_factory, storage, clock) -> AsyncIterator[httpx.AsyncClient]:
    """HTTP client against the app with the database, storage and clock swapped out."""
    from stashgate.main import app

    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_clock] = lambda: clock

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c

    app.dependency_overrides.clear()
