"""Shared fixtures: in-memory SQLite database, store, service and API client."""

from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("EMAIL_BACKEND", "console")

import uuid
from datetime import UTC, datetime

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.api.deps import get_notifier
from app.database import Base, get_db
from app.schemas.booking import BookingResponse
from app.services.booking_service import BookingService
from app.services.booking_store import BookingStore

LOCATION_ID = uuid.UUID("11111111-1111-4111-8111-111111111111")
ORG_ID = uuid.UUID("22222222-2222-4222-8222-222222222222")


def at(hour: int, minute: int = 0) -> datetime:
    """2024-01-01 at the given UTC time."""
    return datetime(2024, 1, 1, hour, minute, tzinfo=UTC)


class RecordingNotifier:
    """Notifier double that records every approval it is asked to send."""

    def __init__(self) -> None:
        self.sent: list[BookingResponse] = []
        self.result = True
        self.error: Exception | None = None

    async def send_approval(self, booking: BookingResponse) -> bool:
        self.sent.append(booking)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def make_draft():
    """Build a raw booking request body."""

    def _make(
        start: datetime = at(10),
        end: datetime = at(11),
        location_id: uuid.UUID = LOCATION_ID,
        **overrides,
    ) -> dict:
        draft = {
            "orgId": str(ORG_ID),
            "contact": {"name": "Ada Lovelace", "email": "ada@example.com"},
            "event": {
                "title": "Evening recital",
                "locationId": str(location_id),
                "start": start.isoformat(),
                "end": end.isoformat(),
                "details": "Piano and strings",
            },
            "requestNote": "Need the stage lights",
        }
        draft.update(overrides)
        return draft

    return _make


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def store(db) -> BookingStore:
    return BookingStore(db)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def service(store, notifier) -> BookingService:
    return BookingService(store=store, notifier=notifier)


@pytest.fixture
async def client(session_maker, notifier):
    from app.main import app

    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def error_client(client):
    """Client that returns the 500 response instead of re-raising app errors."""
    from app.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as ac:
        yield ac
