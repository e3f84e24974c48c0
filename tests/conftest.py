"""Shared test fixtures."""

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.sb_common.database import get_db_session
from tests.factories import FakeSession


@pytest.fixture
def fake_db() -> FakeSession:
    return FakeSession()


@pytest.fixture
async def client(fake_db: FakeSession) -> AsyncIterator[AsyncClient]:
    """Async HTTP client for testing FastAPI endpoints without a database."""

    async def _db() -> AsyncIterator[FakeSession]:
        yield fake_db

    app.dependency_overrides[get_db_session] = _db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
