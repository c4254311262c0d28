"""Pytest configuration and fixtures for the memorial service.

Settings come from the environment; the defaults below let unit and API tests
run without a .env file. API tests override use-case dependencies, so only
tests marked requires_db need Postgres (DATABASE_URL).
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-memorial-service")
os.environ.setdefault("S3_BUCKET", "memorial-media-test")
os.environ.setdefault("S3_PUBLIC_BASE_URL", "https://pub-test.r2.dev")
os.environ.setdefault("S3_ENDPOINT_URL", "https://acct.r2.cloudflarestorage.com")

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.limiter import limiter
from app.infrastructure.persistence import database
from app.infrastructure.security.jwt import create_access_token
from app.main import create_app

get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _reset_rate_limits() -> None:
    """Limiter storage is process-wide; start every test with empty windows."""
    limiter.reset()


@pytest.fixture
def app() -> FastAPI:
    """Fresh app per test so dependency_overrides do not leak."""
    return create_app()


@pytest.fixture
async def client(app: FastAPI) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI). Lifespan does not run."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Bearer token for user u1."""
    return {"Authorization": f"Bearer {create_access_token({'sub': 'u1'})}"}


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Skips (pytest.skip) when DATABASE_URL is not configured. Use
    @pytest.mark.requires_db to mark tests that need this fixture; run without
    DB via: pytest -m 'not requires_db'.
    """
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip(
            "Postgres not configured: set DATABASE_URL, then run: alembic upgrade head"
        )
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()
