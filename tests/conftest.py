"""
tests/conftest.py -- Shared fixtures.

Every test gets its own SQLite file database under tmp_path and an app built
by create_application() from a test Settings instance. httpx.AsyncClient
talks to the app through ASGITransport; no server is started.

The environment defaults below must be set before main/accounts are
imported: main.py builds a module-level app from the process settings.
"""

import os
from datetime import datetime, timedelta, timezone

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from httpx import ASGITransport, AsyncClient

from accounts.core.config import Settings
from accounts.core.context import Principal
from accounts.models import Base
from main import create_application

TEST_SECRET_KEY = "test-secret-key"


class FakeClock:
    """Callable clock for TokenService that tests move forward by hand."""

    def __init__(self, now: datetime = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        APP_ENV="test",
        SECRET_KEY=TEST_SECRET_KEY,
        BCRYPT_ROUNDS=4,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'accounts.db'}",
    )


@pytest.fixture
async def app(settings):
    application = create_application(settings)
    async with application.state.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield application
    await application.state.engine.dispose()


@pytest.fixture
async def client(app) -> AsyncClient:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def sessions(app):
    return app.state.sessions


@pytest.fixture
def auth_service(app):
    return app.state.auth_service


@pytest.fixture
def membership_service(app):
    return app.state.membership_service


@pytest.fixture
async def alice(auth_service) -> Principal:
    result = await auth_service.register("alice", "alice@x.com", "pw123")
    return Principal.from_user(result.user)


@pytest.fixture
async def bob(auth_service) -> Principal:
    result = await auth_service.register("bob", "bob@x.com", "hunter22")
    return Principal.from_user(result.user)


async def register(client: AsyncClient, username: str, email: str, password: str) -> dict:
    response = await client.post(
        "/api/auth/register",
        json={"username": username, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
