"""
Test fixtures for the contact finder app and the cmsauth library.

Uses SQLite (aiosqlite) in memory for the credential store and an
httpx.MockTransport standing in for the Directus backend.
"""
import os

# Override settings BEFORE importing modules that read them
os.environ["DIRECTUS_URL"] = "http://directus.test"
os.environ["USE_COOKIE_AUTH"] = "true"
os.environ["COOKIE_SECURE"] = "false"
os.environ["APP_URL"] = "http://localhost:3000"
os.environ["ALLOWED_DOMAINS"] = "falkenberg.se,ecoera.se"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from app.db import get_db_session
from app.main import app
from app.models.base import Base
from app.models.users import User  # noqa: F401  (registers the users table)
from cmsauth.services.directus import DirectusClient


DIRECTUS_BASE_URL = "http://directus.test"

# Fixed "now" for SessionManager clocks, in epoch milliseconds
NOW_MS = 1_700_000_000_000


def token_body(access: str, refresh: str, expires: int = 900_000) -> dict:
    """Directus login/refresh success body."""
    return {"data": {"access_token": access, "refresh_token": refresh, "expires": expires}}


def error_body(message: str) -> dict:
    return {"errors": [{"message": message, "extensions": {"code": "INVALID_CREDENTIALS"}}]}


class FakeDirectus:
    """
    Minimal Directus stand-in. Records every request and answers
    /auth/login, /auth/refresh and /items/<collection>.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.login_status = 200
        self.login_body = token_body("access-1", "refresh-1")
        self.login_error: Exception | None = None
        self.refresh_status = 200
        self.refresh_body = token_body("access-2", "refresh-2")
        self.refresh_error: Exception | None = None
        self.refresh_gate = None
        self.items_status = 200
        self.items: dict[str, list[dict]] = {
            "companies": [
                {"id": "1", "name": "Alfa AB", "industry": "Utbildning"},
                {"id": "2", "name": "Beta AB", "industry": "Utbildning"},
            ],
            "people": [
                {"id": "p1", "name": "Anna Berg", "title": "VD", "email": "anna@alfa.se"},
            ],
        }

    def calls_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/auth/login":
            if self.login_error is not None:
                raise self.login_error
            return httpx.Response(self.login_status, json=self.login_body)

        if path == "/auth/refresh":
            if self.refresh_gate is not None:
                await self.refresh_gate.wait()
            if self.refresh_error is not None:
                raise self.refresh_error
            return httpx.Response(self.refresh_status, json=self.refresh_body)

        if path.startswith("/items/"):
            collection = path.rsplit("/", 1)[1]
            if self.items_status != 200:
                return httpx.Response(self.items_status, json=error_body("You don't have permission to access this."))
            return httpx.Response(200, json={"data": self.items.get(collection, [])})

        return httpx.Response(404, json=error_body("Route doesn't exist."))


@pytest.fixture
def directus():
    return FakeDirectus()


@pytest_asyncio.fixture
async def directus_client(directus):
    client = DirectusClient(DIRECTUS_BASE_URL, transport=httpx.MockTransport(directus.handler))
    yield client
    await client.aclose()


@pytest_asyncio.fixture(scope="function")
async def engine():
    """Create async engine and tables for each test function."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def session(session_maker):
    """Create async session for each test."""
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def provisioned_user(session: AsyncSession):
    """user@falkenberg.se with password "password7"."""
    from app.services.auth import upsert_user

    user, _ = await upsert_user(session, "user@falkenberg.se", "Test User", "password7")
    return user


@pytest_asyncio.fixture
async def async_client(directus_client, session_maker):
    """HTTP client bound to the FastAPI app, with Directus and the DB replaced."""

    async def override_db_session():
        async with session_maker() as session:
            yield session

    app.state.directus = directus_client
    app.dependency_overrides[get_db_session] = override_db_session

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
    app.state.directus = None
