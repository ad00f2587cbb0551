import os
import tempfile

os.environ["TEST"] = "true"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["BACKEND"] = "memory"
os.environ["ALLOW_ROLE_SELECTION"] = "true"
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="ecotrack-uploads-"))
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="ecotrack-logs-"))

from typing import AsyncGenerator, Awaitable, Callable

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.database.database import Base
from app.main import app
from app.models import models  # noqa: F401  registers the tables on Base
from app.repositories.dependencies import get_repository
from app.repositories.memory import InMemoryRepository
from app.repositories.seed import seed_workers
from app.repositories.sql import SqlRepository


@pytest_asyncio.fixture(scope="function")
async def repository() -> InMemoryRepository:
    """
    A fresh in-memory store per test, with the demo collectors loaded.
    """
    repo = InMemoryRepository()
    await seed_workers(repo)
    return repo


@pytest_asyncio.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    In-memory SQLite engine; StaticPool keeps the single connection (and so
    the schema) alive for the whole test.
    """
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    async_session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with async_session_factory() as test_session:
        yield test_session


@pytest_asyncio.fixture(scope="function")
async def sql_repository(session: AsyncSession) -> SqlRepository:
    repo = SqlRepository(session)
    await seed_workers(repo)
    return repo


@pytest_asyncio.fixture(scope="function")
async def client(repository: InMemoryRepository) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client wired to the per-test repository.
    """

    async def override_get_repository():
        yield repository

    app.dependency_overrides[get_repository] = override_get_repository
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def login(client: AsyncClient) -> Callable[..., Awaitable[dict]]:
    """
    Sign up (if needed) and sign in through the API.

    Returns a coroutine function giving ``{"user": <profile>, "headers": ...}``.
    """

    async def _login(
        email: str, name: str = "Test User", password: str = "password123", role=None
    ) -> dict:
        await client.post(
            "/api/auth/signup",
            json={"email": email, "password": password, "name": name},
        )
        payload = {"email": email, "password": password}
        if role:
            payload["role"] = role
        response = await client.post("/api/auth/login", json=payload)
        assert response.status_code == 200, response.text
        data = response.json()
        return {
            "user": data["user"],
            "token": data["token"],
            "headers": {"Authorization": f"Bearer {data['token']}"},
        }

    return _login


@pytest_asyncio.fixture(scope="function")
async def citizen(login) -> dict:
    return await login("citizen@example.com", name="Carla Citizen")


@pytest_asyncio.fixture(scope="function")
async def other_citizen(login) -> dict:
    return await login("neighbour@example.com", name="Ned Neighbour")


@pytest_asyncio.fixture(scope="function")
async def admin(login) -> dict:
    return await login("officer@example.com", name="Olga Officer", role="admin")
