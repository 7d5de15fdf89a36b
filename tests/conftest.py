"""
Shared fixtures: an app wired to an in-memory SQLite store and an
httpx client talking to it in-process.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import httpx
import pytest
import pytest_asyncio

from config.settings import Settings
from database.models import init_db
from main import create_app

TEST_SECRET = "test-secret-key"


@pytest.fixture
def settings() -> Settings:
    return Settings(database_url="sqlite+aiosqlite://", jwt_secret=TEST_SECRET)


@pytest_asyncio.fixture
async def app(settings):
    application = create_app(settings)
    await init_db(application.state.engine)
    yield application
    await application.state.engine.dispose()


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def register(client, email="a@b.com", password="Secret1!"):
    return await client.post("/auth/register", json={"email": email, "password": password})


async def login(client, email="a@b.com", password="Secret1!"):
    return await client.post("/auth/login", json={"email": email, "password": password})


async def auth_headers(client, email="a@b.com", password="Secret1!"):
    await register(client, email, password)
    resp = await login(client, email, password)
    return {"Authorization": f"Bearer {resp.json()['token']}"}
