"""
Shared fixtures: a fresh in-memory database per test, users, an HTTP client.
"""

import pytest
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from core.security import create_access_token
from init_db import close_db, get_tortoise_config
from main import app
from models.user import User


@pytest.fixture
async def db():
    await Tortoise.init(config=get_tortoise_config("sqlite://:memory:", with_migrations=False))
    await Tortoise.generate_schemas()
    yield
    await close_db()


@pytest.fixture
async def alice(db):
    return await User.create(username="alice", first_name="Alice", last_name="Green")


@pytest.fixture
async def bob(db):
    return await User.create(username="bob", first_name="Bob", last_name="Sprout")


@pytest.fixture
async def carol(db):
    return await User.create(username="carol", first_name="Carol", last_name="Moss")


@pytest.fixture
def auth():
    """Build Authorization headers for a user."""
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}
    return _headers


@pytest.fixture
async def client(db):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
