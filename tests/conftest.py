"""Shared fixtures: in-memory stores + FastAPI test client.

Invariants:
    - Every test gets fresh stores; nothing talks to a real MongoDB
    - The context is injected through create_app(context=...), so the
      lifespan never opens a Mongo connection
    - bcrypt runs at its minimum cost and rate limiting is off
"""

import os

import pytest
from httpx import ASGITransport, AsyncClient

# get_settings() is read by the rate-limit providers; keep it constructible
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from quill.config import Settings  # noqa: E402
from quill.context import build_context  # noqa: E402
from quill.main import create_app  # noqa: E402
from tests.fakes import InMemoryPostStore, InMemoryUserStore  # noqa: E402


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        SECRET_KEY="test-secret-key",
        BCRYPT_ROUNDS=4,
        RATE_LIMIT_ENABLED=False,
        FEED_LIMIT=50,
    )


@pytest.fixture
def ctx(settings):
    return build_context(settings, users=InMemoryUserStore(), posts=InMemoryPostStore())


@pytest.fixture
def app(ctx):
    return create_app(context=ctx)


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
def signup(client):
    """Register + login a user; returns (user_id, auth headers)."""

    async def _signup(username="alice", password="pw1"):
        res = await client.post(
            "/api/register", json={"username": username, "password": password},
        )
        assert res.status_code == 201, res.text
        user_id = res.json()["user"]["id"]

        res = await client.post(
            "/api/login", json={"username": username, "password": password},
        )
        assert res.status_code == 200, res.text
        return user_id, {"Authorization": f"Bearer {res.json()['token']}"}

    return _signup


@pytest.fixture
def create_post(client):
    """Create a post as the given user; returns the post JSON."""

    async def _create(headers, title="Hi", content="World", tags=None):
        body = {"title": title, "content": content}
        if tags is not None:
            body["tags"] = tags
        res = await client.post("/api/posts", json=body, headers=headers)
        assert res.status_code == 201, res.text
        return res.json()["post"]

    return _create
