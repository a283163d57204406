"""Integration-test fixtures.

The FastAPI app is driven in-process through httpx's ASGITransport. The
database and Redis dependencies are overridden with the per-test SQLite
ledger and an in-memory challenge store, so no external services are needed.
The lifespan hook is not run.
"""

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from solders.keypair import Keypair
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.em_common.database import get_db_session
from src.em_common.redis_client import get_redis
from src.main import app
from tests.conftest import FakeRedis


@pytest_asyncio.fixture
async def client(sessions: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncClient, None]:
    redis = FakeRedis()

    async def _db() -> AsyncGenerator[AsyncSession, None]:
        async with sessions() as session:
            yield session

    async def _redis() -> FakeRedis:
        return redis

    app.dependency_overrides[get_db_session] = _db
    app.dependency_overrides[get_redis] = _redis
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def sign_in(client: AsyncClient, keypair: Keypair) -> dict[str, str]:
    """Run the challenge/login handshake; returns the Authorization header."""
    address = str(keypair.pubkey())
    resp = await client.post("/api/v1/auth/challenge", json={"address": address})
    assert resp.status_code == 200, resp.text
    message = resp.json()["data"]["message"]
    signature = str(keypair.sign_message(message.encode("utf-8")))
    resp = await client.post(
        "/api/v1/auth/login", json={"address": address, "signature": signature}
    )
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['data']['access_token']}"}
