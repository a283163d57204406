"""Redis connection for wallet sign-in challenges.

Redis holds nothing else: balances, records and the journal live in the
ledger tables, so losing Redis only invalidates pending challenges.
"""

import logging

import redis.asyncio as aioredis

from config.settings import settings

logger = logging.getLogger(__name__)

_client: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis:
    """FastAPI dependency: the shared client, created on first use."""
    global _client  # noqa: PLW0603
    if _client is None:
        _client = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            health_check_interval=30,
        )
    return _client


async def ping_redis() -> None:
    """Fail fast at startup if the challenge store is unreachable."""
    client = await get_redis()
    await client.ping()
    logger.info("Challenge store reachable at %s", settings.REDIS_URL.rsplit("@", 1)[-1])


async def close_redis() -> None:
    global _client  # noqa: PLW0603
    if _client is not None:
        await _client.aclose()
        _client = None
