"""Wallet session service: challenge, login, refresh.

A challenge is a one-time message stored in Redis under
`auth:challenge:{address}` with a TTL. Login consumes it with GETDEL, so a
signature can be redeemed only once.
"""

import logging
import secrets

import redis.asyncio as aioredis

from config.settings import settings
from src.em_common.errors import ChallengeExpiredError, InvalidSignatureError
from src.em_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)
from src.em_gateway.auth.wallet_signature import verify_wallet_signature

logger = logging.getLogger(__name__)

CHALLENGE_KEY = "auth:challenge:{address}"


def challenge_message(address: str, nonce: str) -> str:
    return f"Sign in to {settings.APP_NAME}\nwallet: {address}\nnonce: {nonce}"


class WalletSessionService:
    """Stateless service: instantiate once, reuse across requests."""

    async def issue_challenge(self, address: str, redis: aioredis.Redis) -> str:
        """Store a fresh challenge for address, replacing any pending one."""
        message = challenge_message(address, secrets.token_hex(16))
        await redis.set(
            CHALLENGE_KEY.format(address=address),
            message,
            ex=settings.AUTH_CHALLENGE_TTL_SECONDS,
        )
        return message

    async def login(
        self, address: str, signature: str, redis: aioredis.Redis
    ) -> tuple[str, str]:
        """Redeem the pending challenge; returns (access_token, refresh_token)."""
        message = await redis.getdel(CHALLENGE_KEY.format(address=address))
        if message is None:
            raise ChallengeExpiredError(address)
        if not verify_wallet_signature(address, message, signature):
            logger.info("Rejected wallet signature for %s", address)
            raise InvalidSignatureError()
        return create_access_token(address), create_refresh_token(address)

    async def refresh(self, refresh_token: str) -> str:
        payload = decode_token(refresh_token, expected_type="refresh")
        return create_access_token(payload["sub"])
