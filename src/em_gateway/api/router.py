"""Auth API router: challenge, login, refresh.

All endpoints return ApiResponse. The challenge and login endpoints need
Redis; refresh is stateless.
"""

from typing import Annotated

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends, Request, status

from config.settings import settings
from src.em_common.redis_client import get_redis
from src.em_common.response import ApiResponse, success_response
from src.em_gateway.session.schemas import (
    ChallengeRequest,
    ChallengeResponse,
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RefreshResponse,
)
from src.em_gateway.session.service import WalletSessionService

router = APIRouter(prefix="/auth", tags=["auth"])
_service = WalletSessionService()


@router.post(
    "/challenge",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Issue a sign-in challenge for a wallet",
)
async def challenge(
    request: Request,
    body: ChallengeRequest,
    redis: Annotated[aioredis.Redis, Depends(get_redis)],
) -> ApiResponse:
    message = await _service.issue_challenge(body.address, redis)
    data = ChallengeResponse(
        address=body.address,
        message=message,
        expires_in=settings.AUTH_CHALLENGE_TTL_SECONDS,
    )
    return success_response(data.model_dump(), request=request)


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Exchange a signed challenge for tokens",
)
async def login(
    request: Request,
    body: LoginRequest,
    redis: Annotated[aioredis.Redis, Depends(get_redis)],
) -> ApiResponse:
    access_token, refresh_token = await _service.login(body.address, body.signature, redis)
    data = LoginResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="Bearer",
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
        address=body.address,
    )
    return success_response(data.model_dump(), "Login successful", request=request)


@router.post(
    "/refresh",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Refresh access token",
)
async def refresh_token(
    request: Request,
    body: RefreshRequest,
) -> ApiResponse:
    new_access_token = await _service.refresh(body.refresh_token)
    data = RefreshResponse(
        access_token=new_access_token,
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
    )
    return success_response(data.model_dump(), "Token refreshed", request=request)
