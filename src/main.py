"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.em_common.database import engine
from src.em_common.errors import AppError
from src.em_common.redis_client import close_redis, ping_redis
from src.em_common.response import error_response
from src.em_gateway.api.router import router as auth_router
from src.em_gateway.middleware.request_log import RequestLogMiddleware
from src.em_ledger.api.asset_router import router as asset_router
from src.em_ledger.api.router import router as ledger_router
from src.em_listing.api.router import router as listing_router
from src.em_marketplace.api.router import router as marketplace_router
from src.em_settlement.api.router import router as settlement_router

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB + Redis connections. Shutdown: dispose."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    await ping_redis()
    logger.info("%s started, program id %s", settings.APP_NAME, settings.PROGRAM_ID)
    yield
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, request=request)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(auth_router, prefix="/api/v1")
app.include_router(marketplace_router, prefix="/api/v1")
app.include_router(listing_router, prefix="/api/v1")
app.include_router(settlement_router, prefix="/api/v1")
app.include_router(ledger_router, prefix="/api/v1")
app.include_router(asset_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
