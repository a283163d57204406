"""em_ledger REST API: public read views of accounts, holdings and journal."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.em_common.database import get_db_session
from src.em_common.response import ApiResponse, success_response
from src.em_ledger.application.service import LedgerQueryService

router = APIRouter(prefix="/ledger", tags=["ledger"])

_service = LedgerQueryService()


@router.get("/accounts/{address}")
async def get_account(
    address: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_balance(db, address)
    return success_response(data.model_dump(), request=request)


@router.get("/accounts/{address}/tokens")
async def list_tokens(
    address: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.list_tokens(db, address)
    return success_response(data.model_dump(), request=request)


@router.get("/accounts/{address}/journal")
async def list_journal(
    address: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
) -> ApiResponse:
    data = await _service.list_journal(db, address, cursor, limit)
    return success_response(data.model_dump(), request=request)
