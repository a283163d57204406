"""em_settlement REST API: purchase a listed asset."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.em_common.database import get_db_session
from src.em_common.response import ApiResponse, success_response
from src.em_gateway.auth.dependencies import get_current_signer
from src.em_settlement.application.service import SettlementService

router = APIRouter(prefix="/marketplaces/{name}/listings", tags=["settlement"])

_service = SettlementService()


@router.post("/{asset_mint}/purchase")
async def purchase(
    name: str,
    asset_mint: str,
    signer: Annotated[str, Depends(get_current_signer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.purchase(db, signer, name, asset_mint)
    return success_response(data.model_dump(), request=request)
