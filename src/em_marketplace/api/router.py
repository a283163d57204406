"""em_marketplace REST API: Registry creation and lookup."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.em_common.database import get_db_session
from src.em_common.response import ApiResponse, success_response
from src.em_gateway.auth.dependencies import get_current_signer
from src.em_marketplace.application.schemas import InitMarketplaceRequest
from src.em_marketplace.application.service import MarketplaceService

router = APIRouter(prefix="/marketplaces", tags=["marketplaces"])

_service = MarketplaceService()


@router.post("", status_code=201)
async def init_marketplace(
    body: InitMarketplaceRequest,
    signer: Annotated[str, Depends(get_current_signer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.init_marketplace(db, signer, body.name, body.fee_bps)
    return success_response(data.model_dump(), request=request)


@router.get("/{name}")
async def get_marketplace(
    name: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_marketplace(db, name)
    return success_response(data.model_dump(), request=request)
