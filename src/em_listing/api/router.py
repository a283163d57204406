"""em_listing REST API: list, inspect and withdraw listings."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.em_common.database import get_db_session
from src.em_common.response import ApiResponse, success_response
from src.em_gateway.auth.dependencies import get_current_signer
from src.em_listing.application.schemas import ListAssetRequest
from src.em_listing.application.service import ListingService

router = APIRouter(prefix="/marketplaces/{name}/listings", tags=["listings"])

_service = ListingService()


@router.post("", status_code=201)
async def list_asset(
    name: str,
    body: ListAssetRequest,
    signer: Annotated[str, Depends(get_current_signer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.list_asset(
        db, signer, name, body.asset_mint, body.collection_mint, body.price_lamports
    )
    return success_response(data.model_dump(), request=request)


@router.get("/{asset_mint}")
async def get_listing(
    name: str,
    asset_mint: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_listing(db, name, asset_mint)
    return success_response(data.model_dump(), request=request)


@router.delete("/{asset_mint}")
async def delist(
    name: str,
    asset_mint: str,
    signer: Annotated[str, Depends(get_current_signer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.delist(db, signer, name, asset_mint)
    return success_response(data.model_dump(), request=request)
