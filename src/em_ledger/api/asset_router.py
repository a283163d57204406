"""Dev asset faucet: fund wallets, issue collectibles, close empty holdings.

Stands in for the external asset service on local and test deployments.
Every endpoint answers 403 (code 9003) unless ASSET_FAUCET_ENABLED is set.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.em_common.database import get_db_session
from src.em_common.errors import AccountNotFoundError, FaucetDisabledError
from src.em_common.response import ApiResponse, success_response
from src.em_gateway.auth.dependencies import get_current_signer
from src.em_ledger.application.asset_schemas import (
    AirdropRequest,
    AirdropResponse,
    CloseHoldingResponse,
    IssueCollectibleRequest,
    IssueCollectibleResponse,
)
from src.em_ledger.application.asset_service import AssetService
from src.em_ledger.domain.derivation import associated_token_address, is_valid_address
from src.em_ledger.infrastructure.persistence import LedgerRepository


async def require_asset_faucet() -> None:
    if not settings.ASSET_FAUCET_ENABLED:
        raise FaucetDisabledError()


router = APIRouter(
    prefix="/ledger",
    tags=["asset-faucet"],
    dependencies=[Depends(require_asset_faucet)],
)

_ledger = LedgerRepository()
_service = AssetService(_ledger)


@router.post("/airdrop")
async def airdrop(
    body: AirdropRequest,
    signer: Annotated[str, Depends(get_current_signer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    tx_id = await _service.airdrop(db, signer, body.lamports)
    account = await _ledger.get_account(db, signer)
    data = AirdropResponse(
        tx_id=tx_id,
        address=signer,
        lamports=body.lamports,
        balance_lamports=account.lamports if account is not None else 0,
    )
    return success_response(data.model_dump(), request=request)


@router.post("/collectibles", status_code=201)
async def issue_collectible(
    body: IssueCollectibleRequest,
    signer: Annotated[str, Depends(get_current_signer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    owner = body.owner or signer
    mint = await _service.issue_collectible(
        db,
        creator=signer,
        owner=owner,
        collection_mint=body.collection_mint,
        collection_verified=body.collection_verified,
        decimals=body.decimals,
    )
    data = IssueCollectibleResponse(
        mint=mint,
        creator=signer,
        owner=owner,
        holding_account=associated_token_address(owner, mint),
        collection_mint=body.collection_mint,
        collection_verified=body.collection_verified,
    )
    return success_response(data.model_dump(), request=request)


@router.delete("/tokens/{mint}")
async def close_holding(
    mint: str,
    signer: Annotated[str, Depends(get_current_signer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    if not is_valid_address(mint):
        raise AccountNotFoundError(mint)
    reclaimed = await _service.close_holding(db, signer, mint)
    data = CloseHoldingResponse(
        mint=mint,
        account=associated_token_address(signer, mint),
        reclaimed_lamports=reclaimed,
    )
    return success_response(data.model_dump(), request=request)
