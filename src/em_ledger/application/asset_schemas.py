"""Pydantic schemas for the dev asset faucet."""

from pydantic import BaseModel, Field, field_validator

from src.em_common.lamports import LAMPORTS_PER_SOL
from src.em_ledger.domain.derivation import is_valid_address

MAX_AIRDROP_LAMPORTS = 1_000 * LAMPORTS_PER_SOL


class AirdropRequest(BaseModel):
    lamports: int = Field(..., gt=0, le=MAX_AIRDROP_LAMPORTS)


class AirdropResponse(BaseModel):
    tx_id: str
    address: str
    lamports: int
    balance_lamports: int


class IssueCollectibleRequest(BaseModel):
    collection_mint: str
    owner: str | None = None  # defaults to the caller
    collection_verified: bool = True
    decimals: int = Field(0, ge=0, le=9)

    @field_validator("collection_mint", "owner")
    @classmethod
    def valid_address(cls, v: str | None) -> str | None:
        if v is not None and not is_valid_address(v):
            raise ValueError("not a base58 ledger address")
        return v


class IssueCollectibleResponse(BaseModel):
    mint: str
    creator: str
    owner: str
    holding_account: str
    collection_mint: str
    collection_verified: bool


class CloseHoldingResponse(BaseModel):
    mint: str
    account: str
    reclaimed_lamports: int
