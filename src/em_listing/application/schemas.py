"""Pydantic schemas for em_listing API."""

from pydantic import BaseModel, Field, field_validator

from src.em_common.lamports import U64_MAX, lamports_to_display
from src.em_ledger.domain.derivation import is_valid_address
from src.em_listing.domain.escrow import ListingEscrow


class ListAssetRequest(BaseModel):
    asset_mint: str
    collection_mint: str
    # Zero passes validation so the price guard can reject it with its program code
    price_lamports: int = Field(..., ge=0, le=U64_MAX)

    @field_validator("asset_mint", "collection_mint")
    @classmethod
    def valid_address(cls, v: str) -> str:
        if not is_valid_address(v):
            raise ValueError("not a base58 ledger address")
        return v


class ListingDetail(BaseModel):
    marketplace: str
    address: str
    vault: str
    seller: str
    asset_mint: str
    price_lamports: int
    price_display: str

    @classmethod
    def from_escrow(cls, marketplace: str, escrow: ListingEscrow) -> "ListingDetail":
        listing = escrow.listing
        assert listing is not None, "escrow has no loaded listing record"
        return cls(
            marketplace=marketplace,
            address=escrow.address,
            vault=escrow.vault,
            seller=listing.seller,
            asset_mint=listing.asset_mint,
            price_lamports=listing.price,
            price_display=lamports_to_display(listing.price),
        )


class ListAssetResponse(BaseModel):
    tx_id: str
    listing: ListingDetail


class DelistResponse(BaseModel):
    tx_id: str
    asset_mint: str
    returned_to: str  # seller's holding account that received the asset back
    reclaimed_lamports: int
    reclaimed_display: str
