"""Pydantic schemas for em_marketplace API."""

from pydantic import BaseModel, Field

from src.em_common.lamports import lamports_to_display
from src.em_marketplace.domain.registry import MarketplaceRegistry


class InitMarketplaceRequest(BaseModel):
    # Byte length is checked by the name guard so the error carries its program code
    name: str
    fee_bps: int = Field(..., ge=0, le=65535, description="Fee in basis points, charged on top of price")


class MarketplaceDetail(BaseModel):
    address: str
    name: str
    admin: str
    fee_bps: int
    treasury: str
    treasury_balance_lamports: int
    treasury_balance_display: str
    rewards_mint: str

    @classmethod
    def from_registry(cls, registry: MarketplaceRegistry, treasury_lamports: int) -> "MarketplaceDetail":
        return cls(
            address=registry.address,
            name=registry.name,
            admin=registry.admin,
            fee_bps=registry.fee_bps,
            treasury=registry.treasury_address,
            treasury_balance_lamports=treasury_lamports,
            treasury_balance_display=lamports_to_display(treasury_lamports),
            rewards_mint=registry.rewards_mint_address,
        )


class InitMarketplaceResponse(BaseModel):
    tx_id: str
    marketplace: MarketplaceDetail
