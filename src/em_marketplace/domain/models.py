"""Domain models for the marketplace program's own records: pure dataclasses."""

from dataclasses import dataclass


@dataclass
class Marketplace:
    """Registry record stored at ["marketplace", name]."""

    admin: str
    fee_bps: int
    bump: int
    treasury_bump: int
    rewards_mint_bump: int
    name: str


@dataclass
class Listing:
    """Listing record stored at [marketplace, asset_mint]; never updated in place."""

    seller: str
    asset_mint: str
    price: int               # lamports, > 0
    bump: int
