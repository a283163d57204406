"""Seeds of every address the marketplace program derives."""

from src.em_ledger.domain.derivation import (
    ProgramAuthority,
    address_bytes,
    associated_token_address,
    derive,
)

MARKETPLACE_SEED = b"marketplace"
TREASURY_SEED = b"treasury"
REWARDS_MINT_SEED = b"rewards_mint"


def marketplace_seeds(name: str) -> list[bytes]:
    return [MARKETPLACE_SEED, name.encode("utf-8")]


def treasury_seeds(marketplace: str) -> list[bytes]:
    return [TREASURY_SEED, address_bytes(marketplace)]


def rewards_mint_seeds(marketplace: str) -> list[bytes]:
    return [REWARDS_MINT_SEED, address_bytes(marketplace)]


def listing_seeds(marketplace: str, asset_mint: str) -> list[bytes]:
    return [address_bytes(marketplace), address_bytes(asset_mint)]


def derive_marketplace(program_id: str, name: str) -> ProgramAuthority:
    return derive(program_id, marketplace_seeds(name))


def derive_treasury(program_id: str, marketplace: str) -> ProgramAuthority:
    return derive(program_id, treasury_seeds(marketplace))


def derive_rewards_mint(program_id: str, marketplace: str) -> ProgramAuthority:
    return derive(program_id, rewards_mint_seeds(marketplace))


def derive_listing(program_id: str, marketplace: str, asset_mint: str) -> ProgramAuthority:
    """Listing record address; the same derivation is the vault's Listing Authority."""
    return derive(program_id, listing_seeds(marketplace, asset_mint))


def vault_address(listing: str, asset_mint: str) -> str:
    return associated_token_address(listing, asset_mint)
