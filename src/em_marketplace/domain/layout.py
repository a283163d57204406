"""Binary layout of Registry and Listing records.

Account data = 8-byte discriminator (sha256("account:<Name>")[:8]) followed
by the Borsh-encoded fields, zero-padded to the allocated size. Field order
and widths match records written by existing on-ledger deployments.
"""

import hashlib

from borsh_construct import U8, U16, U64, CStruct, String
from solders.pubkey import Pubkey

from src.em_common.errors import AccountDataMismatchError
from src.em_ledger.domain.derivation import address_bytes
from src.em_marketplace.domain.models import Listing, Marketplace

DISCRIMINATOR_LEN = 8

# 8 (discriminator) + 32 (admin) + 2 (fee) + 1 + 1 + 1 (bumps) + 4 + 32 (name)
MARKETPLACE_SPACE = 8 + 32 + 2 + 1 + 1 + 1 + (4 + 32)
# 8 (discriminator) + 32 (maker) + 32 (mint) + 8 (price) + 1 (bump)
LISTING_SPACE = 8 + 32 + 32 + 8 + 1

MarketplaceLayout = CStruct(
    "admin" / U8[32],
    "fee" / U16,
    "bump" / U8,
    "treasury_bump" / U8,
    "rewards_mint_bump" / U8,
    "name" / String,
)

ListingLayout = CStruct(
    "maker" / U8[32],
    "mint" / U8[32],
    "price" / U64,
    "bump" / U8,
)


def account_discriminator(name: str) -> bytes:
    return hashlib.sha256(f"account:{name}".encode()).digest()[:DISCRIMINATOR_LEN]


MARKETPLACE_DISCRIMINATOR = account_discriminator("Marketplace")
LISTING_DISCRIMINATOR = account_discriminator("Listing")


def _pubkey_str(raw: list[int]) -> str:
    return str(Pubkey(bytes(raw)))


def _strip_discriminator(address: str, data: bytes, expected: bytes, kind: str) -> bytes:
    if data[:DISCRIMINATOR_LEN] != expected:
        raise AccountDataMismatchError(address, kind)
    return data[DISCRIMINATOR_LEN:]


def encode_marketplace(m: Marketplace) -> bytes:
    body = MarketplaceLayout.build(
        {
            "admin": list(address_bytes(m.admin)),
            "fee": m.fee_bps,
            "bump": m.bump,
            "treasury_bump": m.treasury_bump,
            "rewards_mint_bump": m.rewards_mint_bump,
            "name": m.name,
        }
    )
    return MARKETPLACE_DISCRIMINATOR + body


def decode_marketplace(address: str, data: bytes) -> Marketplace:
    body = _strip_discriminator(address, data, MARKETPLACE_DISCRIMINATOR, "Marketplace")
    parsed = MarketplaceLayout.parse(body)
    return Marketplace(
        admin=_pubkey_str(parsed.admin),
        fee_bps=parsed.fee,
        bump=parsed.bump,
        treasury_bump=parsed.treasury_bump,
        rewards_mint_bump=parsed.rewards_mint_bump,
        name=parsed.name,
    )


def encode_listing(listing: Listing) -> bytes:
    body = ListingLayout.build(
        {
            "maker": list(address_bytes(listing.seller)),
            "mint": list(address_bytes(listing.asset_mint)),
            "price": listing.price,
            "bump": listing.bump,
        }
    )
    return LISTING_DISCRIMINATOR + body


def decode_listing(address: str, data: bytes) -> Listing:
    body = _strip_discriminator(address, data, LISTING_DISCRIMINATOR, "Listing")
    parsed = ListingLayout.parse(body)
    return Listing(
        seller=_pubkey_str(parsed.maker),
        asset_mint=_pubkey_str(parsed.mint),
        price=parsed.price,
        bump=parsed.bump,
    )
