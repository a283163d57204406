"""Tests for Registry/Listing record encoding."""

import hashlib

import pytest
from solders.keypair import Keypair

from src.em_common.errors import AccountDataMismatchError
from src.em_marketplace.domain.layout import (
    LISTING_DISCRIMINATOR,
    LISTING_SPACE,
    MARKETPLACE_DISCRIMINATOR,
    MARKETPLACE_SPACE,
    decode_listing,
    decode_marketplace,
    encode_listing,
    encode_marketplace,
)
from src.em_marketplace.domain.models import Listing, Marketplace


def _wallet() -> str:
    return str(Keypair().pubkey())


def _marketplace(name: str = "Gallery") -> Marketplace:
    return Marketplace(
        admin=_wallet(), fee_bps=250, bump=254, treasury_bump=253, rewards_mint_bump=255, name=name
    )


class TestSizes:
    def test_record_spaces(self) -> None:
        assert MARKETPLACE_SPACE == 81
        assert LISTING_SPACE == 81

    def test_longest_name_fills_marketplace_space(self) -> None:
        assert len(encode_marketplace(_marketplace("n" * 32))) == MARKETPLACE_SPACE

    def test_listing_fills_listing_space(self) -> None:
        listing = Listing(seller=_wallet(), asset_mint=_wallet(), price=1, bump=255)
        assert len(encode_listing(listing)) == LISTING_SPACE


class TestDiscriminators:
    def test_anchor_account_discriminators(self) -> None:
        assert MARKETPLACE_DISCRIMINATOR == hashlib.sha256(b"account:Marketplace").digest()[:8]
        assert LISTING_DISCRIMINATOR == hashlib.sha256(b"account:Listing").digest()[:8]


class TestMarketplaceRecord:
    def test_decode_restores_fields(self) -> None:
        record = _marketplace()
        assert decode_marketplace("addr", encode_marketplace(record)) == record

    def test_field_order(self) -> None:
        record = _marketplace()
        data = encode_marketplace(record)
        # admin, fee (u16 LE), three bumps, then u32 length-prefixed name
        assert data[40:42] == (250).to_bytes(2, "little")
        assert data[42:45] == bytes([254, 253, 255])
        assert data[45:49] == (7).to_bytes(4, "little")
        assert data[49:56] == b"Gallery"

    def test_zero_padding_ignored(self) -> None:
        record = _marketplace()
        padded = encode_marketplace(record).ljust(MARKETPLACE_SPACE, b"\x00")
        assert decode_marketplace("addr", padded) == record

    def test_utf8_name(self) -> None:
        record = _marketplace("Galería")
        assert decode_marketplace("addr", encode_marketplace(record)).name == "Galería"

    def test_listing_data_is_rejected(self) -> None:
        listing = Listing(seller=_wallet(), asset_mint=_wallet(), price=1, bump=255)
        with pytest.raises(AccountDataMismatchError):
            decode_marketplace("addr", encode_listing(listing))


class TestListingRecord:
    def test_decode_restores_fields(self) -> None:
        listing = Listing(seller=_wallet(), asset_mint=_wallet(), price=1_000_000, bump=251)
        assert decode_listing("addr", encode_listing(listing)) == listing

    def test_price_is_u64_le(self) -> None:
        listing = Listing(seller=_wallet(), asset_mint=_wallet(), price=(1 << 64) - 1, bump=1)
        data = encode_listing(listing)
        assert data[72:80] == b"\xff" * 8
        assert decode_listing("addr", data).price == (1 << 64) - 1

    def test_empty_data_is_rejected(self) -> None:
        with pytest.raises(AccountDataMismatchError):
            decode_listing("addr", b"")
