"""Checks that an asset mint is a single-unit collectible of the claimed collection.

The collection attestation lives on the mint itself; a collection counts
only once the collection authority has verified membership.
"""
from src.em_common.errors import (
    CollectionInvalidError,
    CollectionNotVerifiedError,
    InvalidMintDecimalsError,
)
from src.em_ledger.domain.models import TokenMint


def check_single_unit(mint: TokenMint) -> None:
    if mint.decimals != 0:
        raise InvalidMintDecimalsError(mint.decimals)


def check_collection(mint: TokenMint, collection_mint: str) -> None:
    if mint.collection_mint != collection_mint:
        raise CollectionInvalidError(collection_mint)
    if not mint.collection_verified:
        raise CollectionNotVerifiedError(collection_mint)
