"""Deterministic program-address derivation.

A ProgramAuthority is an address with no private key: it is the output of
the program-address function over (seeds, nonce, program id). The ledger
accepts it as signing authority for accounts it owns by re-deriving the
address from the carried seeds, so "signing" never involves a secret.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from solders.pubkey import Pubkey

from src.em_ledger.domain.models import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID

MAX_SEED_LEN = 32


@dataclass(frozen=True)
class ProgramAuthority:
    address: str
    seeds: tuple[bytes, ...]
    bump: int
    program_id: str

    def verify(self) -> bool:
        """Re-derive from the carried seeds and compare address and nonce."""
        derived, bump = Pubkey.find_program_address(
            list(self.seeds), Pubkey.from_string(self.program_id)
        )
        return str(derived) == self.address and bump == self.bump


def address_bytes(address: str) -> bytes:
    return bytes(Pubkey.from_string(address))


def is_valid_address(address: str) -> bool:
    try:
        Pubkey.from_string(address)
    except Exception:
        return False
    return True


def derive(program_id: str, seeds: Sequence[bytes]) -> ProgramAuthority:
    """Find the canonical (address, nonce) for seeds under program_id."""
    for seed in seeds:
        if len(seed) > MAX_SEED_LEN:
            raise ValueError(f"seed longer than {MAX_SEED_LEN} bytes")
    address, bump = Pubkey.find_program_address(list(seeds), Pubkey.from_string(program_id))
    return ProgramAuthority(
        address=str(address),
        seeds=tuple(seeds),
        bump=bump,
        program_id=program_id,
    )


def associated_token_address(owner: str, mint: str) -> str:
    """Holding account of `mint` for `owner`: owner may itself be a program address."""
    address, _ = Pubkey.find_program_address(
        [address_bytes(owner), address_bytes(TOKEN_PROGRAM_ID), address_bytes(mint)],
        Pubkey.from_string(ASSOCIATED_TOKEN_PROGRAM_ID),
    )
    return str(address)
