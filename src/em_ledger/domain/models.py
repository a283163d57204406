"""Domain models for em_ledger: pure dataclasses, no SQLAlchemy dependency."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime

from src.em_common.enums import Instruction

SYSTEM_PROGRAM_ID = "11111111111111111111111111111111"
TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
ASSOCIATED_TOKEN_PROGRAM_ID = "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL"


@dataclass
class LedgerAccount:
    address: str
    owner: str               # owning program id
    lamports: int
    data: bytes = b""


@dataclass
class TokenMint:
    address: str
    mint_authority: str | None
    decimals: int
    supply: int
    lamports: int
    # Collection-membership attestation kept by the asset service
    collection_mint: str | None = None
    collection_verified: bool = False


@dataclass
class TokenAccount:
    address: str
    mint: str
    owner: str
    amount: int
    lamports: int


@dataclass
class JournalEntry:
    id: int
    tx_id: str
    instruction: str         # Instruction value
    address: str
    asset: str               # mint address, or NATIVE for lamports
    entry_type: str          # JournalEntryType value
    amount: int              # positive=credit negative=debit
    balance_after: int
    created_at: datetime | None = None


@dataclass(frozen=True)
class Invocation:
    """One atomic call into the ledger; every journal row it writes carries tx_id."""

    instruction: Instruction
    tx_id: str = field(default_factory=lambda: uuid.uuid4().hex)
