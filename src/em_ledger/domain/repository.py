"""Ledger Protocol: the host primitives the marketplace program drives.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation on the ledger tables.
Every method runs inside the caller's transaction; none of them commits.
"""

from collections.abc import Sequence
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.em_ledger.domain.derivation import ProgramAuthority
from src.em_ledger.domain.models import (
    Invocation,
    JournalEntry,
    LedgerAccount,
    TokenAccount,
    TokenMint,
)

# A plain signer address (signature already verified by the gateway) or a
# program-derived authority.
Authority = str | ProgramAuthority


class LedgerProtocol(Protocol):
    async def lock_accounts(self, db: AsyncSession, addresses: Sequence[str]) -> None: ...

    async def get_account(self, db: AsyncSession, address: str) -> LedgerAccount | None: ...

    async def get_mint(self, db: AsyncSession, address: str) -> TokenMint | None: ...

    async def get_token_account(
        self, db: AsyncSession, address: str
    ) -> TokenAccount | None: ...

    async def create_account(
        self,
        db: AsyncSession,
        inv: Invocation,
        address: ProgramAuthority,
        owner: str,
        payer: str,
        space: int,
        data: bytes,
    ) -> LedgerAccount: ...

    async def close_account(
        self, db: AsyncSession, inv: Invocation, address: str, owner: str, destination: str
    ) -> int: ...

    async def transfer_lamports(
        self,
        db: AsyncSession,
        inv: Invocation,
        source: str,
        destination: str,
        amount: int,
        signer: str,
    ) -> None: ...

    async def airdrop(
        self, db: AsyncSession, inv: Invocation, address: str, amount: int
    ) -> None: ...

    async def create_mint(
        self,
        db: AsyncSession,
        inv: Invocation,
        address: Authority,
        payer: str,
        decimals: int,
        mint_authority: str | None,
        collection_mint: str | None = None,
        collection_verified: bool = False,
    ) -> TokenMint: ...

    async def create_associated_token_account(
        self, db: AsyncSession, inv: Invocation, payer: str, owner: str, mint: str
    ) -> TokenAccount: ...

    async def get_or_create_associated_token_account(
        self, db: AsyncSession, inv: Invocation, payer: str, owner: str, mint: str
    ) -> TokenAccount: ...

    async def transfer_checked(
        self,
        db: AsyncSession,
        inv: Invocation,
        source: str,
        mint: str,
        destination: str,
        amount: int,
        decimals: int,
        authority: Authority,
    ) -> None: ...

    async def close_token_account(
        self,
        db: AsyncSession,
        inv: Invocation,
        account: str,
        destination: str,
        authority: Authority,
    ) -> int: ...

    async def mint_to(
        self,
        db: AsyncSession,
        inv: Invocation,
        mint: str,
        destination: str,
        amount: int,
        authority: Authority,
    ) -> None: ...

    async def list_token_accounts(
        self, db: AsyncSession, owner: str
    ) -> list[TokenAccount]: ...

    async def list_journal_entries(
        self, db: AsyncSession, address: str, cursor_id: int | None, limit: int
    ) -> list[JournalEntry]: ...
