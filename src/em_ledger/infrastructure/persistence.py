"""LedgerRepository: concrete implementation of LedgerProtocol.

Every mutating primitive loads its rows with SELECT ... FOR UPDATE, applies
the change on the ORM objects, writes journal rows and flushes, so a failed
check later in the same invocation still rolls everything back.

Transaction ownership: the CALLER (application service) opens the
transaction via `async with db.begin()`. Nothing here commits.
"""

import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.em_common.enums import NATIVE_ASSET, JournalEntryType
from src.em_common.errors import (
    AccountAlreadyInUseError,
    AccountNotFoundError,
    InsufficientFundsError,
    InsufficientTokenBalanceError,
    InternalError,
    InvalidProgramAuthorityError,
    MintMismatchError,
    NonZeroTokenBalanceError,
    OwnerMismatchError,
)
from src.em_common.lamports import MINT_SPACE, TOKEN_ACCOUNT_SPACE, fits_u64, minimum_balance
from src.em_ledger.domain.derivation import ProgramAuthority, associated_token_address
from src.em_ledger.domain.models import (
    SYSTEM_PROGRAM_ID,
    Invocation,
    JournalEntry,
    LedgerAccount,
    TokenAccount,
    TokenMint,
)
from src.em_ledger.domain.repository import Authority
from src.em_ledger.infrastructure.db_models import (
    JournalEntryORM,
    LedgerAccountORM,
    TokenAccountORM,
    TokenMintORM,
)
from src.em_ledger.infrastructure.journal import write_journal

logger = logging.getLogger(__name__)

_LOCKABLE = (LedgerAccountORM, TokenMintORM, TokenAccountORM)


def _orm_to_account(row: LedgerAccountORM) -> LedgerAccount:
    return LedgerAccount(
        address=row.address,
        owner=row.owner,
        lamports=row.lamports,
        data=bytes(row.data),
    )


def _orm_to_mint(row: TokenMintORM) -> TokenMint:
    return TokenMint(
        address=row.address,
        mint_authority=row.mint_authority,
        decimals=row.decimals,
        supply=row.supply,
        lamports=row.lamports,
        collection_mint=row.collection_mint,
        collection_verified=row.collection_verified,
    )


def _orm_to_token_account(row: TokenAccountORM) -> TokenAccount:
    return TokenAccount(
        address=row.address,
        mint=row.mint,
        owner=row.owner,
        amount=row.amount,
        lamports=row.lamports,
    )


def _orm_to_journal(row: JournalEntryORM) -> JournalEntry:
    return JournalEntry(
        id=row.id,
        tx_id=row.tx_id,
        instruction=row.instruction,
        address=row.address,
        asset=row.asset,
        entry_type=row.entry_type,
        amount=row.amount,
        balance_after=row.balance_after,
        created_at=row.created_at,
    )


async def _locked(db: AsyncSession, model: type, address: str):
    """SELECT ... FOR UPDATE by primary key, bypassing the identity map."""
    return await db.get(model, address, with_for_update=True, populate_existing=True)


def _resolve_signer(authority: Authority) -> str:
    """Return the address an authority signs as, re-deriving program authorities."""
    if isinstance(authority, ProgramAuthority):
        if not authority.verify():
            raise InvalidProgramAuthorityError(authority.address)
        return authority.address
    return authority


def _check_authority(subject: str, expected: str, authority: Authority) -> None:
    signer = _resolve_signer(authority)
    if signer != expected:
        raise OwnerMismatchError(subject, f"expected authority {expected}, got {signer}")


class LedgerRepository:
    """Concrete ledger host: all primitives run inside the caller's transaction."""

    # ------------------------------------------------------------------
    # Locking / reads
    # ------------------------------------------------------------------

    async def lock_accounts(self, db: AsyncSession, addresses: Sequence[str]) -> None:
        """Row-lock every declared account that exists, in address order."""
        ordered = sorted(set(addresses))
        for model in _LOCKABLE:
            await db.execute(
                select(model)
                .where(model.address.in_(ordered))
                .order_by(model.address)
                .with_for_update()
                .execution_options(populate_existing=True)
            )

    async def get_account(self, db: AsyncSession, address: str) -> LedgerAccount | None:
        row = await db.get(LedgerAccountORM, address, populate_existing=True)
        return _orm_to_account(row) if row is not None else None

    async def get_mint(self, db: AsyncSession, address: str) -> TokenMint | None:
        row = await db.get(TokenMintORM, address, populate_existing=True)
        return _orm_to_mint(row) if row is not None else None

    async def get_token_account(self, db: AsyncSession, address: str) -> TokenAccount | None:
        row = await db.get(TokenAccountORM, address, populate_existing=True)
        return _orm_to_token_account(row) if row is not None else None

    async def list_token_accounts(self, db: AsyncSession, owner: str) -> list[TokenAccount]:
        result = await db.execute(
            select(TokenAccountORM)
            .where(TokenAccountORM.owner == owner)
            .order_by(TokenAccountORM.mint)
        )
        return [_orm_to_token_account(r) for r in result.scalars()]

    async def list_journal_entries(
        self, db: AsyncSession, address: str, cursor_id: int | None, limit: int
    ) -> list[JournalEntry]:
        stmt = select(JournalEntryORM).where(JournalEntryORM.address == address)
        if cursor_id is not None:
            stmt = stmt.where(JournalEntryORM.id < cursor_id)
        stmt = stmt.order_by(JournalEntryORM.id.desc()).limit(limit)
        result = await db.execute(stmt)
        return [_orm_to_journal(r) for r in result.scalars()]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _is_occupied(self, db: AsyncSession, address: str) -> bool:
        for model in _LOCKABLE:
            if await _locked(db, model, address) is not None:
                return True
        return False

    async def _flush_new(self, db: AsyncSession, address: str) -> None:
        try:
            await db.flush()
        except IntegrityError:
            # Concurrent creation won the primary key
            raise AccountAlreadyInUseError(address) from None

    async def _debit_lamports(
        self,
        db: AsyncSession,
        inv: Invocation,
        address: str,
        amount: int,
        entry_type: JournalEntryType,
    ) -> LedgerAccountORM:
        row = await _locked(db, LedgerAccountORM, address)
        available = row.lamports if row is not None else 0
        if row is None or available < amount:
            raise InsufficientFundsError(address, amount, available)
        if row.owner != SYSTEM_PROGRAM_ID:
            raise OwnerMismatchError(address, "only system-owned accounts can pay")
        row.lamports -= amount
        await write_journal(inv, address, NATIVE_ASSET, entry_type, -amount, row.lamports, db)
        return row

    async def _credit_lamports(
        self,
        db: AsyncSession,
        inv: Invocation,
        address: str,
        amount: int,
        entry_type: JournalEntryType,
    ) -> None:
        row = await _locked(db, LedgerAccountORM, address)
        if row is None:
            # First credit brings a plain system account into existence
            row = LedgerAccountORM(address=address, owner=SYSTEM_PROGRAM_ID, lamports=0, data=b"")
            db.add(row)
        if not fits_u64(row.lamports + amount):
            raise InternalError(f"lamport balance of {address} exceeds u64")
        row.lamports += amount
        await write_journal(inv, address, NATIVE_ASSET, entry_type, amount, row.lamports, db)

    async def _pay_rent(
        self, db: AsyncSession, inv: Invocation, payer: str, new_address: str, space: int
    ) -> int:
        rent = minimum_balance(space)
        await self._debit_lamports(db, inv, payer, rent, JournalEntryType.RENT_PAYMENT)
        await write_journal(inv, new_address, NATIVE_ASSET, JournalEntryType.RENT_DEPOSIT, rent, rent, db)
        return rent

    async def _reclaim(
        self, db: AsyncSession, inv: Invocation, closed: str, lamports: int, destination: str
    ) -> None:
        await write_journal(inv, closed, NATIVE_ASSET, JournalEntryType.RENT_RELEASE, -lamports, 0, db)
        await self._credit_lamports(db, inv, destination, lamports, JournalEntryType.RENT_RECLAIM)

    # ------------------------------------------------------------------
    # System primitives
    # ------------------------------------------------------------------

    async def create_account(
        self,
        db: AsyncSession,
        inv: Invocation,
        address: ProgramAuthority,
        owner: str,
        payer: str,
        space: int,
        data: bytes,
    ) -> LedgerAccount:
        """Allocate a program-owned account at a derived address, rent paid by payer."""
        if not address.verify():
            raise InvalidProgramAuthorityError(address.address)
        if len(data) > space:
            raise InternalError(f"{len(data)} bytes do not fit an account of {space}")
        if await self._is_occupied(db, address.address):
            raise AccountAlreadyInUseError(address.address)

        rent = await self._pay_rent(db, inv, payer, address.address, space)
        row = LedgerAccountORM(
            address=address.address,
            owner=owner,
            lamports=rent,
            data=data.ljust(space, b"\x00"),
        )
        db.add(row)
        await self._flush_new(db, address.address)
        return _orm_to_account(row)

    async def close_account(
        self, db: AsyncSession, inv: Invocation, address: str, owner: str, destination: str
    ) -> int:
        """Close a program-owned account; only its owning program may. Returns lamports reclaimed."""
        row = await _locked(db, LedgerAccountORM, address)
        if row is None:
            raise AccountNotFoundError(address)
        if row.owner != owner:
            raise OwnerMismatchError(address, f"owned by {row.owner}, not {owner}")
        reclaimed = row.lamports
        await db.delete(row)
        await db.flush()
        await self._reclaim(db, inv, address, reclaimed, destination)
        await db.flush()
        return reclaimed

    async def transfer_lamports(
        self,
        db: AsyncSession,
        inv: Invocation,
        source: str,
        destination: str,
        amount: int,
        signer: str,
    ) -> None:
        if signer != source:
            raise OwnerMismatchError(source, "source account must sign the transfer")
        if not fits_u64(amount):
            raise InternalError(f"transfer amount out of range: {amount}")
        await self._debit_lamports(db, inv, source, amount, JournalEntryType.NATIVE_TRANSFER_OUT)
        if amount > 0 or await _locked(db, LedgerAccountORM, destination) is not None:
            await self._credit_lamports(
                db, inv, destination, amount, JournalEntryType.NATIVE_TRANSFER_IN
            )
        await db.flush()

    async def airdrop(self, db: AsyncSession, inv: Invocation, address: str, amount: int) -> None:
        """Credit newly issued lamports; the asset service's faucet."""
        if amount <= 0 or not fits_u64(amount):
            raise InternalError(f"airdrop amount out of range: {amount}")
        await self._credit_lamports(db, inv, address, amount, JournalEntryType.AIRDROP)
        await db.flush()

    # ------------------------------------------------------------------
    # Token primitives
    # ------------------------------------------------------------------

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
    ) -> TokenMint:
        mint_address = _resolve_signer(address)
        if await self._is_occupied(db, mint_address):
            raise AccountAlreadyInUseError(mint_address)

        rent = await self._pay_rent(db, inv, payer, mint_address, MINT_SPACE)
        row = TokenMintORM(
            address=mint_address,
            mint_authority=mint_authority,
            decimals=decimals,
            supply=0,
            lamports=rent,
            collection_mint=collection_mint,
            collection_verified=collection_verified,
        )
        db.add(row)
        await self._flush_new(db, mint_address)
        return _orm_to_mint(row)

    async def create_associated_token_account(
        self, db: AsyncSession, inv: Invocation, payer: str, owner: str, mint: str
    ) -> TokenAccount:
        if await db.get(TokenMintORM, mint, populate_existing=True) is None:
            raise AccountNotFoundError(mint)
        address = associated_token_address(owner, mint)
        if await self._is_occupied(db, address):
            raise AccountAlreadyInUseError(address)

        rent = await self._pay_rent(db, inv, payer, address, TOKEN_ACCOUNT_SPACE)
        row = TokenAccountORM(address=address, mint=mint, owner=owner, amount=0, lamports=rent)
        db.add(row)
        await self._flush_new(db, address)
        return _orm_to_token_account(row)

    async def get_or_create_associated_token_account(
        self, db: AsyncSession, inv: Invocation, payer: str, owner: str, mint: str
    ) -> TokenAccount:
        address = associated_token_address(owner, mint)
        row = await _locked(db, TokenAccountORM, address)
        if row is None:
            return await self.create_associated_token_account(db, inv, payer, owner, mint)
        if row.mint != mint or row.owner != owner:
            raise MintMismatchError(f"{address} is not the holding account of {owner} for {mint}")
        return _orm_to_token_account(row)

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
    ) -> None:
        mint_row = await _locked(db, TokenMintORM, mint)
        if mint_row is None:
            raise AccountNotFoundError(mint)
        if mint_row.decimals != decimals:
            raise MintMismatchError(f"{mint} has {mint_row.decimals} decimals, not {decimals}")

        src = await _locked(db, TokenAccountORM, source)
        if src is None:
            raise AccountNotFoundError(source)
        dst = await _locked(db, TokenAccountORM, destination)
        if dst is None:
            raise AccountNotFoundError(destination)
        if src.mint != mint or dst.mint != mint:
            raise MintMismatchError(f"{source} -> {destination} do not both hold {mint}")

        _check_authority(source, src.owner, authority)
        if src.amount < amount:
            raise InsufficientTokenBalanceError(source, amount, src.amount)

        src.amount -= amount
        dst.amount += amount
        await write_journal(inv, source, mint, JournalEntryType.TOKEN_TRANSFER_OUT, -amount, src.amount, db)
        await write_journal(inv, destination, mint, JournalEntryType.TOKEN_TRANSFER_IN, amount, dst.amount, db)
        await db.flush()

    async def close_token_account(
        self,
        db: AsyncSession,
        inv: Invocation,
        account: str,
        destination: str,
        authority: Authority,
    ) -> int:
        row = await _locked(db, TokenAccountORM, account)
        if row is None:
            raise AccountNotFoundError(account)
        _check_authority(account, row.owner, authority)
        if row.amount != 0:
            raise NonZeroTokenBalanceError(account, row.amount)

        reclaimed = row.lamports
        await db.delete(row)
        await db.flush()
        await self._reclaim(db, inv, account, reclaimed, destination)
        await db.flush()
        return reclaimed

    async def mint_to(
        self,
        db: AsyncSession,
        inv: Invocation,
        mint: str,
        destination: str,
        amount: int,
        authority: Authority,
    ) -> None:
        mint_row = await _locked(db, TokenMintORM, mint)
        if mint_row is None:
            raise AccountNotFoundError(mint)
        if mint_row.mint_authority is None:
            raise OwnerMismatchError(mint, "minting is disabled")
        _check_authority(mint, mint_row.mint_authority, authority)

        dst = await _locked(db, TokenAccountORM, destination)
        if dst is None:
            raise AccountNotFoundError(destination)
        if dst.mint != mint:
            raise MintMismatchError(f"{destination} does not hold {mint}")
        if not fits_u64(mint_row.supply + amount):
            raise InternalError(f"supply of {mint} exceeds u64")

        mint_row.supply += amount
        dst.amount += amount
        await write_journal(inv, destination, mint, JournalEntryType.TOKEN_MINT, amount, dst.amount, db)
        await db.flush()
        logger.debug("Minted %d of %s to %s (tx=%s)", amount, mint, destination, inv.tx_id)
