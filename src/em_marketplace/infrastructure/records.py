"""Loading and resolving the program's own records from the ledger."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.em_common.errors import AccountDataMismatchError, MarketplaceNotFoundError
from src.em_ledger.domain.derivation import MAX_SEED_LEN
from src.em_ledger.domain.repository import LedgerProtocol
from src.em_marketplace.domain.addresses import derive_marketplace
from src.em_marketplace.domain.layout import decode_listing, decode_marketplace
from src.em_marketplace.domain.models import Listing, Marketplace
from src.em_marketplace.domain.registry import MarketplaceRegistry


class ProgramRecordRepository:
    def __init__(self, ledger: LedgerProtocol, program_id: str) -> None:
        self._ledger = ledger
        self._program_id = program_id

    async def load_marketplace(self, db: AsyncSession, address: str) -> Marketplace | None:
        account = await self._ledger.get_account(db, address)
        if account is None:
            return None
        if account.owner != self._program_id:
            raise AccountDataMismatchError(address, "Marketplace")
        return decode_marketplace(address, account.data)

    async def load_listing(self, db: AsyncSession, address: str) -> Listing | None:
        account = await self._ledger.get_account(db, address)
        if account is None:
            return None
        if account.owner != self._program_id:
            raise AccountDataMismatchError(address, "Listing")
        return decode_listing(address, account.data)

    async def resolve_marketplace(self, db: AsyncSession, name: str) -> MarketplaceRegistry:
        """Locate the Registry by name; raises MarketplaceNotFoundError."""
        if not name or len(name.encode("utf-8")) > MAX_SEED_LEN:
            raise MarketplaceNotFoundError(name)
        address = derive_marketplace(self._program_id, name).address
        record = await self.load_marketplace(db, address)
        if record is None:
            raise MarketplaceNotFoundError(name)
        return MarketplaceRegistry(address, record, self._program_id)
