"""ListingEscrow: a live Listing record, its Listing Authority and its Vault.

The vault is the associated holding account of the Listing Authority for the
asset mint. Only this object can move the asset out of the vault or tear the
escrow down, and it always signs with the authority re-derived from
(marketplace, asset_mint).
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.em_ledger.domain.derivation import ProgramAuthority
from src.em_ledger.domain.models import Invocation
from src.em_ledger.domain.repository import LedgerProtocol
from src.em_marketplace.domain.addresses import derive_listing, vault_address
from src.em_marketplace.domain.models import Listing

ESCROWED_AMOUNT = 1


class ListingEscrow:
    def __init__(self, authority: ProgramAuthority, asset_mint: str, listing: Listing | None = None) -> None:
        self.authority = authority
        self.asset_mint = asset_mint
        self.listing = listing

    @classmethod
    def for_asset(cls, program_id: str, marketplace: str, asset_mint: str) -> "ListingEscrow":
        return cls(derive_listing(program_id, marketplace, asset_mint), asset_mint)

    @property
    def address(self) -> str:
        return self.authority.address

    @property
    def vault(self) -> str:
        return vault_address(self.authority.address, self.asset_mint)

    async def release_to(
        self,
        ledger: LedgerProtocol,
        db: AsyncSession,
        inv: Invocation,
        destination: str,
        decimals: int,
    ) -> None:
        """Move the escrowed unit from the vault to destination (a holding account)."""
        await ledger.transfer_checked(
            db,
            inv,
            source=self.vault,
            mint=self.asset_mint,
            destination=destination,
            amount=ESCROWED_AMOUNT,
            decimals=decimals,
            authority=self.authority,
        )

    async def close_vault(
        self, ledger: LedgerProtocol, db: AsyncSession, inv: Invocation, recipient: str
    ) -> int:
        return await ledger.close_token_account(
            db, inv, account=self.vault, destination=recipient, authority=self.authority
        )

    async def close_record(
        self, ledger: LedgerProtocol, db: AsyncSession, inv: Invocation, recipient: str
    ) -> int:
        return await ledger.close_account(
            db,
            inv,
            address=self.address,
            owner=self.authority.program_id,
            destination=recipient,
        )
