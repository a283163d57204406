"""SettlementService: Purchase.

One invocation moves payment, fee, asset and reward together:

  1. price  buyer -> seller          (native)
  2. fee    buyer -> treasury        (native, via the registry)
  3. asset  vault -> buyer           (signed by the Listing Authority)
  4. vault closed, rent -> seller
  5. 1 reward base unit -> buyer     (signed by the registry)
  6. listing record closed, rent -> seller

Fee arithmetic and every guard run before step 1. Any failure raises out of
`async with db.begin()` and nothing from the invocation is kept.

Locking: the seller is only known once the listing record is read, so the
record is peeked first and then every declared account, seller included, is
locked in address order. The record is re-read under the lock; if a
concurrent purchase or delist got there first it is gone and the call fails
ListingNotFound.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.em_common.enums import Instruction
from src.em_common.errors import AccountNotFoundError, ListingNotFoundError
from src.em_ledger.domain.derivation import associated_token_address, is_valid_address
from src.em_ledger.domain.models import Invocation
from src.em_ledger.domain.repository import LedgerProtocol
from src.em_ledger.infrastructure.persistence import LedgerRepository
from src.em_listing.domain.escrow import ListingEscrow
from src.em_listing.domain.invariants import verify_escrow_closed
from src.em_marketplace.infrastructure.records import ProgramRecordRepository
from src.em_settlement.application.schemas import PurchaseResponse
from src.em_settlement.domain.fee import split_payment

logger = logging.getLogger(__name__)


class SettlementService:
    def __init__(self, ledger: LedgerProtocol | None = None, program_id: str | None = None) -> None:
        self._ledger: LedgerProtocol = ledger or LedgerRepository()
        self._program_id = program_id or settings.PROGRAM_ID
        self._records = ProgramRecordRepository(self._ledger, self._program_id)

    async def purchase(
        self, db: AsyncSession, buyer: str, marketplace_name: str, asset_mint: str
    ) -> PurchaseResponse:
        if not is_valid_address(asset_mint):
            raise ListingNotFoundError(asset_mint)

        inv = Invocation(Instruction.PURCHASE)
        async with db.begin():
            registry = await self._records.resolve_marketplace(db, marketplace_name)
            escrow = ListingEscrow.for_asset(self._program_id, registry.address, asset_mint)
            buyer_account = associated_token_address(buyer, asset_mint)
            reward_account = registry.reward_account_of(buyer)

            peeked = await self._records.load_listing(db, escrow.address)
            if peeked is None:
                raise ListingNotFoundError(asset_mint)
            declared = [
                buyer,
                peeked.seller,
                asset_mint,
                buyer_account,
                reward_account,
                registry.address,
                registry.treasury_address,
                registry.rewards_mint_address,
                escrow.address,
                escrow.vault,
            ]
            await self._ledger.lock_accounts(db, declared)

            listing = await self._records.load_listing(db, escrow.address)
            if listing is None:
                raise ListingNotFoundError(asset_mint)
            if listing.seller != peeked.seller:
                # Re-listed by someone else between peek and lock
                await self._ledger.lock_accounts(db, [listing.seller])
            escrow.listing = listing
            seller = listing.seller

            split = split_payment(listing.price, registry.fee_bps)
            mint = await self._ledger.get_mint(db, asset_mint)
            if mint is None:
                raise AccountNotFoundError(asset_mint)

            await self._ledger.get_or_create_associated_token_account(
                db, inv, payer=buyer, owner=buyer, mint=asset_mint
            )
            await self._ledger.transfer_lamports(
                db, inv, source=buyer, destination=seller, amount=split.price, signer=buyer
            )
            await registry.deposit_fee(self._ledger, db, inv, payer=buyer, amount=split.fee)
            await escrow.release_to(self._ledger, db, inv, buyer_account, mint.decimals)
            await escrow.close_vault(self._ledger, db, inv, recipient=seller)
            await registry.mint_reward(self._ledger, db, inv, recipient=buyer)
            await escrow.close_record(self._ledger, db, inv, recipient=seller)
            await verify_escrow_closed(self._ledger, db, escrow)

        logger.info(
            "Purchase settled: marketplace=%s asset=%s seller=%s buyer=%s price=%d fee=%d tx=%s",
            marketplace_name, asset_mint, seller, buyer, split.price, split.fee, inv.tx_id,
        )
        return PurchaseResponse.from_settlement(
            tx_id=inv.tx_id,
            asset_mint=asset_mint,
            seller=seller,
            buyer=buyer,
            split=split,
            asset_account=buyer_account,
            reward_account=reward_account,
        )
