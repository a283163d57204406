"""ListingService: List, Delist and listing lookups.

List and Delist each run as one invocation inside `async with db.begin()`.
Every account the invocation may touch is declared and row-locked in
address order before any guard reads state.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.em_common.enums import Instruction
from src.em_common.errors import AccountNotFoundError, ListingNotFoundError
from src.em_common.lamports import lamports_to_display
from src.em_guards.rules.asset_mint import check_collection, check_single_unit
from src.em_guards.rules.listing_owner import check_listing_seller
from src.em_guards.rules.listing_price import check_listing_price
from src.em_ledger.domain.derivation import associated_token_address, is_valid_address
from src.em_ledger.domain.models import Invocation, TokenMint
from src.em_ledger.domain.repository import LedgerProtocol
from src.em_ledger.infrastructure.persistence import LedgerRepository
from src.em_listing.application.schemas import DelistResponse, ListAssetResponse, ListingDetail
from src.em_listing.domain.escrow import ESCROWED_AMOUNT, ListingEscrow
from src.em_listing.domain.invariants import verify_escrow_closed, verify_escrow_open
from src.em_marketplace.domain.layout import LISTING_SPACE, encode_listing
from src.em_marketplace.domain.models import Listing
from src.em_marketplace.infrastructure.records import ProgramRecordRepository

logger = logging.getLogger(__name__)


class ListingService:
    def __init__(self, ledger: LedgerProtocol | None = None, program_id: str | None = None) -> None:
        self._ledger: LedgerProtocol = ledger or LedgerRepository()
        self._program_id = program_id or settings.PROGRAM_ID
        self._records = ProgramRecordRepository(self._ledger, self._program_id)

    async def _require_mint(self, db: AsyncSession, asset_mint: str) -> TokenMint:
        mint = await self._ledger.get_mint(db, asset_mint)
        if mint is None:
            raise AccountNotFoundError(asset_mint)
        return mint

    async def list_asset(
        self,
        db: AsyncSession,
        seller: str,
        marketplace_name: str,
        asset_mint: str,
        collection_mint: str,
        price: int,
    ) -> ListAssetResponse:
        check_listing_price(price)
        if not is_valid_address(asset_mint):
            raise AccountNotFoundError(asset_mint)

        inv = Invocation(Instruction.LIST)
        async with db.begin():
            registry = await self._records.resolve_marketplace(db, marketplace_name)
            escrow = ListingEscrow.for_asset(self._program_id, registry.address, asset_mint)
            seller_account = associated_token_address(seller, asset_mint)
            await self._ledger.lock_accounts(
                db,
                [seller, seller_account, asset_mint, registry.address, escrow.address, escrow.vault],
            )

            mint = await self._require_mint(db, asset_mint)
            check_single_unit(mint)
            check_collection(mint, collection_mint)

            listing = Listing(
                seller=seller, asset_mint=asset_mint, price=price, bump=escrow.authority.bump
            )
            # Fails AccountAlreadyInUse while a listing for this asset is live
            await self._ledger.create_account(
                db,
                inv,
                address=escrow.authority,
                owner=self._program_id,
                payer=seller,
                space=LISTING_SPACE,
                data=encode_listing(listing),
            )
            await self._ledger.create_associated_token_account(
                db, inv, payer=seller, owner=escrow.address, mint=asset_mint
            )
            await self._ledger.transfer_checked(
                db,
                inv,
                source=seller_account,
                mint=asset_mint,
                destination=escrow.vault,
                amount=ESCROWED_AMOUNT,
                decimals=mint.decimals,
                authority=seller,
            )
            escrow.listing = listing
            await verify_escrow_open(self._ledger, db, escrow)

        logger.info(
            "Listed: marketplace=%s asset=%s seller=%s price=%d tx=%s",
            marketplace_name, asset_mint, seller, price, inv.tx_id,
        )
        return ListAssetResponse(
            tx_id=inv.tx_id, listing=ListingDetail.from_escrow(registry.address, escrow)
        )

    async def delist(
        self, db: AsyncSession, signer: str, marketplace_name: str, asset_mint: str
    ) -> DelistResponse:
        if not is_valid_address(asset_mint):
            raise ListingNotFoundError(asset_mint)
        inv = Invocation(Instruction.DELIST)
        async with db.begin():
            registry = await self._records.resolve_marketplace(db, marketplace_name)
            escrow = ListingEscrow.for_asset(self._program_id, registry.address, asset_mint)
            seller_account = associated_token_address(signer, asset_mint)
            await self._ledger.lock_accounts(
                db,
                [signer, seller_account, asset_mint, registry.address, escrow.address, escrow.vault],
            )

            listing = await self._records.load_listing(db, escrow.address)
            if listing is None:
                raise ListingNotFoundError(asset_mint)
            check_listing_seller(listing, signer)
            escrow.listing = listing
            mint = await self._require_mint(db, asset_mint)

            # The seller may have closed their holding account while the asset was escrowed
            await self._ledger.get_or_create_associated_token_account(
                db, inv, payer=signer, owner=signer, mint=asset_mint
            )
            await escrow.release_to(self._ledger, db, inv, seller_account, mint.decimals)
            reclaimed = await escrow.close_vault(self._ledger, db, inv, recipient=listing.seller)
            reclaimed += await escrow.close_record(self._ledger, db, inv, recipient=listing.seller)
            await verify_escrow_closed(self._ledger, db, escrow)

        logger.info(
            "Delisted: marketplace=%s asset=%s seller=%s tx=%s",
            marketplace_name, asset_mint, signer, inv.tx_id,
        )
        return DelistResponse(
            tx_id=inv.tx_id,
            asset_mint=asset_mint,
            returned_to=seller_account,
            reclaimed_lamports=reclaimed,
            reclaimed_display=lamports_to_display(reclaimed),
        )

    async def get_listing(
        self, db: AsyncSession, marketplace_name: str, asset_mint: str
    ) -> ListingDetail:
        if not is_valid_address(asset_mint):
            raise ListingNotFoundError(asset_mint)
        registry = await self._records.resolve_marketplace(db, marketplace_name)
        escrow = ListingEscrow.for_asset(self._program_id, registry.address, asset_mint)
        listing = await self._records.load_listing(db, escrow.address)
        if listing is None:
            raise ListingNotFoundError(asset_mint)
        escrow.listing = listing
        return ListingDetail.from_escrow(registry.address, escrow)
