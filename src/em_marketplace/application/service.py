"""MarketplaceService: Initialize and registry lookups.

init_marketplace runs inside `async with db.begin()`; a failure in any step
(occupied address, admin short of rent) rolls back the whole invocation.
get_marketplace is read-only.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.em_common.enums import Instruction
from src.em_guards.rules.marketplace_config import check_fee_bps, check_marketplace_name
from src.em_ledger.domain.models import Invocation
from src.em_ledger.domain.repository import LedgerProtocol
from src.em_ledger.infrastructure.persistence import LedgerRepository
from src.em_marketplace.application.schemas import InitMarketplaceResponse, MarketplaceDetail
from src.em_marketplace.domain.addresses import (
    derive_marketplace,
    derive_rewards_mint,
    derive_treasury,
)
from src.em_marketplace.domain.layout import MARKETPLACE_SPACE, encode_marketplace
from src.em_marketplace.domain.models import Marketplace
from src.em_marketplace.domain.registry import REWARD_DECIMALS, MarketplaceRegistry
from src.em_marketplace.infrastructure.records import ProgramRecordRepository

logger = logging.getLogger(__name__)


class MarketplaceService:
    def __init__(self, ledger: LedgerProtocol | None = None, program_id: str | None = None) -> None:
        self._ledger: LedgerProtocol = ledger or LedgerRepository()
        self._program_id = program_id or settings.PROGRAM_ID
        self._records = ProgramRecordRepository(self._ledger, self._program_id)

    async def init_marketplace(
        self, db: AsyncSession, admin: str, name: str, fee_bps: int
    ) -> InitMarketplaceResponse:
        check_marketplace_name(name)
        check_fee_bps(fee_bps)

        inv = Invocation(Instruction.INIT_MARKETPLACE)
        marketplace = derive_marketplace(self._program_id, name)
        treasury = derive_treasury(self._program_id, marketplace.address)
        rewards_mint = derive_rewards_mint(self._program_id, marketplace.address)
        record = Marketplace(
            admin=admin,
            fee_bps=fee_bps,
            bump=marketplace.bump,
            treasury_bump=treasury.bump,
            rewards_mint_bump=rewards_mint.bump,
            name=name,
        )

        async with db.begin():
            await self._ledger.lock_accounts(
                db, [admin, marketplace.address, treasury.address, rewards_mint.address]
            )
            await self._ledger.create_account(
                db,
                inv,
                address=marketplace,
                owner=self._program_id,
                payer=admin,
                space=MARKETPLACE_SPACE,
                data=encode_marketplace(record),
            )
            await self._ledger.create_mint(
                db,
                inv,
                address=rewards_mint,
                payer=admin,
                decimals=REWARD_DECIMALS,
                mint_authority=marketplace.address,
            )

        logger.info(
            "Marketplace initialized: name=%s address=%s fee_bps=%d tx=%s",
            name, marketplace.address, fee_bps, inv.tx_id,
        )
        registry = MarketplaceRegistry(marketplace.address, record, self._program_id)
        return InitMarketplaceResponse(
            tx_id=inv.tx_id,
            marketplace=MarketplaceDetail.from_registry(registry, treasury_lamports=0),
        )

    async def get_marketplace(self, db: AsyncSession, name: str) -> MarketplaceDetail:
        registry = await self._records.resolve_marketplace(db, name)
        treasury = await self._ledger.get_account(db, registry.treasury_address)
        return MarketplaceDetail.from_registry(
            registry, treasury_lamports=treasury.lamports if treasury is not None else 0
        )
