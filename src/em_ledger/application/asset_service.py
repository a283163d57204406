"""AssetService: asset-service operations that sit outside the marketplace.

Funding wallets and issuing collectibles belong to the external asset
service; the marketplace only consumes their results. Each call is its own
ASSET_SERVICE invocation in its own transaction.
"""

import logging

from solders.keypair import Keypair
from sqlalchemy.ext.asyncio import AsyncSession

from src.em_common.enums import Instruction
from src.em_ledger.domain.derivation import associated_token_address
from src.em_ledger.domain.models import Invocation
from src.em_ledger.domain.repository import LedgerProtocol
from src.em_ledger.infrastructure.persistence import LedgerRepository

logger = logging.getLogger(__name__)


class AssetService:
    def __init__(self, ledger: LedgerProtocol | None = None) -> None:
        self._ledger: LedgerProtocol = ledger or LedgerRepository()

    async def airdrop(self, db: AsyncSession, address: str, lamports: int) -> str:
        inv = Invocation(Instruction.ASSET_SERVICE)
        async with db.begin():
            await self._ledger.airdrop(db, inv, address, lamports)
        logger.debug("Airdropped %d lamports to %s (tx=%s)", lamports, address, inv.tx_id)
        return inv.tx_id

    async def issue_collectible(
        self,
        db: AsyncSession,
        creator: str,
        owner: str,
        collection_mint: str | None,
        collection_verified: bool = True,
        decimals: int = 0,
        mint_address: str | None = None,
    ) -> str:
        """Create a mint carrying a collection attestation and put one unit in owner's holding account.

        Returns the new mint address. `creator` pays all rent and stays mint authority.
        """
        mint = mint_address or str(Keypair().pubkey())
        inv = Invocation(Instruction.ASSET_SERVICE)
        async with db.begin():
            await self._ledger.create_mint(
                db,
                inv,
                address=mint,
                payer=creator,
                decimals=decimals,
                mint_authority=creator,
                collection_mint=collection_mint,
                collection_verified=collection_verified,
            )
            holding = await self._ledger.create_associated_token_account(
                db, inv, payer=creator, owner=owner, mint=mint
            )
            await self._ledger.mint_to(
                db, inv, mint=mint, destination=holding.address, amount=1, authority=creator
            )
        return mint

    async def close_holding(self, db: AsyncSession, owner: str, mint: str) -> int:
        """Close owner's empty holding account for mint, returning its rent to owner."""
        inv = Invocation(Instruction.ASSET_SERVICE)
        async with db.begin():
            return await self._ledger.close_token_account(
                db,
                inv,
                account=associated_token_address(owner, mint),
                destination=owner,
                authority=owner,
            )
