"""MarketplaceRegistry: a loaded Registry record and the capabilities it owns.

The treasury and the reward mint can only be moved through this object, so
callers never handle their seeds directly.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.em_common.errors import AccountDataMismatchError
from src.em_ledger.domain.derivation import ProgramAuthority, associated_token_address, derive
from src.em_ledger.domain.models import Invocation, TokenAccount
from src.em_ledger.domain.repository import LedgerProtocol
from src.em_marketplace.domain.addresses import (
    marketplace_seeds,
    rewards_mint_seeds,
    treasury_seeds,
)
from src.em_marketplace.domain.models import Marketplace

REWARD_DECIMALS = 6
REWARD_PER_PURCHASE = 1  # base units


class MarketplaceRegistry:
    def __init__(self, address: str, record: Marketplace, program_id: str) -> None:
        self.address = address
        self.record = record
        self.program_id = program_id

    @property
    def name(self) -> str:
        return self.record.name

    @property
    def admin(self) -> str:
        return self.record.admin

    @property
    def fee_bps(self) -> int:
        return self.record.fee_bps

    def signer(self) -> ProgramAuthority:
        """The registry's own authority; mint authority of the reward mint."""
        return ProgramAuthority(
            address=self.address,
            seeds=tuple(marketplace_seeds(self.record.name)),
            bump=self.record.bump,
            program_id=self.program_id,
        )

    def treasury(self) -> ProgramAuthority:
        return self._child(treasury_seeds(self.address), self.record.treasury_bump)

    def rewards_mint(self) -> ProgramAuthority:
        return self._child(rewards_mint_seeds(self.address), self.record.rewards_mint_bump)

    @property
    def treasury_address(self) -> str:
        return self.treasury().address

    @property
    def rewards_mint_address(self) -> str:
        return self.rewards_mint().address

    def reward_account_of(self, owner: str) -> str:
        return associated_token_address(owner, self.rewards_mint_address)

    def _child(self, seeds: list[bytes], bump: int) -> ProgramAuthority:
        derived = derive(self.program_id, seeds)
        if derived.bump != bump:
            raise AccountDataMismatchError(self.address, "Marketplace")
        return derived

    async def deposit_fee(
        self,
        ledger: LedgerProtocol,
        db: AsyncSession,
        inv: Invocation,
        payer: str,
        amount: int,
    ) -> None:
        await ledger.transfer_lamports(
            db, inv, source=payer, destination=self.treasury_address, amount=amount, signer=payer
        )

    async def mint_reward(
        self,
        ledger: LedgerProtocol,
        db: AsyncSession,
        inv: Invocation,
        recipient: str,
    ) -> TokenAccount:
        """Mint one reward base unit to recipient, creating their reward account if absent."""
        account = await ledger.get_or_create_associated_token_account(
            db, inv, payer=recipient, owner=recipient, mint=self.rewards_mint_address
        )
        await ledger.mint_to(
            db,
            inv,
            mint=self.rewards_mint_address,
            destination=account.address,
            amount=REWARD_PER_PURCHASE,
            authority=self.signer(),
        )
        return account
