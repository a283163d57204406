"""MarketplaceRegistry capabilities, isolated from the ledger (mocked)."""

from dataclasses import replace
from unittest.mock import AsyncMock, MagicMock

import pytest

from config.settings import settings
from src.em_common.enums import Instruction
from src.em_common.errors import AccountDataMismatchError
from src.em_ledger.domain.derivation import ProgramAuthority, associated_token_address
from src.em_ledger.domain.models import Invocation, TokenAccount
from src.em_marketplace.domain.addresses import (
    derive_marketplace,
    derive_rewards_mint,
    derive_treasury,
)
from src.em_marketplace.domain.models import Marketplace
from src.em_marketplace.domain.registry import REWARD_PER_PURCHASE, MarketplaceRegistry
from tests.conftest import new_wallet

PID = settings.PROGRAM_ID


def _registry(name: str = "Gallery") -> MarketplaceRegistry:
    mp = derive_marketplace(PID, name)
    record = Marketplace(
        admin=new_wallet(),
        fee_bps=250,
        bump=mp.bump,
        treasury_bump=derive_treasury(PID, mp.address).bump,
        rewards_mint_bump=derive_rewards_mint(PID, mp.address).bump,
        name=name,
    )
    return MarketplaceRegistry(mp.address, record, PID)


@pytest.fixture
def ledger() -> AsyncMock:
    return AsyncMock()


class TestAddresses:
    def test_children_match_derivation(self) -> None:
        registry = _registry()
        assert registry.treasury_address == derive_treasury(PID, registry.address).address
        assert registry.rewards_mint_address == derive_rewards_mint(PID, registry.address).address

    def test_signer_reverifies(self) -> None:
        signer = _registry().signer()
        assert isinstance(signer, ProgramAuthority)
        assert signer.verify()

    def test_tampered_bump_rejected(self) -> None:
        registry = _registry()
        registry.record = replace(registry.record, treasury_bump=(registry.record.treasury_bump + 1) % 256)
        with pytest.raises(AccountDataMismatchError):
            registry.treasury()

    def test_reward_account_is_associated(self) -> None:
        registry = _registry()
        owner = new_wallet()
        assert registry.reward_account_of(owner) == associated_token_address(
            owner, registry.rewards_mint_address
        )


class TestCapabilities:
    async def test_deposit_fee_targets_treasury(self, ledger: AsyncMock) -> None:
        registry = _registry()
        db = MagicMock()
        inv = Invocation(Instruction.PURCHASE)
        payer = new_wallet()

        await registry.deposit_fee(ledger, db, inv, payer=payer, amount=25_000)

        ledger.transfer_lamports.assert_awaited_once_with(
            db, inv, source=payer, destination=registry.treasury_address, amount=25_000, signer=payer
        )

    async def test_mint_reward_signed_by_registry(self, ledger: AsyncMock) -> None:
        registry = _registry()
        db = MagicMock()
        inv = Invocation(Instruction.PURCHASE)
        buyer = new_wallet()
        reward_account = registry.reward_account_of(buyer)
        ledger.get_or_create_associated_token_account.return_value = TokenAccount(
            address=reward_account,
            mint=registry.rewards_mint_address,
            owner=buyer,
            amount=0,
            lamports=2_039_280,
        )

        account = await registry.mint_reward(ledger, db, inv, recipient=buyer)

        assert account.address == reward_account
        ledger.get_or_create_associated_token_account.assert_awaited_once_with(
            db, inv, payer=buyer, owner=buyer, mint=registry.rewards_mint_address
        )
        kwargs = ledger.mint_to.await_args.kwargs
        assert kwargs["destination"] == reward_account
        assert kwargs["amount"] == REWARD_PER_PURCHASE
        assert kwargs["authority"].address == registry.address
