"""Dev asset faucet over HTTP: funding, issuing and closing holdings."""

import pytest
from httpx import AsyncClient
from solders.keypair import Keypair

from config.settings import settings
from src.em_common.lamports import LAMPORTS_PER_SOL, TOKEN_ACCOUNT_SPACE, minimum_balance
from src.em_ledger.domain.derivation import associated_token_address
from tests.conftest import new_wallet
from tests.integration.conftest import sign_in

API = "/api/v1"


@pytest.fixture
def faucet(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "ASSET_FAUCET_ENABLED", True)


class TestFaucetDisabled:
    async def test_airdrop_refused(self, client: AsyncClient) -> None:
        headers = await sign_in(client, Keypair())
        resp = await client.post(f"{API}/ledger/airdrop", json={"lamports": 1}, headers=headers)
        assert resp.status_code == 403
        assert resp.json()["code"] == 9003


@pytest.mark.usefixtures("faucet")
class TestFaucet:
    async def test_airdrop_credits_caller(self, client: AsyncClient) -> None:
        kp = Keypair()
        headers = await sign_in(client, kp)

        resp = await client.post(
            f"{API}/ledger/airdrop", json={"lamports": 2 * LAMPORTS_PER_SOL}, headers=headers
        )
        assert resp.status_code == 200, resp.text
        assert resp.json()["data"]["balance_lamports"] == 2 * LAMPORTS_PER_SOL

        resp = await client.get(f"{API}/ledger/accounts/{kp.pubkey()}")
        assert resp.json()["data"]["lamports"] == 2 * LAMPORTS_PER_SOL

    async def test_airdrop_amount_validated(self, client: AsyncClient) -> None:
        headers = await sign_in(client, Keypair())
        resp = await client.post(f"{API}/ledger/airdrop", json={"lamports": 0}, headers=headers)
        assert resp.status_code == 422

    async def test_issue_list_and_close_holding(self, client: AsyncClient) -> None:
        kp = Keypair()
        me = str(kp.pubkey())
        headers = await sign_in(client, kp)
        await client.post(f"{API}/ledger/airdrop", json={"lamports": LAMPORTS_PER_SOL}, headers=headers)
        collection = new_wallet()

        resp = await client.post(
            f"{API}/ledger/collectibles", json={"collection_mint": collection}, headers=headers
        )
        assert resp.status_code == 201, resp.text
        issued = resp.json()["data"]
        mint = issued["mint"]
        assert issued["owner"] == me
        assert issued["holding_account"] == associated_token_address(me, mint)

        # Holding still carries the unit
        resp = await client.delete(f"{API}/ledger/tokens/{mint}", headers=headers)
        assert resp.status_code == 422
        assert resp.json()["code"] == 2007

        await client.post(f"{API}/marketplaces", json={"name": "Studio", "fee_bps": 0}, headers=headers)
        resp = await client.post(
            f"{API}/marketplaces/Studio/listings",
            json={"asset_mint": mint, "collection_mint": collection, "price_lamports": 10},
            headers=headers,
        )
        assert resp.status_code == 201, resp.text

        resp = await client.delete(f"{API}/ledger/tokens/{mint}", headers=headers)
        assert resp.status_code == 200, resp.text
        assert resp.json()["data"]["reclaimed_lamports"] == minimum_balance(TOKEN_ACCOUNT_SPACE)

    async def test_issue_to_another_owner(self, client: AsyncClient) -> None:
        kp = Keypair()
        headers = await sign_in(client, kp)
        await client.post(f"{API}/ledger/airdrop", json={"lamports": LAMPORTS_PER_SOL}, headers=headers)
        owner = new_wallet()

        resp = await client.post(
            f"{API}/ledger/collectibles",
            json={"collection_mint": new_wallet(), "owner": owner, "collection_verified": False},
            headers=headers,
        )
        mint = resp.json()["data"]["mint"]

        resp = await client.get(f"{API}/ledger/accounts/{owner}/tokens")
        assert [(i["mint"], i["amount"]) for i in resp.json()["data"]["items"]] == [(mint, 1)]

    async def test_unfunded_creator(self, client: AsyncClient) -> None:
        headers = await sign_in(client, Keypair())
        resp = await client.post(
            f"{API}/ledger/collectibles", json={"collection_mint": new_wallet()}, headers=headers
        )
        assert resp.status_code == 422
        assert resp.json()["code"] == 2001
