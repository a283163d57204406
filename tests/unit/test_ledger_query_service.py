"""LedgerQueryService: balances, holdings and journal pagination."""

import pytest

from src.em_common.enums import NATIVE_ASSET
from src.em_common.errors import AccountNotFoundError
from src.em_ledger.application.schemas import cursor_decode, cursor_encode
from src.em_ledger.application.service import LedgerQueryService
from src.em_ledger.domain.models import SYSTEM_PROGRAM_ID
from tests.conftest import Ledger, new_wallet


@pytest.fixture
def queries(ledger: Ledger) -> LedgerQueryService:
    return LedgerQueryService(ledger.repo)


class TestCursor:
    def test_round_trip(self) -> None:
        assert cursor_decode(cursor_encode(42)) == 42

    def test_none(self) -> None:
        assert cursor_decode(None) is None

    def test_garbage_is_ignored(self) -> None:
        assert cursor_decode("%%%not-base64") is None


class TestBalance:
    async def test_wallet(self, ledger: Ledger, sessions, queries: LedgerQueryService) -> None:
        wallet = await ledger.wallet(1_500_000_000)
        async with sessions() as db:
            view = await queries.get_balance(db, wallet)
        assert view.owner == SYSTEM_PROGRAM_ID
        assert view.lamports == 1_500_000_000
        assert view.balance_display == "1.5 SOL"
        assert view.data_len == 0

    async def test_unknown_address(self, sessions, queries: LedgerQueryService) -> None:
        with pytest.raises(AccountNotFoundError):
            async with sessions() as db:
                await queries.get_balance(db, new_wallet())


class TestTokens:
    async def test_lists_holdings(self, ledger: Ledger, sessions, queries: LedgerQueryService) -> None:
        creator = await ledger.wallet()
        owner = await ledger.wallet()
        first = await ledger.issue(creator, owner, new_wallet())
        second = await ledger.issue(creator, owner, new_wallet())

        async with sessions() as db:
            view = await queries.list_tokens(db, owner)

        assert view.owner == owner
        assert {item.mint for item in view.items} == {first, second}
        assert all(item.amount == 1 for item in view.items)

    async def test_no_holdings(self, sessions, queries: LedgerQueryService) -> None:
        async with sessions() as db:
            view = await queries.list_tokens(db, new_wallet())
        assert view.items == []


class TestJournal:
    async def test_pages_newest_first(self, ledger: Ledger, sessions, queries: LedgerQueryService) -> None:
        wallet = new_wallet()
        for lamports in (1, 2, 3, 4, 5):
            await ledger.fund(wallet, lamports)

        async with sessions() as db:
            first = await queries.list_journal(db, wallet, None, 2)
        assert [item.amount for item in first.items] == [5, 4]
        assert first.has_more
        assert first.next_cursor is not None

        async with sessions() as db:
            second = await queries.list_journal(db, wallet, first.next_cursor, 2)
        assert [item.amount for item in second.items] == [3, 2]

        async with sessions() as db:
            last = await queries.list_journal(db, wallet, second.next_cursor, 2)
        assert [item.amount for item in last.items] == [1]
        assert not last.has_more
        assert last.next_cursor is None

    async def test_balance_after_tracks_credits(
        self, ledger: Ledger, sessions, queries: LedgerQueryService
    ) -> None:
        wallet = new_wallet()
        await ledger.fund(wallet, 100)
        await ledger.fund(wallet, 50)
        async with sessions() as db:
            page = await queries.list_journal(db, wallet, None, 10)
        assert [item.balance_after for item in page.items] == [150, 100]
        assert all(item.asset == NATIVE_ASSET for item in page.items)
        assert page.items[0].amount_display == "0.00000005 SOL"

    async def test_exact_page_has_no_more(
        self, ledger: Ledger, sessions, queries: LedgerQueryService
    ) -> None:
        wallet = new_wallet()
        await ledger.fund(wallet, 7)
        async with sessions() as db:
            page = await queries.list_journal(db, wallet, None, 1)
        assert len(page.items) == 1
        assert not page.has_more
