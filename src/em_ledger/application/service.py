"""LedgerQueryService: read-only views over the host ledger.

No transaction is opened here; every method is a plain read.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.em_common.errors import AccountNotFoundError
from src.em_common.lamports import lamports_to_display
from src.em_ledger.application.schemas import (
    AccountBalanceResponse,
    JournalEntryItem,
    JournalResponse,
    TokenHoldingItem,
    TokenHoldingsResponse,
    cursor_decode,
    cursor_encode,
)
from src.em_ledger.domain.repository import LedgerProtocol
from src.em_ledger.infrastructure.persistence import LedgerRepository


class LedgerQueryService:
    def __init__(self, ledger: LedgerProtocol | None = None) -> None:
        self._ledger: LedgerProtocol = ledger or LedgerRepository()

    async def get_balance(self, db: AsyncSession, address: str) -> AccountBalanceResponse:
        account = await self._ledger.get_account(db, address)
        if account is None:
            raise AccountNotFoundError(address)
        return AccountBalanceResponse(
            address=account.address,
            owner=account.owner,
            lamports=account.lamports,
            balance_display=lamports_to_display(account.lamports),
            data_len=len(account.data),
        )

    async def list_tokens(self, db: AsyncSession, owner: str) -> TokenHoldingsResponse:
        accounts = await self._ledger.list_token_accounts(db, owner)
        return TokenHoldingsResponse(
            owner=owner,
            items=[
                TokenHoldingItem(address=a.address, mint=a.mint, amount=a.amount, lamports=a.lamports)
                for a in accounts
            ],
        )

    async def list_journal(
        self, db: AsyncSession, address: str, cursor: str | None, limit: int
    ) -> JournalResponse:
        cursor_id = cursor_decode(cursor)
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        entries = await self._ledger.list_journal_entries(db, address, cursor_id, limit + 1)
        has_more = len(entries) > limit
        page = entries[:limit]
        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return JournalResponse(
            items=[JournalEntryItem.from_domain(e) for e in page],
            next_cursor=next_cursor,
            has_more=has_more,
        )
