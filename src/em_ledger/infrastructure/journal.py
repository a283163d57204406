"""DB helper for ledger_journal.

Called from LedgerRepository within the invocation's transaction, once per
balance movement (lamports or tokens) on one address.
"""
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession

from src.em_common.enums import JournalEntryType
from src.em_ledger.domain.models import Invocation
from src.em_ledger.infrastructure.db_models import JournalEntryORM


async def write_journal(
    inv: Invocation,
    address: str,
    asset: str,
    entry_type: JournalEntryType,
    amount: int,
    balance_after: int,
    db: AsyncSession,
) -> None:
    """Append one row to ledger_journal. amount is signed: negative = debit."""
    await db.execute(
        insert(JournalEntryORM).values(
            tx_id=inv.tx_id,
            instruction=inv.instruction.value,
            address=address,
            asset=asset,
            entry_type=entry_type.value,
            amount=amount,
            balance_after=balance_after,
        )
    )
