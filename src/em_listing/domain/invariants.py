"""Escrow custody checks run after each instruction, inside its transaction."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.em_ledger.domain.repository import LedgerProtocol
from src.em_listing.domain.escrow import ESCROWED_AMOUNT, ListingEscrow

logger = logging.getLogger(__name__)


async def verify_escrow_open(ledger: LedgerProtocol, db: AsyncSession, escrow: ListingEscrow) -> None:
    """Raises AssertionError unless record and vault exist and the vault holds exactly one unit."""
    record = await ledger.get_account(db, escrow.address)
    vault = await ledger.get_token_account(db, escrow.vault)

    assert record is not None, f"listing record {escrow.address} missing while escrow is open"
    assert vault is not None, f"vault {escrow.vault} missing while escrow is open"
    assert vault.owner == escrow.address, (
        f"vault {escrow.vault} owned by {vault.owner}, not listing {escrow.address}"
    )
    assert vault.amount == ESCROWED_AMOUNT, (
        f"vault {escrow.vault} holds {vault.amount}, expected {ESCROWED_AMOUNT}"
    )
    logger.debug("Escrow open OK: listing=%s vault=%s", escrow.address, escrow.vault)


async def verify_escrow_closed(ledger: LedgerProtocol, db: AsyncSession, escrow: ListingEscrow) -> None:
    assert await ledger.get_account(db, escrow.address) is None, (
        f"listing record {escrow.address} survived settlement"
    )
    assert await ledger.get_token_account(db, escrow.vault) is None, (
        f"vault {escrow.vault} survived settlement"
    )
    logger.debug("Escrow closed OK: listing=%s", escrow.address)
