"""Pydantic schemas and cursor utilities for em_ledger read API."""

import base64
import json

from pydantic import BaseModel

from src.em_common.enums import NATIVE_ASSET
from src.em_common.lamports import lamports_to_display
from src.em_ledger.domain.models import JournalEntry

# ---------------------------------------------------------------------------
# Cursor-based pagination utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_id: int) -> str:
    """Encode a journal id into an opaque Base64 cursor string."""
    payload = json.dumps({"id": last_id})
    return base64.b64encode(payload.encode()).decode()


def cursor_decode(cursor: str | None) -> int | None:
    """Decode a cursor string back to the last seen id. Returns None on error."""
    if cursor is None:
        return None
    try:
        payload = json.loads(base64.b64decode(cursor.encode()).decode())
        return int(payload["id"])
    except Exception:
        return None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class AccountBalanceResponse(BaseModel):
    address: str
    owner: str
    lamports: int
    balance_display: str
    data_len: int


class TokenHoldingItem(BaseModel):
    address: str
    mint: str
    amount: int
    lamports: int


class TokenHoldingsResponse(BaseModel):
    owner: str
    items: list[TokenHoldingItem]


class JournalEntryItem(BaseModel):
    id: int
    tx_id: str
    instruction: str
    asset: str
    entry_type: str
    amount: int
    balance_after: int
    amount_display: str | None  # only for native lamport movements
    created_at: str  # ISO8601 string

    @classmethod
    def from_domain(cls, e: JournalEntry) -> "JournalEntryItem":
        return cls(
            id=e.id,
            tx_id=e.tx_id,
            instruction=e.instruction,
            asset=e.asset,
            entry_type=e.entry_type,
            amount=e.amount,
            balance_after=e.balance_after,
            amount_display=lamports_to_display(e.amount) if e.asset == NATIVE_ASSET else None,
            created_at=e.created_at.isoformat() if e.created_at else "",
        )


class JournalResponse(BaseModel):
    items: list[JournalEntryItem]
    next_cursor: str | None
    has_more: bool
