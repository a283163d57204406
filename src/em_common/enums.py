"""Global enums: values are persisted in ledger_journal and must stay stable."""

from enum import Enum


class Instruction(str, Enum):
    """Marketplace program operation that produced a ledger mutation."""
    INIT_MARKETPLACE = "INIT_MARKETPLACE"
    LIST = "LIST"
    DELIST = "DELIST"
    PURCHASE = "PURCHASE"
    # Asset-service operations performed outside the marketplace program
    ASSET_SERVICE = "ASSET_SERVICE"


class JournalEntryType(str, Enum):
    # Account creation / reclaim (rent-exempt deposit)
    RENT_PAYMENT = "RENT_PAYMENT"
    RENT_DEPOSIT = "RENT_DEPOSIT"
    RENT_RECLAIM = "RENT_RECLAIM"
    RENT_RELEASE = "RENT_RELEASE"
    # Native currency (system transfer, paired)
    NATIVE_TRANSFER_OUT = "NATIVE_TRANSFER_OUT"
    NATIVE_TRANSFER_IN = "NATIVE_TRANSFER_IN"
    AIRDROP = "AIRDROP"
    # Token movements (paired for transfers)
    TOKEN_TRANSFER_OUT = "TOKEN_TRANSFER_OUT"
    TOKEN_TRANSFER_IN = "TOKEN_TRANSFER_IN"
    TOKEN_MINT = "TOKEN_MINT"


NATIVE_ASSET = "NATIVE"
