"""SQLAlchemy ORM models for em_ledger.

These map to tables created by Alembic migrations.
DO NOT add/remove columns here without a corresponding migration.
Timestamps are set Python-side so rows never need a refresh after flush.
"""

from datetime import UTC, datetime

from sqlalchemy import BigInteger, Boolean, DateTime, Integer, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column

from src.em_common.database import Base

# 32-byte public keys are at most 44 base58 characters
_ADDRESS = String(44)


def utc_now() -> datetime:
    return datetime.now(UTC)


class LedgerAccountORM(Base):
    __tablename__ = "ledger_accounts"

    address: Mapped[str] = mapped_column(_ADDRESS, primary_key=True)
    owner: Mapped[str] = mapped_column(_ADDRESS, nullable=False)
    lamports: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    data: Mapped[bytes] = mapped_column(LargeBinary, nullable=False, default=b"")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now
    )


class TokenMintORM(Base):
    __tablename__ = "token_mints"

    address: Mapped[str] = mapped_column(_ADDRESS, primary_key=True)
    mint_authority: Mapped[str | None] = mapped_column(_ADDRESS, nullable=True)
    decimals: Mapped[int] = mapped_column(Integer, nullable=False)
    supply: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    lamports: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    collection_mint: Mapped[str | None] = mapped_column(_ADDRESS, nullable=True)
    collection_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now
    )


class TokenAccountORM(Base):
    __tablename__ = "token_accounts"

    address: Mapped[str] = mapped_column(_ADDRESS, primary_key=True)
    mint: Mapped[str] = mapped_column(_ADDRESS, nullable=False, index=True)
    owner: Mapped[str] = mapped_column(_ADDRESS, nullable=False, index=True)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    lamports: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now
    )


class JournalEntryORM(Base):
    __tablename__ = "ledger_journal"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    tx_id: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    instruction: Mapped[str] = mapped_column(String(30), nullable=False)
    address: Mapped[str] = mapped_column(_ADDRESS, nullable=False, index=True)
    asset: Mapped[str] = mapped_column(_ADDRESS, nullable=False)
    entry_type: Mapped[str] = mapped_column(String(30), nullable=False)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    balance_after: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    # NOTE: No updated_at: ledger_journal is append-only
