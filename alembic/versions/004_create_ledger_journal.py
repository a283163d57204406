"""004: create ledger_journal table

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE ledger_journal (
            id              BIGSERIAL       PRIMARY KEY,
            tx_id           VARCHAR(32)     NOT NULL,
            instruction     VARCHAR(30)     NOT NULL,
            address         VARCHAR(44)     NOT NULL,
            asset           VARCHAR(44)     NOT NULL,
            entry_type      VARCHAR(30)     NOT NULL,
            amount          BIGINT          NOT NULL,
            balance_after   BIGINT          NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_journal_instruction CHECK (
                instruction IN ('INIT_MARKETPLACE', 'LIST', 'DELIST', 'PURCHASE', 'ASSET_SERVICE')
            ),
            CONSTRAINT ck_journal_entry_type CHECK (
                entry_type IN (
                    'RENT_PAYMENT', 'RENT_DEPOSIT', 'RENT_RECLAIM', 'RENT_RELEASE',
                    'NATIVE_TRANSFER_OUT', 'NATIVE_TRANSFER_IN', 'AIRDROP',
                    'TOKEN_TRANSFER_OUT', 'TOKEN_TRANSFER_IN',
                    'TOKEN_MINT'
                )
            ),
            CONSTRAINT ck_journal_balance_gte_0 CHECK (balance_after >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_journal_address_id ON ledger_journal (address, id DESC);")
    op.execute("CREATE INDEX idx_journal_tx ON ledger_journal (tx_id);")
    op.execute("COMMENT ON TABLE ledger_journal IS 'Balance movements: append-only, one tx_id per invocation';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS ledger_journal CASCADE;")
