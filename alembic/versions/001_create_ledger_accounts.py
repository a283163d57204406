"""001: create ledger_accounts table and the updated_at trigger function

Revision ID: 001
Revises: 
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_update_timestamp()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("""
        CREATE TABLE ledger_accounts (
            address     VARCHAR(44) PRIMARY KEY,
            owner       VARCHAR(44) NOT NULL,
            lamports    BIGINT      NOT NULL DEFAULT 0,
            data        BYTEA       NOT NULL DEFAULT '\\x'::bytea,
            created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_ledger_accounts_lamports_gte_0 CHECK (lamports >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_ledger_accounts_owner ON ledger_accounts (owner);")
    op.execute("""
        CREATE TRIGGER trg_ledger_accounts_updated_at
            BEFORE UPDATE ON ledger_accounts
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute(
        "COMMENT ON TABLE ledger_accounts IS "
        "'Native accounts: system wallets and program records; amounts in lamports';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS ledger_accounts CASCADE;")
    op.execute("DROP FUNCTION IF EXISTS fn_update_timestamp();")
