"""003: create token_accounts table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE token_accounts (
            address     VARCHAR(44) PRIMARY KEY,
            mint        VARCHAR(44) NOT NULL REFERENCES token_mints (address),
            owner       VARCHAR(44) NOT NULL,
            amount      BIGINT      NOT NULL DEFAULT 0,
            lamports    BIGINT      NOT NULL DEFAULT 0,
            created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_token_accounts_amount_gte_0 CHECK (amount >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_token_accounts_owner ON token_accounts (owner, mint);")
    op.execute("CREATE INDEX idx_token_accounts_mint ON token_accounts (mint);")
    op.execute("""
        CREATE TRIGGER trg_token_accounts_updated_at
            BEFORE UPDATE ON token_accounts
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute(
        "COMMENT ON TABLE token_accounts IS "
        "'Token holding accounts; vaults are owned by a listing authority';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS token_accounts CASCADE;")
