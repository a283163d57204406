"""002: create token_mints table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE token_mints (
            address              VARCHAR(44) PRIMARY KEY,
            mint_authority       VARCHAR(44),
            decimals             SMALLINT    NOT NULL,
            supply               BIGINT      NOT NULL DEFAULT 0,
            lamports             BIGINT      NOT NULL DEFAULT 0,
            collection_mint      VARCHAR(44),
            collection_verified  BOOLEAN     NOT NULL DEFAULT FALSE,
            created_at           TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at           TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_token_mints_decimals CHECK (decimals BETWEEN 0 AND 255),
            CONSTRAINT ck_token_mints_supply_gte_0 CHECK (supply >= 0)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_token_mints_updated_at
            BEFORE UPDATE ON token_mints
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute(
        "COMMENT ON TABLE token_mints IS "
        "'Asset mints with collection attestation; decimals=0 for collectibles';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS token_mints CASCADE;")
