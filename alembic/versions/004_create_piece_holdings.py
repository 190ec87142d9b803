"""004: create piece_holdings table

Revision ID: 004
Revises: 003
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE piece_holdings (
            id          UUID          PRIMARY KEY DEFAULT gen_random_uuid(),
            network     VARCHAR(32)   NOT NULL,
            item_id     VARCHAR(128)  NOT NULL,
            wallet      VARCHAR(42)   NOT NULL,
            pieces      BIGINT        NOT NULL DEFAULT 0,
            created_at  TIMESTAMPTZ   NOT NULL DEFAULT NOW(),
            updated_at  TIMESTAMPTZ   NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_piece_holdings_network_item_wallet UNIQUE (network, item_id, wallet),
            CONSTRAINT ck_piece_holdings_pieces_gte_0        CHECK (pieces >= 0),
            CONSTRAINT ck_piece_holdings_wallet_lowercase    CHECK (wallet = LOWER(wallet)),
            CONSTRAINT ck_piece_holdings_network_lowercase   CHECK (network = LOWER(network))
        );
    """)
    op.execute("CREATE INDEX idx_piece_holdings_wallet ON piece_holdings (wallet);")
    op.execute("""
        CREATE TRIGGER trg_piece_holdings_updated_at
            BEFORE UPDATE ON piece_holdings
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute(
        "COMMENT ON TABLE piece_holdings IS "
        "'Off-chain copy of ERC-1155 piece balances, overwritten by reconciliation; zero rows are kept';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS piece_holdings CASCADE;")
