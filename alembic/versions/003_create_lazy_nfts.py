"""003: create lazy_nfts table

Revision ID: 003
Revises: 002
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Lazy-minted NFTs are addressed by their own id; piece_holdings.item_id
    # points here when no regular nfts row matches.
    op.execute("""
        CREATE TABLE lazy_nfts (
            id                  VARCHAR(64)   PRIMARY KEY,
            network             VARCHAR(32)   NOT NULL,
            creator             VARCHAR(42),
            price               VARCHAR(64),
            last_price          VARCHAR(64),
            liquidity_contract  VARCHAR(42),
            liquidity_piece_id  NUMERIC(78, 0),
            created_at          TIMESTAMPTZ   NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ   NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_lazy_nfts_network_lowercase  CHECK (network = LOWER(network)),
            CONSTRAINT ck_lazy_nfts_piece_id_gte_0     CHECK (liquidity_piece_id >= 0)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_lazy_nfts_updated_at
            BEFORE UPDATE ON lazy_nfts
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS lazy_nfts CASCADE;")
