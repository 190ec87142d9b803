"""002: create nfts table

Revision ID: 002
Revises: 001
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE nfts (
            id                  UUID          PRIMARY KEY DEFAULT gen_random_uuid(),
            network             VARCHAR(32)   NOT NULL,
            item_id             VARCHAR(128)  NOT NULL,
            owner               VARCHAR(42),
            price               VARCHAR(64),
            last_price          VARCHAR(64),
            liquidity_contract  VARCHAR(42),
            liquidity_piece_id  NUMERIC(78, 0),
            created_at          TIMESTAMPTZ   NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ   NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_nfts_network_item          UNIQUE (network, item_id),
            CONSTRAINT ck_nfts_network_lowercase     CHECK (network = LOWER(network)),
            CONSTRAINT ck_nfts_piece_id_gte_0        CHECK (liquidity_piece_id >= 0)
        );
    """)
    op.execute("""
        CREATE INDEX idx_nfts_liquidity ON nfts (liquidity_contract, liquidity_piece_id)
        WHERE liquidity_contract IS NOT NULL;
    """)
    op.execute("""
        CREATE TRIGGER trg_nfts_updated_at
            BEFORE UPDATE ON nfts
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute(
        "COMMENT ON COLUMN nfts.liquidity_contract IS "
        "'ERC-1155 pieces contract acting as the reserve; set once when liquidity is enabled';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS nfts CASCADE;")
