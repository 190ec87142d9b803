"""PieceHoldingRepository: concrete implementation of PieceHoldingRepositoryProtocol.

All queries use raw text() SQL (no ORM). Writes are upserts on the
(network, item_id, wallet) unique key; the caller owns the transaction.
"""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_holdings.domain.models import PieceHolding

_UPSERT_SQL = text("""
    INSERT INTO piece_holdings (network, item_id, wallet, pieces)
    VALUES (:network, :item_id, :wallet, :pieces)
    ON CONFLICT (network, item_id, wallet)
    DO UPDATE SET pieces = EXCLUDED.pieces
""")

_LIST_BY_WALLET_SQL = text("""
    SELECT network, item_id, wallet, pieces, created_at, updated_at
    FROM piece_holdings
    WHERE wallet = :wallet
      AND (CAST(:include_empty AS BOOLEAN) OR pieces > 0)
    ORDER BY network, item_id
""")

_GET_SQL = text("""
    SELECT network, item_id, wallet, pieces, created_at, updated_at
    FROM piece_holdings
    WHERE network = :network AND item_id = :item_id AND wallet = :wallet
""")


class PieceHoldingRepository:
    async def upsert_pieces(
        self, db: AsyncSession, network: str, item_id: str, wallet: str, pieces: int
    ) -> None:
        await db.execute(
            _UPSERT_SQL,
            {
                "network": network.lower(),
                "item_id": str(item_id),
                "wallet": wallet.lower(),
                "pieces": pieces,
            },
        )

    async def list_by_wallet(
        self, db: AsyncSession, wallet: str, include_empty: bool = True
    ) -> list[PieceHolding]:
        rows = (
            await db.execute(
                _LIST_BY_WALLET_SQL,
                {"wallet": wallet.lower(), "include_empty": include_empty},
            )
        ).fetchall()
        return [_row_to_holding(r) for r in rows]

    async def get(
        self, db: AsyncSession, network: str, item_id: str, wallet: str
    ) -> PieceHolding | None:
        row = (
            await db.execute(
                _GET_SQL,
                {"network": network.lower(), "item_id": str(item_id), "wallet": wallet.lower()},
            )
        ).fetchone()
        if row is None:
            return None
        return _row_to_holding(row)


def _row_to_holding(row: Any) -> PieceHolding:
    return PieceHolding(
        network=row.network,
        item_id=row.item_id,
        wallet=row.wallet,
        pieces=int(row.pieces),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
