"""CatalogRepository: liquidity references on `nfts` and `lazy_nfts`.

All queries use raw text() SQL (no ORM). Both tables are read-only here.
"""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_catalog.domain.models import LiquidityRef

_GET_NFT_REF_SQL = text("""
    SELECT item_id, network, liquidity_contract, liquidity_piece_id, price, last_price
    FROM nfts
    WHERE network = :network AND item_id = :item_id
    LIMIT 1
""")

_GET_LAZY_REF_SQL = text("""
    SELECT id, network, liquidity_contract, liquidity_piece_id, price, last_price
    FROM lazy_nfts
    WHERE id = :item_id
""")

_LIST_NFT_REFS_SQL = text("""
    SELECT item_id, network, liquidity_contract, liquidity_piece_id, price, last_price
    FROM nfts
    WHERE liquidity_contract IS NOT NULL
      AND liquidity_piece_id IS NOT NULL
    ORDER BY network, item_id
""")

_LIST_LAZY_REFS_SQL = text("""
    SELECT id, network, liquidity_contract, liquidity_piece_id, price, last_price
    FROM lazy_nfts
    WHERE liquidity_contract IS NOT NULL
      AND liquidity_piece_id IS NOT NULL
    ORDER BY network, id
""")


class CatalogRepository:
    async def find_liquidity_ref(
        self, network: str, item_id: str, db: AsyncSession
    ) -> LiquidityRef | None:
        """Resolve an item's liquidity reference: `nfts` first, then `lazy_nfts` by id.

        A row without both liquidity columns counts as missing. Fields set on
        the regular NFT win over the lazy NFT.
        """
        nft = (
            await db.execute(_GET_NFT_REF_SQL, {"network": network, "item_id": item_id})
        ).fetchone()
        contract = nft.liquidity_contract if nft is not None else None
        piece_id = nft.liquidity_piece_id if nft is not None else None
        if contract and piece_id is not None:
            return _row_to_ref(nft, nft.item_id, lazy=False)

        lazy = (await db.execute(_GET_LAZY_REF_SQL, {"item_id": item_id})).fetchone()
        if lazy is None:
            return None
        contract = contract or lazy.liquidity_contract
        piece_id = piece_id if piece_id is not None else lazy.liquidity_piece_id
        if not contract or piece_id is None:
            return None
        return LiquidityRef(
            item_id=item_id,
            network=network,
            liquidity_contract=contract,
            liquidity_piece_id=int(piece_id),
            price=lazy.price,
            last_price=lazy.last_price,
            lazy=True,
        )

    async def list_liquidity_refs(self, db: AsyncSession) -> list[LiquidityRef]:
        """Every regular and lazy NFT that has a liquidity reference."""
        regular = (await db.execute(_LIST_NFT_REFS_SQL)).fetchall()
        lazy = (await db.execute(_LIST_LAZY_REFS_SQL)).fetchall()
        refs = [_row_to_ref(r, r.item_id, lazy=False) for r in regular]
        refs.extend(_row_to_ref(r, r.id, lazy=True) for r in lazy)
        return refs


def _row_to_ref(row: Any, item_id: str, lazy: bool) -> LiquidityRef:
    return LiquidityRef(
        item_id=str(item_id),
        network=row.network,
        liquidity_contract=row.liquidity_contract,
        liquidity_piece_id=int(row.liquidity_piece_id),
        price=row.price,
        last_price=row.last_price,
        lazy=lazy,
    )
