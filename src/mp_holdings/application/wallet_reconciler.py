"""Single-wallet refresh of existing piece_holdings rows.

No event scan: each stored row is resolved to its NFT's liquidity contract and
piece id, and the row is overwritten with balanceOf(wallet, piece id). A chain
or store failure on one row is recorded on that row (after a rollback for the
store) and the remaining rows still run.
"""
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_catalog.infrastructure.persistence import CatalogRepository
from src.mp_chain.client import to_checksum
from src.mp_chain.protocols import ChainReader
from src.mp_common.errors import AppError
from src.mp_holdings.domain.models import WalletReconcileSummary, WalletRowResult
from src.mp_holdings.domain.repository import PieceHoldingRepositoryProtocol
from src.mp_holdings.infrastructure.persistence import PieceHoldingRepository

logger = logging.getLogger(__name__)

DEFAULT_NETWORK = "base"


class WalletHoldingReconciler:
    def __init__(
        self,
        chain: ChainReader,
        repo: PieceHoldingRepositoryProtocol | None = None,
        catalog: CatalogRepository | None = None,
    ) -> None:
        self._chain = chain
        self._repo: PieceHoldingRepositoryProtocol = repo or PieceHoldingRepository()
        self._catalog = catalog or CatalogRepository()

    async def reconcile_wallet(self, db: AsyncSession, wallet: str) -> WalletReconcileSummary:
        wallet = to_checksum(wallet).lower()
        summary = WalletReconcileSummary(wallet=wallet)

        holdings = await self._repo.list_by_wallet(db, wallet)
        if not holdings:
            logger.info("No piece holdings found for wallet %s", wallet)
            return summary

        logger.info("Found %d holding rows for %s, reconciling each", len(holdings), wallet)
        for holding in holdings:
            network = (holding.network or DEFAULT_NETWORK).lower()
            item_id = str(holding.item_id)
            result = WalletRowResult(item_id=item_id, network=network)
            summary.rows.append(result)

            ref = await self._catalog.find_liquidity_ref(network, item_id, db)
            if ref is None:
                logger.info("Skipping %s: no liquidity contract/piece id on record", item_id)
                result.skipped = True
                continue

            try:
                pieces = await self._chain.pieces(ref.liquidity_contract).balance_of(
                    wallet, ref.liquidity_piece_id
                )
            except AppError as exc:
                logger.warning("Error reconciling %s: %s", item_id, exc.message)
                result.error = exc.message
                continue

            try:
                await self._repo.upsert_pieces(db, network, item_id, wallet, pieces)
                await db.commit()
            except SQLAlchemyError as exc:
                await db.rollback()
                logger.warning("Failed to store %s for %s: %s", item_id, wallet, exc)
                result.error = f"store failed: {exc}"
                continue
            result.pieces = pieces
            logger.info("Updated %s -> pieces=%d", item_id, pieces)

        return summary
