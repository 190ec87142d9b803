"""PieceHoldingReconciler: rebuild piece_holdings from TransferSingle events.

Per batch of blocks:
  1. eth_getLogs for TransferSingle in the sub-range
  2. aggregate net deltas per (wallet, token) to find the dirty pairs
  3. for each dirty pair, read balanceOf live and upsert that value

The stored value is always the fresh chain read, so re-running a range or
overlapping a previous run converges on the same rows. Pairs without events in
the range are never visited. Batches and keys are processed strictly serially.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_chain.protocols import ChainReader, PiecesReader
from src.mp_common.errors import ChainReadError, InvalidRangeError
from src.mp_holdings.domain.aggregation import aggregate_transfer_deltas
from src.mp_holdings.domain.models import ReconcileSummary
from src.mp_holdings.domain.repository import PieceHoldingRepositoryProtocol
from src.mp_holdings.infrastructure.persistence import PieceHoldingRepository

logger = logging.getLogger(__name__)

LATEST = "latest"
DEFAULT_BATCH_SIZE = 5000


def parse_block_tag(value: str | int) -> int | str:
    """'latest' stays a tag, anything else must be a non-negative block number."""
    if isinstance(value, str) and value.strip().lower() == LATEST:
        return LATEST
    try:
        block = int(value)
    except (TypeError, ValueError):
        raise InvalidRangeError(f"not a block number: {value!r}") from None
    if block < 0:
        raise InvalidRangeError(f"negative block number: {block}")
    return block


class PieceHoldingReconciler:
    def __init__(
        self,
        chain: ChainReader,
        pieces_address: str,
        network: str,
        repo: PieceHoldingRepositoryProtocol | None = None,
    ) -> None:
        self._chain = chain
        self._pieces: PiecesReader = chain.pieces(pieces_address)
        self._network = network.lower()
        self._repo: PieceHoldingRepositoryProtocol = repo or PieceHoldingRepository()

    @property
    def network(self) -> str:
        return self._network

    async def reconcile_range(
        self, db: AsyncSession, from_block: int, to_block: int
    ) -> ReconcileSummary:
        """Reconcile one block sub-range. eth_getLogs failures propagate."""
        summary = ReconcileSummary(from_block=from_block, to_block=to_block, batches=1)
        logger.info(
            "Scanning TransferSingle events %d -> %d on %s",
            from_block, to_block, self._pieces.address,
        )
        events = await self._pieces.transfer_events(from_block, to_block)
        summary.logs_seen = len(events)
        deltas = aggregate_transfer_deltas(events)
        summary.keys_touched = len(deltas)

        for key in deltas:
            try:
                pieces = await self._pieces.balance_of(key.wallet, key.token_id)
            except ChainReadError as exc:
                logger.warning(
                    "balanceOf failed for %s token=%d: %s", key.wallet, key.token_id, exc.message
                )
                summary.failed += 1
                continue
            await self._repo.upsert_pieces(
                db, self._network, str(key.token_id), key.wallet, pieces
            )
            await db.commit()
            summary.updated += 1

        logger.info(
            "Reconciled %d wallet/piece entries in blocks %d..%d (%d logs, %d failed)",
            summary.updated, from_block, to_block, summary.logs_seen, summary.failed,
        )
        return summary

    async def run(
        self,
        db: AsyncSession,
        from_block: int | str = 0,
        to_block: int | str = LATEST,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> ReconcileSummary:
        """Walk [from_block, to_block] in inclusive batches of *batch_size* blocks.

        A batch whose log query fails is logged and counted; the run moves on
        to the next batch.
        """
        if batch_size < 1:
            raise InvalidRangeError(f"batch size must be >= 1, got {batch_size}")
        start = await self._resolve(from_block)
        end = await self._resolve(to_block)
        if start > end:
            raise InvalidRangeError(f"from block {start} is after to block {end}")

        total = ReconcileSummary(from_block=start, to_block=end)
        current = start
        while current <= end:
            batch_end = min(current + batch_size - 1, end)
            logger.info("Processing blocks %d..%d", current, batch_end)
            try:
                total.merge(await self.reconcile_range(db, current, batch_end))
            except ChainReadError as exc:
                logger.error("Skipping blocks %d..%d: %s", current, batch_end, exc.message)
                total.batches += 1
                total.failed_batches += 1
            current = batch_end + 1

        logger.info(
            "Reconciliation complete: %d batches, %d logs, %d updated, %d failed",
            total.batches, total.logs_seen, total.updated, total.failed,
        )
        return total

    async def _resolve(self, tag: int | str) -> int:
        parsed = parse_block_tag(tag)
        if parsed == LATEST:
            return await self._chain.latest_block()
        return int(parsed)
