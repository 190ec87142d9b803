"""Liquidity reserve auditing.

Two read-only audits:
- `audit_piece_range`: one pool address against a range of piece ids
- `check_listed_reserves`: every NFT with a liquidity reference in the catalog,
  reading the reserve the liquidity contract holds of its own piece id

No remediation is performed; reports only recommend funding.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_catalog.infrastructure.persistence import CatalogRepository
from src.mp_chain.client import to_checksum
from src.mp_chain.protocols import ChainReader
from src.mp_common.errors import AppError, ChainReadError, InvalidRangeError
from src.mp_liquidity.domain.models import (
    FundedPiece,
    ListedReserve,
    ListedReserveReport,
    PieceReadError,
    ReserveAuditReport,
)

logger = logging.getLogger(__name__)

DEFAULT_FIRST_PIECE_ID = 1
DEFAULT_LAST_PIECE_ID = 50


async def audit_piece_range(
    chain: ChainReader,
    pieces_address: str,
    pool_address: str,
    first_id: int = DEFAULT_FIRST_PIECE_ID,
    last_id: int = DEFAULT_LAST_PIECE_ID,
) -> ReserveAuditReport:
    """Partition piece ids [first_id, last_id] into funded / unfunded by pool balance.

    A reverted read (e.g. an id that was never minted) is recorded and the
    scan continues.
    """
    if first_id < 0 or last_id < first_id:
        raise InvalidRangeError(f"piece id range {first_id}..{last_id}")
    pieces = chain.pieces(pieces_address)
    pool = to_checksum(pool_address)
    report = ReserveAuditReport(
        pieces_address=pieces.address,
        pool_address=pool,
        first_id=first_id,
        last_id=last_id,
    )
    logger.info(
        "Auditing pool %s on %s for piece ids %d..%d",
        pool, pieces.address, first_id, last_id,
    )

    for piece_id in range(first_id, last_id + 1):
        try:
            balance = await pieces.balance_of(pool, piece_id)
        except ChainReadError as exc:
            logger.warning("Piece ID %d: error checking balance (may not exist): %s", piece_id, exc.message)
            report.errors.append(PieceReadError(piece_id, exc.message))
            continue
        if balance > 0:
            report.funded.append(FundedPiece(piece_id, balance))
            logger.debug("Piece ID %d: %d in reserve", piece_id, balance)
        else:
            report.unfunded.append(piece_id)

    if report.unfunded:
        logger.warning(
            "Unfunded pieces (will cause 'insufficient reserve'): %s",
            ", ".join(str(i) for i in report.unfunded),
        )
    return report


async def check_listed_reserves(
    chain: ChainReader,
    db: AsyncSession,
    catalog: CatalogRepository | None = None,
) -> ListedReserveReport:
    """Reserve held by each distinct (liquidity contract, piece id) in the catalog."""
    catalog = catalog or CatalogRepository()
    refs = await catalog.list_liquidity_refs(db)
    report = ListedReserveReport(
        regular_count=sum(1 for r in refs if not r.lazy),
        lazy_count=sum(1 for r in refs if r.lazy),
    )
    logger.info(
        "Found %d regular NFTs and %d lazy NFTs with liquidity info",
        report.regular_count, report.lazy_count,
    )

    seen: set[tuple[str, int]] = set()
    for ref in refs:
        if ref.reserve_key in seen:
            continue
        seen.add(ref.reserve_key)

        entry = ListedReserve(
            item_id=ref.item_id,
            network=ref.network,
            liquidity_contract=ref.liquidity_contract,
            liquidity_piece_id=ref.liquidity_piece_id,
            price=ref.display_price,
        )
        report.entries.append(entry)

        try:
            if not await chain.has_code(ref.liquidity_contract):
                logger.warning("No contract at %s (item %s)", ref.liquidity_contract, ref.item_id)
                entry.deployed = False
                continue
            entry.reserve = await chain.pieces(ref.liquidity_contract).balance_of(
                ref.liquidity_contract, ref.liquidity_piece_id
            )
        except AppError as exc:
            logger.error("Cannot query reserve for item %s: %s", ref.item_id, exc.message)
            entry.error = exc.message
            continue

        if entry.reserve == 0:
            logger.warning(
                "INSUFFICIENT RESERVE: item %s piece %d on %s",
                ref.item_id, ref.liquidity_piece_id, ref.liquidity_contract,
            )
    return report
