"""Piece balance inspection for a single wallet/token: operator diagnostics."""
import logging
from dataclasses import dataclass, field

from src.mp_chain.models import TransferSingleEvent
from src.mp_chain.protocols import ChainReader
from src.mp_common.errors import ChainReadError
from src.mp_holdings.domain.aggregation import events_for_wallet

logger = logging.getLogger(__name__)

DEFAULT_LOOKBACK_BLOCKS = 10000
MAX_EVENTS_SHOWN = 20


@dataclass
class PieceBalanceReport:
    pieces_address: str
    wallet: str
    piece_id: int
    balance: int | None = None
    from_block: int | None = None
    to_block: int | None = None
    matched_events: int = 0
    recent_events: list[TransferSingleEvent] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


async def inspect_piece_balance(
    chain: ChainReader,
    pieces_address: str,
    wallet: str,
    piece_id: int,
    lookback_blocks: int = DEFAULT_LOOKBACK_BLOCKS,
) -> PieceBalanceReport:
    """Current balanceOf plus the latest transfers touching *wallet* for *piece_id*.

    The balance read and the log scan fail independently; each failure is
    recorded in `errors` and the other half still runs.
    """
    pieces = chain.pieces(pieces_address)
    report = PieceBalanceReport(pieces_address=pieces.address, wallet=wallet.lower(), piece_id=piece_id)

    try:
        report.balance = await pieces.balance_of(wallet, piece_id)
    except ChainReadError as exc:
        logger.error("Error calling balanceOf: %s", exc.message)
        report.errors.append(exc.message)

    try:
        latest = await chain.latest_block()
        report.from_block = max(0, latest - lookback_blocks)
        report.to_block = latest
        events = await pieces.transfer_events(report.from_block, latest)
    except ChainReadError as exc:
        logger.error("Error querying logs: %s", exc.message)
        report.errors.append(exc.message)
        return report

    related = events_for_wallet(events, wallet, piece_id)
    report.matched_events = len(related)
    report.recent_events = related[-MAX_EVENTS_SHOWN:]
    return report
