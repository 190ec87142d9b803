"""Operator command line for the piece ledger.

Usage:
    mp-ledger reconcile-pieces --pieces 0x40aE... --from-block 0 --to-block latest
    mp-ledger reconcile-wallet 0xabc...
    mp-ledger audit-reserves --pieces 0x40aE... --pool 0xDe75... --first-id 1 --last-id 50
    mp-ledger check-listed-reserves
    mp-ledger piece-history --pieces 0x40aE... --piece-id 7 --wallet 0xabc...
    mp-ledger fee-quote 100 --quantity 2

RPC URL, database URL, network and contract addresses fall back to settings
(.env / environment). Exit codes: 0 success, 1 fatal runtime error,
2 missing or invalid configuration.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.mp_chain.client import ChainClient
from src.mp_chain.network import resolve_network
from src.mp_common.amounts import format_amount
from src.mp_common.database import create_engine, create_session_factory
from src.mp_common.errors import (
    AppError,
    ConfigurationError,
    InvalidRangeError,
    InvalidWalletAddressError,
)
from src.mp_fees.application.service import schedule_from_settings
from src.mp_fees.domain.fee import calculate_bulk_fees, calculate_refund
from src.mp_fees.domain.models import RefundBasis
from src.mp_holdings.application.history import DEFAULT_LOOKBACK_BLOCKS, inspect_piece_balance
from src.mp_holdings.application.reconciler import LATEST, PieceHoldingReconciler
from src.mp_holdings.application.wallet_reconciler import WalletHoldingReconciler
from src.mp_liquidity.application.service import (
    DEFAULT_FIRST_PIECE_ID,
    DEFAULT_LAST_PIECE_ID,
    audit_piece_range,
    check_listed_reserves,
)

logger = logging.getLogger("mp.cli")

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_CONFIG = 2

Handler = Callable[[argparse.Namespace], Awaitable[int]]


# ---------------------------------------------------------------------------
# Configuration helpers
# ---------------------------------------------------------------------------


def _require(value: str | None, setting: str, hint: str) -> str:
    if not value:
        raise ConfigurationError(setting, hint)
    return value


def _rpc_url(args: argparse.Namespace) -> str:
    return _require(args.rpc or settings.RPC_URL, "RPC_URL", "set --rpc or RPC_URL")


def _database_url(args: argparse.Namespace) -> str:
    return _require(
        args.database_url or settings.DATABASE_URL,
        "DATABASE_URL",
        "set --database-url or DATABASE_URL",
    )


def _pieces_address(args: argparse.Namespace) -> str:
    return _require(
        args.pieces or settings.PIECES_CONTRACT,
        "PIECES_CONTRACT",
        "set --pieces or PIECES_CONTRACT",
    )


@asynccontextmanager
async def _session(database_url: str) -> AsyncIterator[AsyncSession]:
    engine = create_engine(database_url)
    try:
        async with create_session_factory(engine)() as session:
            yield session
    finally:
        await engine.dispose()


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


async def cmd_reconcile_pieces(args: argparse.Namespace) -> int:
    rpc_url = _rpc_url(args)
    database_url = _database_url(args)
    pieces = _pieces_address(args)
    network = resolve_network(args.network or settings.CHAIN_NETWORK, rpc_url)

    reconciler = PieceHoldingReconciler(ChainClient(rpc_url), pieces, network)
    async with _session(database_url) as db:
        summary = await reconciler.run(
            db,
            from_block=args.from_block,
            to_block=args.to_block,
            batch_size=args.batch_size,
        )

    print(f"Reconciled blocks {summary.from_block}..{summary.to_block} on network {network}")
    print(f"  batches:      {summary.batches} ({summary.failed_batches} failed)")
    print(f"  logs:         {summary.logs_seen}")
    print(f"  keys touched: {summary.keys_touched}")
    print(f"  updated:      {summary.updated}")
    print(f"  failed reads: {summary.failed}")
    return EXIT_OK


async def cmd_reconcile_wallet(args: argparse.Namespace) -> int:
    rpc_url = _rpc_url(args)
    database_url = _database_url(args)

    reconciler = WalletHoldingReconciler(ChainClient(rpc_url))
    async with _session(database_url) as db:
        summary = await reconciler.reconcile_wallet(db, args.wallet)

    if not summary.rows:
        print(f"No piece holdings found for wallet {summary.wallet}")
        return EXIT_OK
    print(f"Wallet {summary.wallet}: {len(summary.rows)} rows")
    for row in summary.rows:
        if row.skipped:
            status = "skipped (no liquidity contract/piece id)"
        elif row.error is not None:
            status = f"error: {row.error}"
        else:
            status = f"pieces={row.pieces}"
        print(f"  [{row.network}] {row.item_id}: {status}")
    print(f"Updated {summary.updated}, skipped {summary.skipped}, failed {summary.failed}")
    return EXIT_OK


async def cmd_audit_reserves(args: argparse.Namespace) -> int:
    rpc_url = _rpc_url(args)
    pieces = _pieces_address(args)
    pool = _require(
        args.pool or settings.LIQUIDITY_POOL_ADDRESS,
        "LIQUIDITY_POOL_ADDRESS",
        "set --pool or LIQUIDITY_POOL_ADDRESS",
    )

    report = await audit_piece_range(
        ChainClient(rpc_url), pieces, pool, args.first_id, args.last_id
    )

    print(f"Pieces contract: {report.pieces_address}")
    print(f"Liquidity pool:  {report.pool_address}")
    print(f"Scanned piece ids {report.first_id}..{report.last_id}")
    print(f"Funded pieces: {len(report.funded)}")
    for funded in report.funded:
        print(f"  - Piece {funded.piece_id}: {funded.balance}")
    for err in report.errors:
        print(f"  ! Piece {err.piece_id}: error checking balance (may not exist)")
    if report.unfunded:
        ids = ", ".join(str(i) for i in report.unfunded)
        print(f"UNFUNDED pieces (will cause 'Insufficient reserve'): {ids}")
        print(report.recommendation())
    else:
        print("All scanned pieces have reserves.")
    return EXIT_OK


async def cmd_check_listed_reserves(args: argparse.Namespace) -> int:
    rpc_url = _rpc_url(args)
    database_url = _database_url(args)

    async with _session(database_url) as db:
        report = await check_listed_reserves(ChainClient(rpc_url), db)

    print(
        f"Found {report.regular_count} regular NFTs and "
        f"{report.lazy_count} lazy NFTs with liquidity info"
    )
    for entry in report.entries:
        print(f"NFT {entry.item_id} [{entry.network}]")
        print(f"  Liquidity contract: {entry.liquidity_contract}")
        print(f"  Piece ID: {entry.liquidity_piece_id}")
        print(f"  Price: {entry.price}")
        if not entry.deployed:
            print("  No contract deployed at liquidity address")
        elif entry.error is not None:
            print(f"  Cannot query reserve balance: {entry.error}")
        else:
            print(f"  Reserve (pieces in liquidity): {entry.reserve}")
            if entry.insufficient:
                print("  INSUFFICIENT RESERVE: liquidity pool is empty")
    return EXIT_OK


async def cmd_piece_history(args: argparse.Namespace) -> int:
    rpc_url = _rpc_url(args)
    pieces = _pieces_address(args)

    report = await inspect_piece_balance(
        ChainClient(rpc_url), pieces, args.wallet, args.piece_id, args.lookback
    )

    print(f"Pieces contract: {report.pieces_address}")
    print(f"Piece ID: {report.piece_id}")
    print(f"Wallet: {report.wallet}")
    balance = report.balance if report.balance is not None else "unavailable"
    print(f"On-chain balanceOf: {balance}")
    if report.from_block is not None:
        print(
            f"Found {report.matched_events} TransferSingle logs in blocks "
            f"{report.from_block}..{report.to_block}"
        )
        for ev in report.recent_events:
            print(
                f"  block={ev.block_number} tx={ev.tx_hash} "
                f"from={ev.from_address} to={ev.to_address} value={ev.value}"
            )
    for err in report.errors:
        print(f"  error: {err}")
    return EXIT_OK


async def cmd_fee_quote(args: argparse.Namespace) -> int:
    schedule = schedule_from_settings()
    fees = calculate_bulk_fees(args.price, args.quantity, schedule)
    print(f"Purchase price:    {format_amount(fees.purchase_price)}")
    print(f"Creator fee:       {format_amount(fees.creator_fee)}")
    print(f"Buyer fee:         {format_amount(fees.buyer_fee)}")
    print(f"Total fees:        {format_amount(fees.total_fees)}")
    print(f"User pays:         {format_amount(fees.user_payable)}")
    print(f"Creator receives:  {format_amount(fees.creator_receives)}")
    print(f"Platform receives: {format_amount(fees.platform_receives)}")
    if args.refund_basis is not None:
        refund = calculate_refund(fees.user_payable, RefundBasis(args.refund_basis), schedule)
        print(f"Refund ({refund.basis.value}): creator {format_amount(refund.creator_fee_refund)}, "
              f"platform {format_amount(refund.platform_fee_refund)}")
    return EXIT_OK


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def _add_rpc(p: argparse.ArgumentParser) -> None:
    p.add_argument("--rpc", default=None, help="JSON-RPC URL (default: RPC_URL)")


def _add_database(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--database-url", default=None, help="Database URL (default: DATABASE_URL)"
    )


def _add_pieces(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--pieces", default=None, help="ERC-1155 pieces contract (default: PIECES_CONTRACT)"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mp-ledger", description=__doc__.splitlines()[0])
    parser.add_argument("--log-level", default=None, help="Logging level (default: LOG_LEVEL)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("reconcile-pieces", help="Rebuild piece holdings from TransferSingle events")
    _add_rpc(p)
    _add_database(p)
    _add_pieces(p)
    p.add_argument("--network", default=None, help="Network label for stored rows (default: CHAIN_NETWORK)")
    p.add_argument("--from-block", default="0")
    p.add_argument("--to-block", default=LATEST)
    p.add_argument("--batch-size", type=int, default=settings.RECONCILE_BATCH_SIZE)
    p.set_defaults(handler=cmd_reconcile_pieces)

    p = sub.add_parser("reconcile-wallet", help="Refresh one wallet's stored piece holdings")
    p.add_argument("wallet")
    _add_rpc(p)
    _add_database(p)
    p.set_defaults(handler=cmd_reconcile_wallet)

    p = sub.add_parser("audit-reserves", help="Scan a liquidity pool's balance over a piece id range")
    _add_rpc(p)
    _add_pieces(p)
    p.add_argument("--pool", default=None, help="Liquidity pool address (default: LIQUIDITY_POOL_ADDRESS)")
    p.add_argument("--first-id", type=int, default=DEFAULT_FIRST_PIECE_ID)
    p.add_argument("--last-id", type=int, default=DEFAULT_LAST_PIECE_ID)
    p.set_defaults(handler=cmd_audit_reserves)

    p = sub.add_parser("check-listed-reserves", help="Check reserves of every NFT with liquidity")
    _add_rpc(p)
    _add_database(p)
    p.set_defaults(handler=cmd_check_listed_reserves)

    p = sub.add_parser("piece-history", help="Show a wallet's balance and recent transfers of a piece")
    _add_rpc(p)
    _add_pieces(p)
    p.add_argument("--piece-id", type=int, required=True)
    p.add_argument("--wallet", required=True)
    p.add_argument("--lookback", type=int, default=DEFAULT_LOOKBACK_BLOCKS)
    p.set_defaults(handler=cmd_piece_history)

    p = sub.add_parser("fee-quote", help="Print the fee split for a purchase")
    p.add_argument("price")
    p.add_argument("--quantity", default="1")
    p.add_argument(
        "--refund-basis",
        choices=[b.value for b in RefundBasis],
        default=None,
        help="Also show how a full refund of the payment is apportioned",
    )
    p.set_defaults(handler=cmd_fee_quote)

    return parser


def _configure_logging(level: str | None) -> None:
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.log_level)
    handler: Handler = args.handler
    try:
        return asyncio.run(handler(args))
    except (ConfigurationError, InvalidRangeError, InvalidWalletAddressError) as exc:
        logger.error("%s", exc.message)
        return EXIT_CONFIG
    except AppError as exc:
        logger.error("Fatal: %s", exc.message)
        return EXIT_FATAL
    except SQLAlchemyError as exc:
        logger.error("Database error: %s", exc)
        return EXIT_FATAL


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
