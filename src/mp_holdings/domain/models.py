"""Domain models for mp_holdings: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class PieceHolding:
    """Off-chain copy of an ERC-1155 piece balance.

    Expected to equal balanceOf(wallet, token) on chain; reconciliation
    overwrites it with a fresh read when the two drift. Zero balances stay
    as rows with pieces=0.
    """

    network: str
    item_id: str
    wallet: str          # lower-cased
    pieces: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class HoldingKey:
    wallet: str          # lower-cased
    token_id: int


@dataclass
class ReconcileSummary:
    from_block: int = 0
    to_block: int = 0
    batches: int = 0
    logs_seen: int = 0
    keys_touched: int = 0
    updated: int = 0
    failed: int = 0
    failed_batches: int = 0

    def merge(self, other: "ReconcileSummary") -> None:
        self.batches += other.batches
        self.logs_seen += other.logs_seen
        self.keys_touched += other.keys_touched
        self.updated += other.updated
        self.failed += other.failed
        self.failed_batches += other.failed_batches


@dataclass
class WalletRowResult:
    item_id: str
    network: str
    pieces: int | None = None
    skipped: bool = False
    error: str | None = None


@dataclass
class WalletReconcileSummary:
    wallet: str
    rows: list[WalletRowResult] = field(default_factory=list)

    @property
    def updated(self) -> int:
        return sum(1 for r in self.rows if r.pieces is not None)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.rows if r.skipped)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.rows if r.error is not None)
