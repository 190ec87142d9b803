"""Domain models for mp_liquidity: audit results, never persisted."""

from dataclasses import dataclass, field

FUNDING_RECOMMENDATION = (
    "Fund the liquidity pool by transferring pieces to it with "
    "safeBatchTransferFrom on the pieces contract."
)


@dataclass(frozen=True)
class FundedPiece:
    piece_id: int
    balance: int


@dataclass(frozen=True)
class PieceReadError:
    piece_id: int
    message: str


@dataclass
class ReserveAuditReport:
    """Pool balances over a range of piece ids.

    An unfunded id has zero balance in the pool, so sell-backs against it
    revert with "insufficient reserve".
    """

    pieces_address: str
    pool_address: str
    first_id: int
    last_id: int
    funded: list[FundedPiece] = field(default_factory=list)
    unfunded: list[int] = field(default_factory=list)
    errors: list[PieceReadError] = field(default_factory=list)

    @property
    def fully_funded(self) -> bool:
        return not self.unfunded

    def recommendation(self) -> str | None:
        if self.fully_funded:
            return None
        return f"{FUNDING_RECOMMENDATION} Pool: {self.pool_address}"


@dataclass
class ListedReserve:
    item_id: str
    network: str
    liquidity_contract: str
    liquidity_piece_id: int
    price: str
    reserve: int | None = None
    deployed: bool = True
    error: str | None = None

    @property
    def insufficient(self) -> bool:
        return self.deployed and self.error is None and self.reserve == 0


@dataclass
class ListedReserveReport:
    entries: list[ListedReserve] = field(default_factory=list)
    regular_count: int = 0
    lazy_count: int = 0

    @property
    def insufficient(self) -> list[ListedReserve]:
        return [e for e in self.entries if e.insufficient]
