"""Pydantic schemas for the piece-holdings API."""
from pydantic import BaseModel

from src.mp_common.datetime_utils import isoformat_or_none
from src.mp_holdings.domain.models import PieceHolding


class PieceHoldingResponse(BaseModel):
    network: str
    item_id: str
    wallet: str
    pieces: int
    updated_at: str | None = None

    @classmethod
    def from_domain(cls, holding: PieceHolding) -> "PieceHoldingResponse":
        return cls(
            network=holding.network,
            item_id=holding.item_id,
            wallet=holding.wallet,
            pieces=holding.pieces,
            updated_at=isoformat_or_none(holding.updated_at),
        )


class PieceHoldingListResponse(BaseModel):
    wallet: str
    items: list[PieceHoldingResponse]
    total: int
