"""Piece holdings REST API: read-only view of reconciled balances."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_chain.client import to_checksum
from src.mp_common.database import get_db_session
from src.mp_common.response import ApiResponse, success_response
from src.mp_holdings.application.schemas import (
    PieceHoldingListResponse,
    PieceHoldingResponse,
)
from src.mp_holdings.infrastructure.persistence import PieceHoldingRepository

router = APIRouter(prefix="/piece-holdings", tags=["piece-holdings"])
_repo = PieceHoldingRepository()


@router.get("/{wallet}")
async def list_piece_holdings(
    wallet: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    include_empty: bool = Query(False),
) -> ApiResponse:
    normalized = to_checksum(wallet).lower()
    holdings = await _repo.list_by_wallet(db, normalized, include_empty=include_empty)
    data = PieceHoldingListResponse(
        wallet=normalized,
        items=[PieceHoldingResponse.from_domain(h) for h in holdings],
        total=len(holdings),
    )
    return success_response(data.model_dump(), getattr(request.state, "request_id", None))
