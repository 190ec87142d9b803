"""Repository Protocol for the holdings store.

Unit tests inject an in-memory implementation that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_holdings.domain.models import PieceHolding


class PieceHoldingRepositoryProtocol(Protocol):
    async def upsert_pieces(
        self, db: AsyncSession, network: str, item_id: str, wallet: str, pieces: int
    ) -> None: ...

    async def list_by_wallet(
        self, db: AsyncSession, wallet: str, include_empty: bool = True
    ) -> list[PieceHolding]: ...

    async def get(
        self, db: AsyncSession, network: str, item_id: str, wallet: str
    ) -> PieceHolding | None: ...
