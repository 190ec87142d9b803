# tests/unit/test_catalog_repository.py
"""Unit tests for CatalogRepository using MagicMock AsyncSession."""
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.mp_catalog.infrastructure.persistence import CatalogRepository

LIQ = "0x" + "a7" * 20


def _nft_row(**kwargs: Any) -> MagicMock:
    row = MagicMock()
    row.item_id = kwargs.get("item_id", "nft-1")
    row.network = kwargs.get("network", "base")
    row.liquidity_contract = kwargs.get("liquidity_contract", LIQ)
    row.liquidity_piece_id = kwargs.get("liquidity_piece_id", 4)
    row.price = kwargs.get("price", "1.0")
    row.last_price = kwargs.get("last_price")
    return row


def _lazy_row(**kwargs: Any) -> MagicMock:
    row = _nft_row(**kwargs)
    row.id = kwargs.get("id", "lazy-1")
    return row


def _result(one: Any = None, many: list | None = None) -> MagicMock:
    result = MagicMock()
    result.fetchone.return_value = one
    result.fetchall.return_value = many or []
    return result


class TestFindLiquidityRef:
    @pytest.mark.asyncio
    async def test_regular_nft(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = [_result(one=_nft_row())]

        ref = await CatalogRepository().find_liquidity_ref("base", "nft-1", db)

        assert ref is not None
        assert ref.liquidity_contract == LIQ
        assert ref.liquidity_piece_id == 4
        assert ref.lazy is False
        assert db.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_falls_back_to_lazy(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = [_result(one=None), _result(one=_lazy_row(id="lazy-9", price="2"))]

        ref = await CatalogRepository().find_liquidity_ref("base", "lazy-9", db)

        assert ref is not None
        assert ref.item_id == "lazy-9"
        assert ref.lazy is True
        assert ref.price == "2"
        assert db.execute.call_args.args[1] == {"item_id": "lazy-9"}

    @pytest.mark.asyncio
    async def test_regular_fields_win_over_lazy(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = [
            _result(one=_nft_row(liquidity_piece_id=None)),
            _result(one=_lazy_row(liquidity_contract="0x" + "ff" * 20, liquidity_piece_id=8)),
        ]

        ref = await CatalogRepository().find_liquidity_ref("base", "nft-1", db)

        assert ref is not None
        assert ref.liquidity_contract == LIQ
        assert ref.liquidity_piece_id == 8

    @pytest.mark.asyncio
    async def test_missing_everywhere(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = [_result(one=None), _result(one=None)]
        assert await CatalogRepository().find_liquidity_ref("base", "x", db) is None

    @pytest.mark.asyncio
    async def test_lazy_without_reference(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = [
            _result(one=None),
            _result(one=_lazy_row(liquidity_contract=None, liquidity_piece_id=None)),
        ]
        assert await CatalogRepository().find_liquidity_ref("base", "lazy-1", db) is None


class TestListLiquidityRefs:
    @pytest.mark.asyncio
    async def test_regular_then_lazy(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = [
            _result(many=[_nft_row(item_id="a"), _nft_row(item_id="b")]),
            _result(many=[_lazy_row(id="c")]),
        ]

        refs = await CatalogRepository().list_liquidity_refs(db)

        assert [(r.item_id, r.lazy) for r in refs] == [("a", False), ("b", False), ("c", True)]
