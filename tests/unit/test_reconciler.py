"""Tests for PieceHoldingReconciler (fake chain, in-memory store)."""

from unittest.mock import AsyncMock

import pytest

from src.mp_common.errors import InvalidRangeError
from src.mp_holdings.application.reconciler import LATEST, PieceHoldingReconciler, parse_block_tag
from tests.unit.fakes import FakeChain, FakePieces, InMemoryHoldingRepository, MakeEvent

ALICE = "0x" + "a1" * 20
BOB = "0x" + "b2" * 20
CAROL = "0x" + "c3" * 20
PIECES = "0x" + "d4" * 20


@pytest.fixture
def pieces(chain: FakeChain) -> FakePieces:
    return chain.pieces(PIECES)


@pytest.fixture
def reconciler(
    chain: FakeChain, holding_repo: InMemoryHoldingRepository
) -> PieceHoldingReconciler:
    return PieceHoldingReconciler(chain, PIECES, "Base", repo=holding_repo)


class TestParseBlockTag:
    def test_latest(self) -> None:
        assert parse_block_tag("latest") == LATEST
        assert parse_block_tag(" LATEST ") == LATEST

    def test_numbers(self) -> None:
        assert parse_block_tag("12") == 12
        assert parse_block_tag(0) == 0

    @pytest.mark.parametrize("bad", ["-1", -5, "pending", "1.5", None])
    def test_invalid(self, bad: object) -> None:
        with pytest.raises(InvalidRangeError):
            parse_block_tag(bad)  # type: ignore[arg-type]


class TestReconcileRange:
    async def test_stores_fresh_balance_not_delta(
        self,
        reconciler: PieceHoldingReconciler,
        pieces: FakePieces,
        holding_repo: InMemoryHoldingRepository,
        db: AsyncMock,
        make_event: MakeEvent,
    ) -> None:
        pieces.events = [make_event(to_address=ALICE, token_id=1, value=2, block_number=5)]
        pieces.set_balance(ALICE, 1, 9)

        summary = await reconciler.reconcile_range(db, 0, 10)

        assert holding_repo.pieces_of("base", "1", ALICE) == 9
        assert summary.logs_seen == 1
        assert summary.keys_touched == 1
        assert summary.updated == 1
        assert db.commit.await_count == 1

    async def test_sender_and_receiver_both_refreshed(
        self,
        reconciler: PieceHoldingReconciler,
        pieces: FakePieces,
        holding_repo: InMemoryHoldingRepository,
        db: AsyncMock,
        make_event: MakeEvent,
    ) -> None:
        pieces.events = [make_event(from_address=ALICE, to_address=BOB, token_id=3, value=1)]
        pieces.set_balance(ALICE, 3, 0)
        pieces.set_balance(BOB, 3, 1)

        await reconciler.reconcile_range(db, 0, 10)

        assert holding_repo.pieces_of("base", "3", ALICE) == 0
        assert holding_repo.pieces_of("base", "3", BOB) == 1

    async def test_zero_address_never_stored(
        self,
        reconciler: PieceHoldingReconciler,
        pieces: FakePieces,
        holding_repo: InMemoryHoldingRepository,
        db: AsyncMock,
        make_event: MakeEvent,
    ) -> None:
        pieces.events = [make_event(to_address=ALICE, token_id=1)]
        await reconciler.reconcile_range(db, 0, 10)
        assert {row.wallet for row in holding_repo.rows.values()} == {ALICE}

    async def test_untouched_rows_left_alone(
        self,
        reconciler: PieceHoldingReconciler,
        pieces: FakePieces,
        holding_repo: InMemoryHoldingRepository,
        db: AsyncMock,
        make_event: MakeEvent,
    ) -> None:
        holding_repo.seed("base", "7", CAROL, 4)
        pieces.set_balance(CAROL, 7, 0)
        pieces.events = [make_event(to_address=ALICE, token_id=1)]

        await reconciler.reconcile_range(db, 0, 10)

        assert holding_repo.pieces_of("base", "7", CAROL) == 4
        assert (CAROL, 7) not in pieces.balance_calls

    async def test_balance_failure_skips_key(
        self,
        reconciler: PieceHoldingReconciler,
        pieces: FakePieces,
        holding_repo: InMemoryHoldingRepository,
        db: AsyncMock,
        make_event: MakeEvent,
    ) -> None:
        pieces.events = [
            make_event(to_address=ALICE, token_id=1),
            make_event(to_address=BOB, token_id=1),
        ]
        pieces.failing_balances.add((ALICE, 1))
        pieces.set_balance(BOB, 1, 1)

        summary = await reconciler.reconcile_range(db, 0, 10)

        assert summary.failed == 1
        assert summary.updated == 1
        assert holding_repo.pieces_of("base", "1", ALICE) is None
        assert holding_repo.pieces_of("base", "1", BOB) == 1


class TestRun:
    async def test_batches_cover_range_inclusively(
        self, reconciler: PieceHoldingReconciler, pieces: FakePieces, db: AsyncMock
    ) -> None:
        summary = await reconciler.run(db, 0, 10, batch_size=4)
        assert pieces.log_calls == [(0, 3), (4, 7), (8, 10)]
        assert summary.batches == 3
        assert (summary.from_block, summary.to_block) == (0, 10)

    async def test_single_block_range(
        self, reconciler: PieceHoldingReconciler, pieces: FakePieces, db: AsyncMock
    ) -> None:
        await reconciler.run(db, 5, 5, batch_size=100)
        assert pieces.log_calls == [(5, 5)]

    async def test_latest_resolved_from_chain(
        self,
        reconciler: PieceHoldingReconciler,
        pieces: FakePieces,
        chain: FakeChain,
        db: AsyncMock,
    ) -> None:
        chain.latest = 12
        await reconciler.run(db, "0", LATEST, batch_size=10)
        assert pieces.log_calls == [(0, 9), (10, 12)]

    async def test_idempotent(
        self,
        reconciler: PieceHoldingReconciler,
        pieces: FakePieces,
        holding_repo: InMemoryHoldingRepository,
        db: AsyncMock,
        make_event: MakeEvent,
    ) -> None:
        pieces.events = [
            make_event(to_address=ALICE, token_id=1, value=3, block_number=2),
            make_event(from_address=ALICE, to_address=BOB, token_id=1, value=1, block_number=8),
        ]
        pieces.set_balance(ALICE, 1, 2)
        pieces.set_balance(BOB, 1, 1)

        await reconciler.run(db, 0, 10, batch_size=5)
        first = dict(holding_repo.rows)
        await reconciler.run(db, 0, 10, batch_size=3)

        assert holding_repo.rows == first
        assert holding_repo.pieces_of("base", "1", ALICE) == 2

    async def test_failed_batch_is_counted_and_run_continues(
        self,
        reconciler: PieceHoldingReconciler,
        pieces: FakePieces,
        holding_repo: InMemoryHoldingRepository,
        db: AsyncMock,
        make_event: MakeEvent,
    ) -> None:
        pieces.events = [make_event(to_address=ALICE, token_id=1, block_number=7)]
        pieces.set_balance(ALICE, 1, 1)
        pieces.failing_ranges.add((0, 4))

        summary = await reconciler.run(db, 0, 9, batch_size=5)

        assert summary.batches == 2
        assert summary.failed_batches == 1
        assert holding_repo.pieces_of("base", "1", ALICE) == 1

    async def test_network_label_lowercased(
        self,
        reconciler: PieceHoldingReconciler,
        pieces: FakePieces,
        holding_repo: InMemoryHoldingRepository,
        db: AsyncMock,
        make_event: MakeEvent,
    ) -> None:
        pieces.events = [make_event(to_address=ALICE, token_id=4)]
        await reconciler.run(db, 0, 1)
        assert reconciler.network == "base"
        assert holding_repo.upserts[0][0] == "base"

    @pytest.mark.parametrize(
        "from_block,to_block,batch_size",
        [(10, 5, 100), (-1, 5, 100), (0, 5, 0)],
    )
    async def test_invalid_range(
        self,
        reconciler: PieceHoldingReconciler,
        pieces: FakePieces,
        db: AsyncMock,
        from_block: int,
        to_block: int,
        batch_size: int,
    ) -> None:
        with pytest.raises(InvalidRangeError):
            await reconciler.run(db, from_block, to_block, batch_size=batch_size)
        assert pieces.log_calls == []

    async def test_from_after_latest(
        self, reconciler: PieceHoldingReconciler, chain: FakeChain, db: AsyncMock
    ) -> None:
        chain.latest = 3
        with pytest.raises(InvalidRangeError):
            await reconciler.run(db, 10, LATEST)
