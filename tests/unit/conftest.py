"""Shared unit fixtures. The doubles themselves live in tests/unit/fakes.py."""

from unittest.mock import AsyncMock

import pytest

from src.mp_chain.abi import ZERO_ADDRESS
from src.mp_chain.models import TransferSingleEvent
from tests.unit.fakes import FakeChain, InMemoryHoldingRepository, MakeEvent

ALICE = "0x" + "a1" * 20


@pytest.fixture
def chain() -> FakeChain:
    return FakeChain()


@pytest.fixture
def holding_repo() -> InMemoryHoldingRepository:
    return InMemoryHoldingRepository()


@pytest.fixture
def db() -> AsyncMock:
    """Session stand-in: the code under test only awaits execute/commit on it."""
    return AsyncMock()


@pytest.fixture
def make_event() -> MakeEvent:
    def _make(
        from_address: str = ZERO_ADDRESS,
        to_address: str = ALICE,
        token_id: int = 1,
        value: int = 1,
        block_number: int = 1,
    ) -> TransferSingleEvent:
        return TransferSingleEvent(
            operator=from_address.lower(),
            from_address=from_address.lower(),
            to_address=to_address.lower(),
            token_id=token_id,
            value=value,
            block_number=block_number,
            tx_hash="0x" + f"{block_number:064x}",
        )

    return _make
