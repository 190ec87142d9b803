"""Chain reader Protocols.

Reconcilers and auditors receive a ChainReader; unit tests inject fakes that
conform to these Protocols, `ChainClient` is the web3-backed implementation.
"""

from typing import Protocol

from src.mp_chain.models import TransferSingleEvent


class PiecesReader(Protocol):
    @property
    def address(self) -> str: ...

    async def balance_of(self, wallet: str, token_id: int) -> int: ...

    async def transfer_events(
        self, from_block: int, to_block: int
    ) -> list[TransferSingleEvent]: ...


class ChainReader(Protocol):
    async def latest_block(self) -> int: ...

    async def has_code(self, address: str) -> bool: ...

    def pieces(self, address: str) -> PiecesReader: ...
