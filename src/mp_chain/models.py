"""Chain-side value objects: pure dataclasses, no web3 dependency."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TransferSingleEvent:
    operator: str
    from_address: str   # lower-cased
    to_address: str     # lower-cased
    token_id: int
    value: int
    block_number: int
    tx_hash: str
