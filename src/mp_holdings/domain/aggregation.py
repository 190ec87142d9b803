"""Net transfer aggregation over TransferSingle events.

The deltas only identify which (wallet, token) pairs moved in a block range;
stored balances always come from a fresh balanceOf read, never from the sum.
The zero address marks a mint (from) or burn (to) and is never a holder.
"""

from collections.abc import Iterable

from src.mp_chain.abi import ZERO_ADDRESS
from src.mp_chain.models import TransferSingleEvent
from src.mp_holdings.domain.models import HoldingKey


def aggregate_transfer_deltas(
    events: Iterable[TransferSingleEvent],
) -> dict[HoldingKey, int]:
    deltas: dict[HoldingKey, int] = {}
    for ev in events:
        sender = ev.from_address.lower()
        receiver = ev.to_address.lower()
        if sender and sender != ZERO_ADDRESS:
            key = HoldingKey(sender, ev.token_id)
            deltas[key] = deltas.get(key, 0) - ev.value
        if receiver and receiver != ZERO_ADDRESS:
            key = HoldingKey(receiver, ev.token_id)
            deltas[key] = deltas.get(key, 0) + ev.value
    return deltas


def events_for_wallet(
    events: Iterable[TransferSingleEvent], wallet: str, token_id: int
) -> list[TransferSingleEvent]:
    """Events moving *token_id* into or out of *wallet*, in input order."""
    target = wallet.lower()
    return [
        ev
        for ev in events
        if ev.token_id == token_id and target in (ev.from_address.lower(), ev.to_address.lower())
    ]
