"""web3.py-backed chain reader.

Read-only: `eth_blockNumber`, `eth_getCode`, `eth_getLogs` and `eth_call`
(balanceOf). No retry or backoff; a failed call surfaces as ChainReadError and
the caller decides whether it is fatal.
"""

import logging
from typing import Any

from eth_abi.exceptions import DecodingError
from web3 import AsyncWeb3, Web3
from web3.exceptions import Web3Exception

from src.mp_chain.abi import ERC1155_PIECES_ABI, TRANSFER_SINGLE_TOPIC
from src.mp_chain.models import TransferSingleEvent
from src.mp_common.errors import ChainReadError, InvalidWalletAddressError

logger = logging.getLogger(__name__)


def to_checksum(address: str) -> str:
    """Checksum an address, raising InvalidWalletAddressError on garbage."""
    if not isinstance(address, str) or not Web3.is_address(address):
        raise InvalidWalletAddressError(str(address))
    return Web3.to_checksum_address(address)


class PiecesContract:
    """ERC-1155 pieces contract bound to one address."""

    def __init__(self, w3: AsyncWeb3, address: str) -> None:
        self._w3 = w3
        self._address = to_checksum(address)
        self._contract = w3.eth.contract(address=self._address, abi=ERC1155_PIECES_ABI)

    @property
    def address(self) -> str:
        return self._address

    async def balance_of(self, wallet: str, token_id: int) -> int:
        account = to_checksum(wallet)
        try:
            raw = await self._contract.functions.balanceOf(account, int(token_id)).call()
        except Exception as exc:
            raise ChainReadError(
                f"balanceOf({account}, {token_id}) on {self._address}", str(exc)
            ) from exc
        return int(raw)

    async def transfer_events(
        self, from_block: int, to_block: int
    ) -> list[TransferSingleEvent]:
        try:
            logs = await self._w3.eth.get_logs(
                {
                    "address": self._address,
                    "fromBlock": from_block,
                    "toBlock": to_block,
                    "topics": [TRANSFER_SINGLE_TOPIC],
                }
            )
        except Exception as exc:
            raise ChainReadError(
                f"eth_getLogs({from_block}..{to_block}) on {self._address}", str(exc)
            ) from exc

        events: list[TransferSingleEvent] = []
        for log in logs:
            event = self._decode(log)
            if event is not None:
                events.append(event)
        return events

    def _decode(self, log: Any) -> TransferSingleEvent | None:
        try:
            decoded = self._contract.events.TransferSingle().process_log(log)
        except (Web3Exception, DecodingError) as exc:
            logger.debug("Skipping undecodable log %s: %s", log.get("transactionHash"), exc)
            return None
        args = decoded["args"]
        return TransferSingleEvent(
            operator=str(args["operator"]).lower(),
            from_address=str(args["from"]).lower(),
            to_address=str(args["to"]).lower(),
            token_id=int(args["id"]),
            value=int(args["value"]),
            block_number=int(decoded["blockNumber"]),
            tx_hash=Web3.to_hex(decoded["transactionHash"]),
        )


class ChainClient:
    """Async JSON-RPC client for one network."""

    def __init__(self, rpc_url: str, w3: AsyncWeb3 | None = None) -> None:
        self.rpc_url = rpc_url
        self._w3 = w3 or AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))

    async def latest_block(self) -> int:
        try:
            return int(await self._w3.eth.block_number)
        except Exception as exc:
            raise ChainReadError("eth_blockNumber", str(exc)) from exc

    async def has_code(self, address: str) -> bool:
        checksummed = to_checksum(address)
        try:
            code = await self._w3.eth.get_code(checksummed)
        except Exception as exc:
            raise ChainReadError(f"eth_getCode({checksummed})", str(exc)) from exc
        return len(code) > 0

    def pieces(self, address: str) -> PiecesContract:
        return PiecesContract(self._w3, address)
