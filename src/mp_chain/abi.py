"""Minimal ERC-1155 ABI fragments used by the piece ledger."""

from web3 import Web3

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

TRANSFER_SINGLE_SIGNATURE = "TransferSingle(address,address,address,uint256,uint256)"
TRANSFER_SINGLE_TOPIC = Web3.to_hex(Web3.keccak(text=TRANSFER_SINGLE_SIGNATURE))

ERC1155_PIECES_ABI: list[dict] = [
    {
        "anonymous": False,
        "inputs": [
            {"indexed": True, "name": "operator", "type": "address"},
            {"indexed": True, "name": "from", "type": "address"},
            {"indexed": True, "name": "to", "type": "address"},
            {"indexed": False, "name": "id", "type": "uint256"},
            {"indexed": False, "name": "value", "type": "uint256"},
        ],
        "name": "TransferSingle",
        "type": "event",
    },
    {
        "inputs": [
            {"name": "account", "type": "address"},
            {"name": "id", "type": "uint256"},
        ],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]
