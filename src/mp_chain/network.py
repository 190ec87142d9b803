"""Network label resolution for stored holdings.

The label is configuration (`--network` / CHAIN_NETWORK). Deriving it from the
RPC URL is a fallback only and logs a warning when nothing matches.
"""

import logging
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

UNKNOWN_NETWORK = "unknown"

# substring of host + path -> label; first match wins, so more specific entries go
# first. Path-routed providers (rpc.ankr.com/base) match on the path.
_KNOWN_RPC_HOSTS: tuple[tuple[str, str], ...] = (
    ("base-sepolia", "base-sepolia"),
    ("base_sepolia", "base-sepolia"),
    ("sepolia.base.org", "base-sepolia"),
    ("base", "base"),
    ("polygon", "polygon"),
    ("arbitrum", "arbitrum"),
    ("optimism", "optimism"),
    ("bsc", "bsc"),
    ("binance", "bsc"),
    ("avax", "avalanche"),
    ("avalanche", "avalanche"),
    ("eth-mainnet", "ethereum"),
    ("mainnet.infura.io", "ethereum"),
)


def network_from_rpc_url(rpc_url: str) -> str:
    parsed = urlparse(rpc_url)
    target = f"{parsed.hostname or rpc_url}{parsed.path}".lower()
    for needle, label in _KNOWN_RPC_HOSTS:
        if needle in target:
            return label
    return UNKNOWN_NETWORK


def resolve_network(configured: str | None, rpc_url: str) -> str:
    """Return the configured label (lower-cased) or fall back to the RPC host."""
    if configured and configured.strip():
        return configured.strip().lower()
    label = network_from_rpc_url(rpc_url)
    if label == UNKNOWN_NETWORK:
        logger.warning(
            "No network configured and RPC host of %s is not recognised; "
            "holdings will be stored under network=%r. Pass --network to fix.",
            rpc_url,
            UNKNOWN_NETWORK,
        )
    else:
        logger.info("No network configured; derived %r from RPC URL", label)
    return label
