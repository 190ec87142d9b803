"""Domain models for mp_catalog: read-only view of listed NFTs."""

from dataclasses import dataclass


@dataclass(frozen=True)
class LiquidityRef:
    """Pointer from an NFT to the ERC-1155 contract/token acting as its piece reserve."""

    item_id: str                 # nfts.item_id or lazy_nfts.id
    network: str
    liquidity_contract: str
    liquidity_piece_id: int
    price: str | None = None
    last_price: str | None = None
    lazy: bool = False

    @property
    def reserve_key(self) -> tuple[str, int]:
        return (self.liquidity_contract.lower(), self.liquidity_piece_id)

    @property
    def display_price(self) -> str:
        return self.last_price or self.price or "0"
