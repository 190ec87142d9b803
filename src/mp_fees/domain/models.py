"""Domain models for mp_fees: frozen dataclasses, never persisted."""

from dataclasses import dataclass, fields
from decimal import Decimal
from enum import Enum

from src.mp_common.amounts import ZERO, bps_to_percent, bps_to_rate


@dataclass(frozen=True)
class FeeSchedule:
    creator_fee_bps: int = 250   # 2.5%, deducted from the creator's proceeds
    buyer_fee_bps: int = 150     # 1.5%, added on top of the buyer's payment

    @property
    def creator_rate(self) -> Decimal:
        return bps_to_rate(self.creator_fee_bps)

    @property
    def buyer_rate(self) -> Decimal:
        return bps_to_rate(self.buyer_fee_bps)

    @property
    def total_fee_bps(self) -> int:
        return self.creator_fee_bps + self.buyer_fee_bps

    @property
    def creator_percent(self) -> Decimal:
        return bps_to_percent(self.creator_fee_bps)

    @property
    def buyer_percent(self) -> Decimal:
        return bps_to_percent(self.buyer_fee_bps)

    @property
    def total_percent(self) -> Decimal:
        return bps_to_percent(self.total_fee_bps)


DEFAULT_SCHEDULE = FeeSchedule()


@dataclass(frozen=True)
class FeeBreakdown:
    purchase_price: Decimal = ZERO
    creator_fee: Decimal = ZERO
    buyer_fee: Decimal = ZERO
    total_fees: Decimal = ZERO
    user_payable: Decimal = ZERO
    creator_receives: Decimal = ZERO
    platform_receives: Decimal = ZERO

    @property
    def is_zero(self) -> bool:
        return all(getattr(self, f.name) == ZERO for f in fields(self))


class RefundBasis(str, Enum):
    """How a refunded amount is apportioned back to fee recipients.

    LEGACY divides by (100 + creator% + buyer%), i.e. 104 with default rates,
    which treats both fees as if they were added on top of the price.
    FORWARD inverts the purchase calculation: the amount is price + buyer fee.
    """

    LEGACY = "LEGACY"
    FORWARD = "FORWARD"


@dataclass(frozen=True)
class RefundBreakdown:
    total_refund: Decimal = ZERO
    user_refund: Decimal = ZERO
    creator_fee_refund: Decimal = ZERO
    platform_fee_refund: Decimal = ZERO
    basis: RefundBasis = RefundBasis.LEGACY
