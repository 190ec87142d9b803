"""Fee application service: binds the configured FeeSchedule to the domain functions."""

from config.settings import settings
from src.mp_fees.application.schemas import (
    FeeBreakdownResponse,
    FeeConfigResponse,
    FeeQuoteResponse,
    RefundResponse,
)
from src.mp_fees.domain.fee import (
    calculate_bulk_fees,
    calculate_refund,
    get_fee_breakdown,
    get_fee_configuration,
)
from src.mp_fees.domain.models import FeeSchedule, RefundBasis


def schedule_from_settings() -> FeeSchedule:
    return FeeSchedule(
        creator_fee_bps=settings.CREATOR_FEE_BPS,
        buyer_fee_bps=settings.BUYER_FEE_BPS,
    )


class FeeApplicationService:
    def __init__(self, schedule: FeeSchedule | None = None) -> None:
        self._schedule = schedule or schedule_from_settings()

    @property
    def schedule(self) -> FeeSchedule:
        return self._schedule

    def quote(self, price: str, quantity: int = 1) -> FeeQuoteResponse:
        fees = calculate_bulk_fees(price, quantity, self._schedule)
        return FeeQuoteResponse.from_breakdown(fees, quantity)

    def breakdown(self, price: str) -> FeeBreakdownResponse:
        return FeeBreakdownResponse.model_validate(get_fee_breakdown(price, self._schedule))

    def refund(self, amount: str, basis: RefundBasis = RefundBasis.LEGACY) -> RefundResponse:
        return RefundResponse.from_breakdown(calculate_refund(amount, basis, self._schedule))

    def configuration(self) -> FeeConfigResponse:
        return FeeConfigResponse.model_validate(get_fee_configuration(self._schedule))
