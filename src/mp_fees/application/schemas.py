"""Pydantic schemas for the fees API.

Amounts are Decimal and serialise as fixed 8-place strings ("2.50000000") so
clients never see binary float artefacts. Percentages are plain floats.
"""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, PlainSerializer

from src.mp_common.amounts import format_amount
from src.mp_fees.domain.models import FeeBreakdown, RefundBasis, RefundBreakdown

# str(Decimal) would emit "0E-8" for a quantized zero
Amount = Annotated[Decimal, PlainSerializer(format_amount, return_type=str, when_used="json")]


class FeeQuoteResponse(BaseModel):
    purchase_price: Amount
    quantity: int
    creator_fee: Amount
    buyer_fee: Amount
    total_fees: Amount
    user_payable: Amount
    creator_receives: Amount
    platform_receives: Amount

    @classmethod
    def from_breakdown(cls, fees: FeeBreakdown, quantity: int = 1) -> "FeeQuoteResponse":
        return cls(
            purchase_price=fees.purchase_price,
            quantity=quantity,
            creator_fee=fees.creator_fee,
            buyer_fee=fees.buyer_fee,
            total_fees=fees.total_fees,
            user_payable=fees.user_payable,
            creator_receives=fees.creator_receives,
            platform_receives=fees.platform_receives,
        )


class RefundResponse(BaseModel):
    basis: RefundBasis
    total_refund: Amount
    user_refund: Amount
    creator_fee_refund: Amount
    platform_fee_refund: Amount

    @classmethod
    def from_breakdown(cls, refund: RefundBreakdown) -> "RefundResponse":
        return cls(
            basis=refund.basis,
            total_refund=refund.total_refund,
            user_refund=refund.user_refund,
            creator_fee_refund=refund.creator_fee_refund,
            platform_fee_refund=refund.platform_fee_refund,
        )


class FeeLine(BaseModel):
    amount: Amount
    percentage: float
    label: str


class FeeTotal(BaseModel):
    fees: Amount
    percentage: float


class FeeSummary(BaseModel):
    user_pays: Amount
    creator_receives: Amount
    platform_receives: Amount


class FeeBreakdownResponse(BaseModel):
    item_price: Amount
    creator_fee: FeeLine
    buyer_fee: FeeLine
    total: FeeTotal
    summary: FeeSummary


class FeeConfigResponse(BaseModel):
    creator_fee_percent: float
    buyer_fee_percent: float
    total_fee_percent: float
    creator_fee_bps: int
    buyer_fee_bps: int
    min_transaction_amount: Amount
    max_transaction_amount: Amount
    currencies: list[str]
    description: str
