"""Marketplace fee calculation.

Fee structure (defaults, see FeeSchedule):
  - Creator fee 2.5% of price, deducted from what the creator receives
  - Buyer fee 1.5% of price, added to what the buyer pays
  - Platform keeps both: 4% of price

Invalid prices (non-numeric, NaN, infinite, <= 0) yield an all-zero breakdown
instead of raising. All results are rounded to 8 decimal places, half-up;
intermediate values are never rounded.
"""

from decimal import Decimal

from src.mp_common.amounts import (
    ZERO,
    format_amount,
    parse_amount,
    parse_quantity,
    round_amount,
)
from src.mp_fees.domain.models import (
    DEFAULT_SCHEDULE,
    FeeBreakdown,
    FeeSchedule,
    RefundBasis,
    RefundBreakdown,
)

MIN_TRANSACTION_AMOUNT = Decimal("0.0001")
MAX_TRANSACTION_AMOUNT = Decimal("1000000")
SUPPORTED_CURRENCIES: tuple[str, ...] = ("ETH", "MATIC", "BNB", "ARB", "AVAX", "BASE", "OP")

# zero results keep the 8-place shape of real ones ("0.00000000")
_ZERO = round_amount(ZERO)
_ZERO_BREAKDOWN = FeeBreakdown(
    purchase_price=_ZERO,
    creator_fee=_ZERO,
    buyer_fee=_ZERO,
    total_fees=_ZERO,
    user_payable=_ZERO,
    creator_receives=_ZERO,
    platform_receives=_ZERO,
)


def calculate_fees(
    purchase_price: object, schedule: FeeSchedule = DEFAULT_SCHEDULE
) -> FeeBreakdown:
    """Split *purchase_price* into creator fee, buyer fee and platform take."""
    price = parse_amount(purchase_price)
    if price is None or price <= ZERO:
        return _ZERO_BREAKDOWN

    creator_fee = price * schedule.creator_rate
    buyer_fee = price * schedule.buyer_rate

    return FeeBreakdown(
        purchase_price=round_amount(price),
        creator_fee=round_amount(creator_fee),
        buyer_fee=round_amount(buyer_fee),
        total_fees=round_amount(creator_fee + buyer_fee),
        user_payable=round_amount(price + buyer_fee),
        creator_receives=round_amount(price - creator_fee),
        platform_receives=round_amount(buyer_fee + creator_fee),
    )


def calculate_bulk_fees(
    unit_price: object, quantity: object, schedule: FeeSchedule = DEFAULT_SCHEDULE
) -> FeeBreakdown:
    """Fees on unit_price x quantity, computed on the total (no per-unit rounding)."""
    price = parse_amount(unit_price)
    qty = parse_quantity(quantity)
    if price is None or qty is None:
        return _ZERO_BREAKDOWN
    return calculate_fees(price * qty, schedule)


def calculate_refund(
    refund_amount: object,
    basis: RefundBasis = RefundBasis.LEGACY,
    schedule: FeeSchedule = DEFAULT_SCHEDULE,
) -> RefundBreakdown:
    """Apportion a refund of what the buyer paid back across fee recipients.

    The user is always refunded the full amount. The creator/platform split
    depends on *basis*:

    LEGACY:  creator = amount x creator% / (100 + creator% + buyer%)
             platform = amount x buyer% / (100 + creator% + buyer%)
    FORWARD: price = amount / (1 + buyer rate)
             creator = price x creator rate, platform = amount - price
    """
    amount = parse_amount(refund_amount)
    if amount is None or amount <= ZERO:
        return RefundBreakdown(
            total_refund=_ZERO,
            user_refund=_ZERO,
            creator_fee_refund=_ZERO,
            platform_fee_refund=_ZERO,
            basis=basis,
        )

    if basis is RefundBasis.FORWARD:
        price = amount / (1 + schedule.buyer_rate)
        creator_part = price * schedule.creator_rate
        platform_part = amount - price
    else:
        denominator = Decimal(10000 + schedule.total_fee_bps)
        creator_part = amount * schedule.creator_fee_bps / denominator
        platform_part = amount * schedule.buyer_fee_bps / denominator

    return RefundBreakdown(
        total_refund=round_amount(amount),
        user_refund=round_amount(amount),
        creator_fee_refund=round_amount(creator_part),
        platform_fee_refund=round_amount(platform_part),
        basis=basis,
    )


def get_fee_breakdown(
    purchase_price: object, schedule: FeeSchedule = DEFAULT_SCHEDULE
) -> dict:
    """Display-oriented breakdown with labels and percentages."""
    fees = calculate_fees(purchase_price, schedule)
    return {
        "item_price": fees.purchase_price,
        "creator_fee": {
            "amount": fees.creator_fee,
            "percentage": schedule.creator_percent,
            "label": "Creator Fee",
        },
        "buyer_fee": {
            "amount": fees.buyer_fee,
            "percentage": schedule.buyer_percent,
            "label": "Platform Fee",
        },
        "total": {
            "fees": fees.total_fees,
            "percentage": schedule.total_percent,
        },
        "summary": {
            "user_pays": fees.user_payable,
            "creator_receives": fees.creator_receives,
            "platform_receives": fees.platform_receives,
        },
    }


def get_fee_configuration(schedule: FeeSchedule = DEFAULT_SCHEDULE) -> dict:
    creator_keeps = Decimal(100) - schedule.creator_percent
    return {
        "creator_fee_percent": schedule.creator_percent,
        "buyer_fee_percent": schedule.buyer_percent,
        "total_fee_percent": schedule.total_percent,
        "creator_fee_bps": schedule.creator_fee_bps,
        "buyer_fee_bps": schedule.buyer_fee_bps,
        "min_transaction_amount": MIN_TRANSACTION_AMOUNT,
        "max_transaction_amount": MAX_TRANSACTION_AMOUNT,
        "currencies": list(SUPPORTED_CURRENCIES),
        "description": (
            f"Creator receives {creator_keeps}% of sale price, "
            f"platform retains {schedule.total_percent}%, "
            f"buyer pays {schedule.buyer_percent}% extra"
        ),
    }


def format_fee(amount: object) -> str:
    """Fixed 8-decimal string for display."""
    return format_amount(amount)
