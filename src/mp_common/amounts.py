"""Decimal helpers for token-denominated amounts.

Prices arrive as user input (strings or numbers) in ETH-like units and are
carried as Decimal; results are quantized to 8 places, half-up.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

AMOUNT_PLACES = 8
_QUANTUM = Decimal(1).scaleb(-AMOUNT_PLACES)  # 0.00000001

ZERO = Decimal(0)


def parse_amount(value: object) -> Decimal | None:
    """Parse a number or numeric string into a finite Decimal.

    Returns None for anything that is not a finite number (None, "abc", "NaN",
    "Infinity", booleans). Floats go through str() so 0.1 stays 0.1.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, (int, float)):
        parsed = Decimal(str(value))
    elif isinstance(value, str):
        try:
            parsed = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None
    if not parsed.is_finite():
        return None
    return parsed


def parse_quantity(value: object) -> int | None:
    """Parse a whole-number quantity. Returns None if not an integer."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    parsed = parse_amount(value)
    if parsed is None or parsed != parsed.to_integral_value():
        return None
    return int(parsed)


def round_amount(value: Decimal) -> Decimal:
    """Round to 8 decimal places, half-up."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + AMOUNT_PLACES + 2)
        return value.quantize(_QUANTUM, rounding=ROUND_HALF_UP)


def format_amount(value: object) -> str:
    """Fixed 8-decimal display string: 1.5 -> '1.50000000'. Invalid -> '0.00000000'."""
    parsed = parse_amount(value)
    if parsed is None:
        parsed = ZERO
    return f"{round_amount(parsed):.{AMOUNT_PLACES}f}"


def bps_to_rate(bps: int) -> Decimal:
    """Basis points to a decimal rate: 250 -> Decimal('0.025')."""
    return Decimal(bps) / Decimal(10000)


def bps_to_percent(bps: int) -> Decimal:
    """Basis points to a percentage: 250 -> Decimal('2.5')."""
    return (Decimal(bps) / Decimal(100)).normalize()
