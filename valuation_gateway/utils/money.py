"""Currency arithmetic helpers"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Coerce int/float/str/Decimal to a Decimal rounded half-up to cents"""
    if isinstance(value, Decimal):
        amount = value
    else:
        # Decimal(0.1) would carry the float's full binary expansion
        amount = Decimal(str(value))
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def sum_money(values: Iterable[Decimal]) -> Decimal:
    """Sum amounts, always returning a cent-quantized Decimal (0.00 for empty input)"""
    return to_money(sum(values, ZERO))
