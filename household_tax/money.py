"""Rounding applied when results are presented."""

from decimal import ROUND_HALF_UP, Decimal

_CENT = Decimal("0.01")
_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def round_money(amount: Decimal) -> Decimal:
    """Round to 2 decimal places for currency."""
    return amount.quantize(_CENT, rounding=ROUND_HALF_UP)


def percentage(part: Decimal, whole: Decimal) -> Decimal:
    """``part`` as a percentage of ``whole``, clamped to [0, 100] and rounded.

    A zero or negative ``whole`` gives 0 rather than dividing by it.
    """
    if whole <= 0:
        return round_money(_ZERO)
    value = part / whole * _HUNDRED
    return round_money(min(_HUNDRED, max(_ZERO, value)))
