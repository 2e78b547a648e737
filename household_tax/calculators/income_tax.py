"""Income tax calculator: marginal brackets with an accumulated base."""

from collections.abc import Sequence
from decimal import Decimal

from household_tax.calculators.tax_data import TaxBracket

_ZERO = Decimal("0")


def find_bracket(income: Decimal, brackets: Sequence[TaxBracket]) -> TaxBracket:
    """Return the bracket ``income`` falls in.

    The first bracket whose ``max`` is at or above the income wins, so
    income between ``max`` and the next ``min`` (e.g. 18200.50) is taxed by
    the upper bracket and the table has no gaps.
    """
    for bracket in brackets:
        if bracket.max is None or income <= bracket.max:
            return bracket
    return brackets[-1]


def calculate_income_tax(taxable_income: Decimal, brackets: Sequence[TaxBracket]) -> Decimal:
    """Calculate income tax on taxable income (no levies or offsets).

    ``min`` is the first dollar taxed at the bracket's rate, so the amount in
    the bracket is ``income - min + 1``. With 2024-25 rates $45,000 is taxed
    at 16% (4,288.00) and $45,001 adds the first 30c of the next bracket.

    Args:
        taxable_income: Taxable income; zero or less means no tax.
        brackets: Contiguous bracket table, ascending.

    Returns:
        Tax at full precision, never negative.
    """
    if taxable_income <= 0:
        return _ZERO

    bracket = find_bracket(taxable_income, brackets)
    return bracket.base + (taxable_income - bracket.min + 1) * bracket.rate


def marginal_rate(taxable_income: Decimal, brackets: Sequence[TaxBracket]) -> Decimal:
    """Rate applied to the next dollar at this income."""
    return find_bracket(max(taxable_income, _ZERO), brackets).rate


def _dollars(amount: Decimal) -> str:
    return f"${amount:,.0f}"


def bracket_label(taxable_income: Decimal, brackets: Sequence[TaxBracket]) -> str:
    """Human-readable bracket, e.g. ``$18,201 - $45,000 (16%)``."""
    bracket = find_bracket(max(taxable_income, _ZERO), brackets)
    rate = f"{(bracket.rate * 100).normalize():f}%"
    if bracket.max is None:
        return f"{_dollars(bracket.min)}+ ({rate})"
    return f"{_dollars(bracket.min)} - {_dollars(bracket.max)} ({rate})"
