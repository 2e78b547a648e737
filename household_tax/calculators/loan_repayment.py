"""Study loan (HELP) compulsory repayment calculator."""

from collections.abc import Sequence
from decimal import Decimal

from household_tax.calculators.tax_data import RepaymentTier

_ZERO = Decimal("0")


def find_repayment_tier(repayment_income: Decimal, tiers: Sequence[RepaymentTier]) -> RepaymentTier:
    """Return the tier containing ``repayment_income`` (first tier whose max covers it)."""
    for tier in tiers:
        if tier.max is None or repayment_income <= tier.max:
            return tier
    return tiers[-1]


def calculate_loan_repayment(
    repayment_income: Decimal,
    has_loan_debt: bool,
    tiers: Sequence[RepaymentTier],
) -> Decimal:
    """Calculate the annual compulsory repayment.

    Unlike income tax this is not marginal: the tier's rate applies to the
    whole repayment income. $60,000 in 2024-25 falls in the 1% tier and
    repays $600.

    Args:
        repayment_income: Assessable income used as the repayment base.
        has_loan_debt: Whether the person has an outstanding loan.
        tiers: Contiguous tier table, ascending.

    Returns:
        Repayment at full precision; zero without a debt.
    """
    if not has_loan_debt:
        return _ZERO

    if repayment_income <= 0:
        return _ZERO

    return repayment_income * find_repayment_tier(repayment_income, tiers).rate
