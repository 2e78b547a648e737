"""Medicare-style levy (with shade-in) and the no-private-cover surcharge."""

from collections.abc import Sequence
from decimal import Decimal

from household_tax.calculators.tax_data import LevyRule, SurchargeTier

_ZERO = Decimal("0")


def calculate_levy(income: Decimal, rule: LevyRule) -> Decimal:
    """Calculate the levy on assessable income.

    Nothing is payable up to the exemption threshold. Between the two
    thresholds only the excess over the exemption is levied, at the shade-in
    rate. From the shade-in threshold the full rate applies to all income.
    Both formulas give the same figure at the shade-in threshold itself
    (6,500 x 10% = 32,500 x 2% with 2024-25 rates).

    Args:
        income: Assessable income (taxable income plus franking credits).
        rule: Levy thresholds and rates for the year.

    Returns:
        Levy at full precision.
    """
    if income <= rule.full_exemption_threshold:
        return _ZERO

    if income < rule.shade_in_threshold:
        return (income - rule.full_exemption_threshold) * rule.shade_in_rate

    return income * rule.full_rate


def calculate_surcharge(
    income: Decimal,
    tiers: Sequence[SurchargeTier],
    has_private_cover: bool = True,
) -> Decimal:
    """Calculate the surcharge for people without private hospital cover.

    The rate of the highest tier the income exceeds is charged on the whole
    income, not just the part above the threshold.
    """
    if has_private_cover:
        return _ZERO

    rate = _ZERO
    for tier in tiers:
        if income > tier.threshold:
            rate = tier.rate
    return income * rate
