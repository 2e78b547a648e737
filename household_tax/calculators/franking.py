"""Franking credits: gross-up of franked distributions and the tax offset."""

from decimal import Decimal
from typing import NamedTuple

_ZERO = Decimal("0")
_ONE = Decimal("1")


class FrankingOffset(NamedTuple):
    """Result of applying franking credits against tax.

    ``gross_offset`` is always the full credit. Whether ``excess_credits`` is
    refunded is decided downstream, so it is reported rather than dropped.
    """

    gross_offset: Decimal
    net_tax_payable: Decimal
    excess_credits: Decimal


def credit_ratio(company_tax_rate: Decimal) -> Decimal:
    """Credit per dollar of fully franked distribution: rate / (1 - rate).

    30% company tax gives 30/70, about 0.4286.
    """
    if not _ZERO <= company_tax_rate < _ONE:
        raise ValueError(f"Company tax rate must be in [0, 1): {company_tax_rate}")
    return company_tax_rate / (_ONE - company_tax_rate)


def gross_up_credit(
    distribution_amount: Decimal,
    company_tax_rate: Decimal,
    franked_fraction: Decimal = _ONE,
) -> Decimal:
    """Franking credit attached to a cash distribution.

    Args:
        distribution_amount: Cash dividend or distribution received.
        company_tax_rate: Rate the paying company was taxed at.
        franked_fraction: Share of the distribution that is franked (0-1).
    """
    if distribution_amount <= 0:
        return _ZERO
    fraction = min(max(franked_fraction, _ZERO), _ONE)
    return distribution_amount * fraction * credit_ratio(company_tax_rate)


def apply_franking_offset(total_before_offsets: Decimal, franking_credits: Decimal) -> FrankingOffset:
    """Offset franking credits against total tax.

    Net payable floors at zero; any credit left over is reported as excess.
    """
    credits = max(franking_credits, _ZERO)
    return FrankingOffset(
        gross_offset=credits,
        net_tax_payable=max(_ZERO, total_before_offsets - credits),
        excess_credits=max(_ZERO, credits - total_before_offsets),
    )
