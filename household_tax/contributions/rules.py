"""Superannuation rules around contributions: SG, Division 293, LISTO, bring-forward."""

from decimal import Decimal
from typing import NamedTuple

from household_tax.calculators.tax_data import RateTable

_ZERO = Decimal("0")

DIVISION_293_THRESHOLD = Decimal("250000")
DIVISION_293_RATE = Decimal("0.15")

LISTO_INCOME_THRESHOLD = Decimal("37000")
LISTO_RATE = Decimal("0.15")
LISTO_MAX_OFFSET = Decimal("500")

# Total super balance at or above which the bring-forward period shrinks,
# highest first: (balance, years of non-concessional cap available)
TSB_THRESHOLD = Decimal("1900000")
_BRING_FORWARD_BANDS: tuple[tuple[Decimal, int], ...] = (
    (TSB_THRESHOLD, 1),
    (Decimal("1680000"), 2),
)
_FULL_BRING_FORWARD_YEARS = 3


class Division293(NamedTuple):
    applies: bool
    taxable_amount: Decimal
    tax: Decimal


class BringForward(NamedTuple):
    available: bool
    years_available: int
    max_amount: Decimal


def expected_employer_super(annual_salary: Decimal, rates: RateTable) -> Decimal:
    """Super guarantee the employer should pay on ordinary time earnings."""
    return max(annual_salary, _ZERO) * rates.super_guarantee_rate


def check_division_293(taxable_income: Decimal, concessional_contributions: Decimal) -> Division293:
    """Extra 15% on concessional contributions for high earners.

    The taxed amount is the lesser of the excess of income plus contributions
    over the threshold and the contributions themselves.
    """
    combined = taxable_income + concessional_contributions
    if combined <= DIVISION_293_THRESHOLD:
        return Division293(False, _ZERO, _ZERO)

    taxable_amount = min(combined - DIVISION_293_THRESHOLD, concessional_contributions)
    return Division293(True, taxable_amount, taxable_amount * DIVISION_293_RATE)


def calculate_listo(taxable_income: Decimal, concessional_contributions: Decimal) -> Decimal:
    """Low income super tax offset: 15% of concessional contributions, up to $500."""
    if taxable_income > LISTO_INCOME_THRESHOLD:
        return _ZERO
    return min(max(concessional_contributions, _ZERO) * LISTO_RATE, LISTO_MAX_OFFSET)


def bring_forward_availability(total_super_balance: Decimal, non_concessional_cap: Decimal) -> BringForward:
    """How many years of non-concessional cap can be brought forward."""
    years = _FULL_BRING_FORWARD_YEARS
    for threshold, band_years in _BRING_FORWARD_BANDS:
        if total_super_balance >= threshold:
            years = band_years
            break

    if years <= 1:
        return BringForward(False, 0, non_concessional_cap)
    return BringForward(True, years, non_concessional_cap * years)
