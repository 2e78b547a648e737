"""Tax aggregator: turns one person's records into a full tax position.

Composes the bracket, levy, surcharge, loan repayment and franking
calculators. Income tax, levy, surcharge and repayment are all worked out
on assessable income (taxable income plus franking credits); the credits
are then offset against the total.
"""

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import NamedTuple

from household_tax.calculators.franking import apply_franking_offset
from household_tax.calculators.income_tax import bracket_label, calculate_income_tax, marginal_rate
from household_tax.calculators.levy import calculate_levy, calculate_surcharge
from household_tax.calculators.loan_repayment import calculate_loan_repayment
from household_tax.calculators.tax_data import RateTable
from household_tax.models import (
    DeductionBreakdown,
    DeductionCategory,
    DeductionRecord,
    HouseholdTaxSummary,
    IncomeBreakdown,
    IncomeRecord,
    IncomeType,
    TaxCalculationResult,
    TaxSummary,
)
from household_tax.money import percentage, round_money

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")

# Income types folded into each breakdown line; anything unlisted is "other"
_BREAKDOWN_FIELD: dict[IncomeType, str] = {
    IncomeType.SALARY: "salary",
    IncomeType.BONUS: "salary",
    IncomeType.DIVIDEND: "dividends",
    IncomeType.TRUST_DISTRIBUTION: "trust_distributions",
    IncomeType.RENTAL: "rental",
    IncomeType.CAPITAL_GAIN: "capital_gains",
}


class IncomeTotals(NamedTuple):
    """Full-precision income sums for one person and year."""

    by_field: dict[str, Decimal]
    total: Decimal
    franking_credits: Decimal
    tax_withheld: Decimal


class TaxComponents(NamedTuple):
    """Full-precision intermediate figures; rounded only when presented."""

    gross_income: Decimal
    taxable_income: Decimal
    assessable_income: Decimal
    income_tax: Decimal
    levy: Decimal
    surcharge: Decimal
    repayment: Decimal
    total_before_offsets: Decimal
    franking_offset: Decimal
    excess_franking_credits: Decimal
    net_tax_payable: Decimal


def summarise_income(records: Iterable[IncomeRecord]) -> IncomeTotals:
    """Sum taxable income by breakdown line, plus franking credits and withholding.

    Non-taxable records are skipped entirely, including any credits or
    withholding attached to them.
    """
    by_field = {name: _ZERO for name in IncomeBreakdown.model_fields if name != "total"}
    franking = _ZERO
    withheld = _ZERO

    for record in records:
        if not record.is_taxable:
            continue
        name = _BREAKDOWN_FIELD.get(record.income_type, "other")
        by_field[name] += record.amount
        franking += record.franking_credits
        withheld += record.tax_withheld

    return IncomeTotals(
        by_field=by_field,
        total=sum(by_field.values(), _ZERO),
        franking_credits=franking,
        tax_withheld=withheld,
    )


def summarise_deductions(records: Iterable[DeductionRecord]) -> dict[DeductionCategory, Decimal]:
    """Sum deductions per category; every category is present."""
    by_category = {category: _ZERO for category in DeductionCategory}
    for record in records:
        by_category[record.category] += record.amount
    return by_category


def compute_tax_components(
    gross_income: Decimal,
    deductions: Decimal,
    franking_credits: Decimal,
    rates: RateTable,
    has_loan_debt: bool = False,
    has_private_cover: bool = True,
) -> TaxComponents:
    """Work out every tax component at full precision."""
    taxable = max(_ZERO, gross_income - deductions)
    assessable = taxable + max(_ZERO, franking_credits)

    income_tax = calculate_income_tax(assessable, rates.brackets)
    levy = calculate_levy(assessable, rates.levy)
    surcharge = calculate_surcharge(assessable, rates.surcharge, has_private_cover)
    repayment = calculate_loan_repayment(assessable, has_loan_debt, rates.repayment_tiers)

    total = income_tax + levy + surcharge + repayment
    offset = apply_franking_offset(total, franking_credits)

    return TaxComponents(
        gross_income=gross_income,
        taxable_income=taxable,
        assessable_income=assessable,
        income_tax=income_tax,
        levy=levy,
        surcharge=surcharge,
        repayment=repayment,
        total_before_offsets=total,
        franking_offset=offset.gross_offset,
        excess_franking_credits=offset.excess_credits,
        net_tax_payable=offset.net_tax_payable,
    )


def present_tax(components: TaxComponents, rates: RateTable) -> TaxCalculationResult:
    """Round full-precision components into a result."""
    c = components
    return TaxCalculationResult(
        gross_income=round_money(c.gross_income),
        taxable_income=round_money(c.taxable_income),
        assessable_income=round_money(c.assessable_income),
        income_tax=round_money(c.income_tax),
        levy=round_money(c.levy),
        surcharge=round_money(c.surcharge),
        repayment=round_money(c.repayment),
        total_before_offsets=round_money(c.total_before_offsets),
        franking_offset=round_money(c.franking_offset),
        excess_franking_credits=round_money(c.excess_franking_credits),
        net_tax_payable=round_money(c.net_tax_payable),
        effective_rate=percentage(c.net_tax_payable, c.gross_income),
        marginal_rate=round_money(marginal_rate(c.assessable_income, rates.brackets) * _HUNDRED),
        bracket_label=bracket_label(c.assessable_income, rates.brackets),
    )


def calculate_tax(
    gross_income: Decimal,
    deductions: Decimal,
    franking_credits: Decimal,
    rates: RateTable,
    has_loan_debt: bool = False,
    has_private_cover: bool = True,
) -> TaxCalculationResult:
    """Calculate the complete tax breakdown from annual totals.

    Args:
        gross_income: Total taxable income before deductions.
        deductions: Total deductions claimed.
        franking_credits: Franking credits attached to the income.
        rates: Rate table for the financial year.
        has_loan_debt: Whether a study loan repayment is due.
        has_private_cover: Whether the surcharge is avoided by private cover.

    Returns:
        TaxCalculationResult rounded to cents.
    """
    components = compute_tax_components(
        gross_income, deductions, franking_credits, rates, has_loan_debt, has_private_cover
    )
    return present_tax(components, rates)


def build_tax_summary(
    person: str,
    financial_year: str,
    income_records: Iterable[IncomeRecord],
    deduction_records: Iterable[DeductionRecord],
    rates: RateTable,
    has_loan_debt: bool = False,
    has_private_cover: bool = True,
) -> TaxSummary:
    """Aggregate one person's records for a year into a TaxSummary.

    Records belonging to other people or years are ignored. No records at
    all produces an all-zero summary.
    """
    income = summarise_income(
        r for r in income_records if r.person == person and r.financial_year == financial_year
    )
    deductions = summarise_deductions(
        r for r in deduction_records if r.person == person and r.financial_year == financial_year
    )
    total_deductions = sum(deductions.values(), _ZERO)

    components = compute_tax_components(
        income.total,
        total_deductions,
        income.franking_credits,
        rates,
        has_loan_debt,
        has_private_cover,
    )
    refund_or_owing = components.net_tax_payable - income.tax_withheld

    notes: list[str] = []
    if rates.is_fallback:
        notes.append(f"No {financial_year} rates on file; calculated with {rates.source_year} rates.")

    logger.debug(
        "Tax for %s %s: taxable=%s net=%s",
        person,
        financial_year,
        components.taxable_income,
        components.net_tax_payable,
    )

    return TaxSummary(
        person=person,
        financial_year=financial_year,
        rate_year=rates.source_year,
        income=IncomeBreakdown(
            **{name: round_money(value) for name, value in income.by_field.items()},
            total=round_money(income.total),
        ),
        deductions=DeductionBreakdown(
            by_category={category: round_money(value) for category, value in deductions.items()},
            total=round_money(total_deductions),
        ),
        franking_credits=round_money(income.franking_credits),
        tax_withheld=round_money(income.tax_withheld),
        estimated_tax=present_tax(components, rates),
        estimated_refund_or_owing=round_money(refund_or_owing),
        notes=notes,
    )


def build_household_summary(financial_year: str, summaries: Mapping[str, TaxSummary]) -> HouseholdTaxSummary:
    """Combine per-person summaries; any number of people."""
    return HouseholdTaxSummary(
        financial_year=financial_year,
        members=dict(summaries),
        combined_tax=sum((s.estimated_tax.net_tax_payable for s in summaries.values()), _ZERO),
        combined_refund_or_owing=sum((s.estimated_refund_or_owing for s in summaries.values()), _ZERO),
    )
