"""Trust distribution modelling across beneficiaries."""

import logging
from collections.abc import Mapping, Sequence
from decimal import Decimal

from pydantic import BaseModel

from household_tax.calculators.aggregator import compute_tax_components
from household_tax.calculators.franking import gross_up_credit
from household_tax.calculators.tax_data import RateTable
from household_tax.money import round_money

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


class BeneficiaryShare(BaseModel):
    percentage: Decimal
    amount: Decimal
    franking_credits: Decimal
    tax_estimate: Decimal


class DistributionScenario(BaseModel):
    shares: dict[str, BeneficiaryShare]
    total_tax: Decimal


def model_distribution(
    distributable_amount: Decimal,
    other_income: Mapping[str, Decimal],
    scenarios: Sequence[Mapping[str, Decimal]],
    rates: RateTable,
    company_tax_rate: Decimal,
    franking_credits: Decimal | None = None,
) -> list[DistributionScenario]:
    """Estimate each beneficiary's tax under several distribution splits.

    Franking credits follow the income proportionally. When
    ``franking_credits`` is None the distribution is treated as fully
    franked and grossed up at ``company_tax_rate``. Each beneficiary's
    estimate is net tax payable (income tax and levy less the credits, floored
    at zero) on their other income plus their share and its credits.

    Args:
        distributable_amount: Net trust income available to distribute.
        other_income: Each beneficiary's income from other sources.
        scenarios: Percentage split per beneficiary for each scenario.
        rates: Rate table for the year.
        company_tax_rate: Rate used to gross up unfranked amounts.
        franking_credits: Credits available to stream, if known.

    Raises:
        ValueError: if a split has a negative share, totals over 100%, or
            names someone without an ``other_income`` entry.
    """
    if franking_credits is None:
        franking_credits = gross_up_credit(distributable_amount, company_tax_rate)

    results: list[DistributionScenario] = []
    for split in scenarios:
        if any(pct < 0 for pct in split.values()) or sum(split.values(), _ZERO) > _HUNDRED:
            raise ValueError(f"Invalid distribution split: {dict(split)}")
        unknown = set(split) - set(other_income)
        if unknown:
            raise ValueError(f"No other-income figure for: {', '.join(sorted(unknown))}")

        shares: dict[str, BeneficiaryShare] = {}
        total_tax = _ZERO
        for name, pct in split.items():
            amount = distributable_amount * pct / _HUNDRED
            credits = franking_credits * pct / _HUNDRED
            components = compute_tax_components(other_income[name] + amount, _ZERO, credits, rates)
            total_tax += components.net_tax_payable
            shares[name] = BeneficiaryShare(
                percentage=pct,
                amount=round_money(amount),
                franking_credits=round_money(credits),
                tax_estimate=round_money(components.net_tax_payable),
            )

        results.append(DistributionScenario(shares=shares, total_tax=round_money(total_tax)))

    logger.debug("Modelled %d distribution scenarios", len(results))
    return results
