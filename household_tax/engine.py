"""Query interface used by the household finance application.

The engine holds no records. It asks a ``RecordSource`` for one person's
(or member's) records, validates them, and runs the pure calculators.
Nothing here reads the clock; callers pass the financial year.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from decimal import Decimal
from typing import Any, Protocol

from config.settings import Settings
from config.settings import settings as default_settings
from household_tax.calculators.aggregator import build_household_summary, build_tax_summary
from household_tax.calculators.distribution import DistributionScenario, model_distribution
from household_tax.calculators.tax_data import RateTable, rates_for
from household_tax.contributions.caps import summarise_contributions
from household_tax.contributions.carry_forward import (
    CarryForwardLedger,
    carry_forward_available,
    close_financial_year,
)
from household_tax.errors import TaxEngineError
from household_tax.ingestion import (
    validate_carry_forward_records,
    validate_contribution_records,
    validate_deduction_records,
    validate_income_records,
)
from household_tax.models import CarryForwardRecord, ContributionSummary, HouseholdTaxSummary, TaxSummary

logger = logging.getLogger(__name__)


class RecordSource(Protocol):
    """Fetches record snapshots from the application's store.

    Rows may be mappings or already-built record models.
    """

    def income_records(self, person: str, financial_year: str) -> Iterable[Any]: ...

    def deduction_records(self, person: str, financial_year: str) -> Iterable[Any]: ...

    def contribution_records(self, member: str, financial_year: str) -> Iterable[Any]: ...

    def carry_forward_records(self, member: str) -> Iterable[Any]: ...


class TaxEngine:
    """Computes tax and contribution summaries from a record source."""

    def __init__(
        self,
        source: RecordSource,
        tables: dict[str, RateTable] | None = None,
        config: Settings | None = None,
        ledger: CarryForwardLedger | None = None,
    ) -> None:
        self._source = source
        self._tables = tables
        self._config = config or default_settings
        self._ledger = ledger

    def rates_for(self, financial_year: str) -> RateTable:
        """Rate table for a year (nearest earlier year, with a warning, if missing)."""
        return rates_for(financial_year, self._tables)

    def compute_tax(
        self,
        person: str,
        financial_year: str,
        has_loan_debt: bool = False,
        has_private_cover: bool = True,
    ) -> TaxSummary:
        """Complete tax position for one person and year.

        Raises:
            InvalidRecordData: if the source returns a malformed record.
        """
        rates = self.rates_for(financial_year)
        income = validate_income_records(self._source.income_records(person, financial_year))
        deductions = validate_deduction_records(self._source.deduction_records(person, financial_year))

        logger.info(
            "Computing tax for %s %s (%d income, %d deduction records)",
            person,
            financial_year,
            len(income),
            len(deductions),
        )
        return build_tax_summary(
            person,
            financial_year,
            income,
            deductions,
            rates,
            has_loan_debt=has_loan_debt,
            has_private_cover=has_private_cover,
        )

    def compute_household_tax(
        self,
        persons: Sequence[str],
        financial_year: str,
        loan_debt: Mapping[str, bool] | None = None,
        private_cover: Mapping[str, bool] | None = None,
    ) -> HouseholdTaxSummary:
        """Tax for every co-filer plus combined totals."""
        loan_debt = loan_debt or {}
        private_cover = private_cover or {}
        summaries = {
            person: self.compute_tax(
                person,
                financial_year,
                has_loan_debt=loan_debt.get(person, False),
                has_private_cover=private_cover.get(person, True),
            )
            for person in persons
        }
        return build_household_summary(financial_year, summaries)

    def _carry_forward_records(self, member: str) -> list[CarryForwardRecord]:
        if self._ledger is not None:
            return self._ledger.records_for(member)
        return validate_carry_forward_records(self._source.carry_forward_records(member))

    def compute_contribution_summary(
        self,
        member: str,
        financial_year: str,
        total_super_balance: Decimal | None = None,
    ) -> ContributionSummary:
        """Cap usage and carry-forward availability for one member and year.

        Args:
            member: Member id.
            financial_year: Year to summarise.
            total_super_balance: Balance at the previous 30 June, if known;
                otherwise taken from the previous year's closed record.
        """
        rates = self.rates_for(financial_year)
        contributions = validate_contribution_records(
            self._source.contribution_records(member, financial_year)
        )
        carry_forward = carry_forward_available(
            member,
            financial_year,
            self._carry_forward_records(member),
            total_super_balance=total_super_balance,
            balance_threshold=self._config.carry_forward_balance_threshold,
        )

        summary = summarise_contributions(
            member,
            financial_year,
            contributions,
            rates.caps,
            carry_forward,
            rate_year=rates.source_year,
        )
        if rates.is_fallback:
            summary.notes.append(f"No {financial_year} caps on file; using {rates.source_year} caps.")
        if carry_forward.eligibility_data_missing:
            summary.notes.append("No prior year-end balance on record; carry-forward treated as unavailable.")
        return summary

    def close_financial_year(
        self,
        member: str,
        financial_year: str,
        total_super_balance: Decimal | None,
    ) -> CarryForwardRecord:
        """Close a member's year and append the record to the ledger.

        Raises:
            TaxEngineError: if the engine was built without a ledger.
            YearAlreadyClosed: if the year is already closed for the member.
        """
        if self._ledger is None:
            raise TaxEngineError("Closing a year needs a carry-forward ledger")

        rates = self.rates_for(financial_year)
        contributions = validate_contribution_records(
            self._source.contribution_records(member, financial_year)
        )
        record = close_financial_year(
            member,
            financial_year,
            contributions,
            rates.caps,
            total_super_balance,
            first_accrual_year=self._config.carry_forward_first_accrual_year,
        )
        return self._ledger.record(record)

    def model_distribution(
        self,
        financial_year: str,
        distributable_amount: Decimal,
        other_income: Mapping[str, Decimal],
        scenarios: Sequence[Mapping[str, Decimal]],
        franking_credits: Decimal | None = None,
    ) -> list[DistributionScenario]:
        """Compare trust distribution splits using the year's rates and the configured company tax rate."""
        return model_distribution(
            distributable_amount,
            other_income,
            scenarios,
            self.rates_for(financial_year),
            self._config.company_tax_rate,
            franking_credits=franking_credits,
        )
