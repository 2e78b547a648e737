"""Carry-forward of unused concessional cap, and the year-end close that feeds it.

Unused concessional cap from up to five earlier financial years can be
used, but only by members whose total super balance at the previous
30 June was under the threshold. Amounts older than the window expire
whether or not they were used.

Year-end records are append-only: each (member, year) is closed once.
Replacing a closed year is a separate, explicit ``supersede`` step that
keeps the old record in the ledger's history.
"""

import logging
import warnings
from collections.abc import Iterable
from decimal import Decimal
from typing import NamedTuple

from household_tax.calculators.tax_data import ContributionCaps
from household_tax.contributions.caps import concessional_total, contributions_by_type
from household_tax.errors import MissingEligibilityData, TaxEngineError, YearAlreadyClosed
from household_tax.financial_year import parse_financial_year
from household_tax.models import (
    CarryForwardAmount,
    CarryForwardAvailability,
    CarryForwardRecord,
    ContributionRecord,
)
from household_tax.money import round_money

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")

# Unused cap older than this many years expires
WINDOW_YEARS = 5
DEFAULT_BALANCE_THRESHOLD = Decimal("500000")
DEFAULT_FIRST_ACCRUAL_YEAR = "2018-19"


def records_in_window(
    member: str,
    target_year: str,
    records: Iterable[CarryForwardRecord],
) -> list[CarryForwardRecord]:
    """The member's records for the five years before ``target_year``.

    Most recent first. If a year appears twice the later record wins.
    """
    target = parse_financial_year(target_year)
    by_year: dict[int, CarryForwardRecord] = {}
    for record in records:
        if record.member != member:
            continue
        start = parse_financial_year(record.financial_year)
        if target - WINDOW_YEARS <= start < target:
            by_year[start] = record

    return [by_year[start] for start in sorted(by_year, reverse=True)][:WINDOW_YEARS]


def carry_forward_available(
    member: str,
    target_year: str,
    records: Iterable[CarryForwardRecord],
    total_super_balance: Decimal | None = None,
    balance_threshold: Decimal = DEFAULT_BALANCE_THRESHOLD,
) -> CarryForwardAvailability:
    """Unused concessional cap the member can draw on in ``target_year``.

    Args:
        member: Member id.
        target_year: Year the extra contributions would be made in.
        records: Closed-year records; other members and years are ignored.
        total_super_balance: Balance at the previous 30 June. When None it is
            read from the previous year's record.
        balance_threshold: Balance at or above which carry-forward is barred.

    Returns:
        CarryForwardAvailability. ``available`` is 0 unless eligible; the
        breakdown lists qualifying years either way.
    """
    window = records_in_window(member, target_year, records)

    balance = total_super_balance
    if balance is None:
        previous_start = parse_financial_year(target_year) - 1
        previous = next(
            (r for r in window if parse_financial_year(r.financial_year) == previous_start),
            None,
        )
        if previous is not None:
            balance = previous.total_super_balance_at_year_end

    missing = balance is None
    if missing:
        message = f"No prior year-end balance for member {member}; carry-forward not available for {target_year}"
        logger.warning(message)
        warnings.warn(message, MissingEligibilityData, stacklevel=2)

    eligible = not missing and balance < balance_threshold

    qualifying = [r for r in window if r.eligible_for_carry_forward and r.unused_amount > 0]
    breakdown = [
        CarryForwardAmount(financial_year=r.financial_year, amount=round_money(r.unused_amount))
        for r in qualifying
    ]
    total = sum((r.unused_amount for r in qualifying), _ZERO)

    return CarryForwardAvailability(
        available=round_money(total if eligible else _ZERO),
        eligible=eligible,
        breakdown=breakdown,
        eligibility_data_missing=missing,
    )


def close_financial_year(
    member: str,
    financial_year: str,
    contributions: Iterable[ContributionRecord],
    caps: ContributionCaps,
    total_super_balance: Decimal | None,
    first_accrual_year: str = DEFAULT_FIRST_ACCRUAL_YEAR,
) -> CarryForwardRecord:
    """Build the year-end record for one member.

    Unused cap only accrues for years from ``first_accrual_year`` onwards;
    earlier years are recorded but flagged as not carried forward.
    """
    by_type = contributions_by_type(
        c for c in contributions if c.member == member and c.financial_year == financial_year
    )
    used = concessional_total(by_type)
    accrues = parse_financial_year(financial_year) >= parse_financial_year(first_accrual_year)

    return CarryForwardRecord(
        member=member,
        financial_year=financial_year,
        concessional_cap=caps.concessional,
        concessional_used=round_money(used),
        unused_amount=round_money(max(_ZERO, caps.concessional - used)),
        total_super_balance_at_year_end=total_super_balance,
        eligible_for_carry_forward=accrues,
    )


class SupersededRecord(NamedTuple):
    record: CarryForwardRecord
    replaced_by: CarryForwardRecord
    reason: str


class CarryForwardLedger:
    """Append-only store of year-end records, keyed by (member, financial year)."""

    def __init__(self, records: Iterable[CarryForwardRecord] = ()) -> None:
        self._current: dict[tuple[str, str], CarryForwardRecord] = {}
        self._history: list[SupersededRecord] = []
        for record in records:
            self.record(record)

    def record(self, record: CarryForwardRecord) -> CarryForwardRecord:
        """Add a closed year.

        Raises:
            YearAlreadyClosed: if the member's year already has a record.
        """
        key = (record.member, record.financial_year)
        if key in self._current:
            raise YearAlreadyClosed(record.member, record.financial_year)
        self._current[key] = record
        logger.info("Closed %s for member %s", record.financial_year, record.member)
        return record

    def supersede(self, record: CarryForwardRecord, reason: str) -> CarryForwardRecord:
        """Replace a closed year, keeping the old record in history."""
        key = (record.member, record.financial_year)
        existing = self._current.get(key)
        if existing is None:
            raise TaxEngineError(
                f"Cannot supersede {record.financial_year} for member {record.member}: year not closed"
            )
        if not reason:
            raise TaxEngineError("A reason is required to supersede a closed year")

        self._history.append(SupersededRecord(existing, record, reason))
        self._current[key] = record
        logger.warning("Superseded %s for member %s: %s", record.financial_year, record.member, reason)
        return record

    def get(self, member: str, financial_year: str) -> CarryForwardRecord | None:
        return self._current.get((member, financial_year))

    def records_for(self, member: str) -> list[CarryForwardRecord]:
        """Current records for a member, most recent year first."""
        records = [r for (m, _), r in self._current.items() if m == member]
        return sorted(records, key=lambda r: parse_financial_year(r.financial_year), reverse=True)

    def history(self, member: str | None = None) -> list[SupersededRecord]:
        return [h for h in self._history if member is None or h.record.member == member]
