"""Rate tables: income tax brackets, levy, surcharge, loan repayment tiers, super caps.

Tables are data, not code. Each financial year lives in ``config/rates.yaml``
and is parsed into the NamedTuples below, so a new year needs a YAML entry
and nothing else.
"""

import logging
import warnings
from decimal import Decimal
from typing import Any, NamedTuple

from config import load_yaml_config
from config.settings import settings
from household_tax.errors import RateTableError, UnknownYearFallback
from household_tax.financial_year import parse_financial_year

logger = logging.getLogger(__name__)


class TaxBracket(NamedTuple):
    """A single income tax bracket. ``min`` is the first dollar taxed at ``rate``."""

    min: Decimal  # inclusive
    max: Decimal | None  # inclusive, None = no cap
    rate: Decimal
    base: Decimal  # tax on all income below ``min``


class LevyRule(NamedTuple):
    """Medicare-style levy with a shade-in band above the exemption threshold."""

    full_exemption_threshold: Decimal
    shade_in_threshold: Decimal
    full_rate: Decimal
    shade_in_rate: Decimal


class SurchargeTier(NamedTuple):
    """Surcharge rate applied to the whole income once it exceeds ``threshold``."""

    threshold: Decimal
    rate: Decimal


class RepaymentTier(NamedTuple):
    """Study loan repayment tier; ``rate`` applies to the whole repayment income."""

    min: Decimal
    max: Decimal | None
    rate: Decimal


class ContributionCaps(NamedTuple):
    concessional: Decimal
    non_concessional: Decimal


class RateTable(NamedTuple):
    """All parameters for one financial year.

    ``financial_year`` is the year asked for; ``source_year`` is the year whose
    table supplied the numbers. They differ only after a fallback.
    """

    financial_year: str
    source_year: str
    brackets: tuple[TaxBracket, ...]
    levy: LevyRule
    surcharge: tuple[SurchargeTier, ...]
    repayment_tiers: tuple[RepaymentTier, ...]
    caps: ContributionCaps
    super_guarantee_rate: Decimal

    @property
    def is_fallback(self) -> bool:
        return self.financial_year != self.source_year


def _dec(value: Any) -> Decimal:
    return Decimal(str(value))


def _dec_or_none(value: Any) -> Decimal | None:
    return None if value is None else _dec(value)


def _check_contiguous(year: str, name: str, bands: tuple[TaxBracket, ...] | tuple[RepaymentTier, ...]) -> None:
    if not bands:
        raise RateTableError(f"{year}: {name} table is empty")
    if bands[0].min != 0:
        raise RateTableError(f"{year}: first {name} entry must start at 0")
    for lower, upper in zip(bands, bands[1:]):
        if lower.max is None or lower.max + 1 != upper.min:
            raise RateTableError(f"{year}: {name} entries are not contiguous at {upper.min}")
    if bands[-1].max is not None:
        raise RateTableError(f"{year}: last {name} entry must be unbounded")


def validate_rate_table(table: RateTable) -> None:
    """Check the structural invariants of one year's table.

    Raises:
        RateTableError: describing the first violation found.
    """
    year = table.source_year
    _check_contiguous(year, "bracket", table.brackets)
    _check_contiguous(year, "repayment tier", table.repayment_tiers)

    rates = [tier.rate for tier in table.repayment_tiers]
    if rates != sorted(rates):
        raise RateTableError(f"{year}: repayment rates must not decrease")

    levy = table.levy
    if levy.full_exemption_threshold >= levy.shade_in_threshold:
        raise RateTableError(f"{year}: levy exemption threshold must be below the shade-in threshold")

    thresholds = [tier.threshold for tier in table.surcharge]
    if thresholds != sorted(thresholds):
        raise RateTableError(f"{year}: surcharge thresholds must ascend")


def parse_rate_table(year: str, data: dict[str, Any]) -> RateTable:
    """Build a RateTable from one YAML year entry."""
    try:
        parse_financial_year(year)
        table = RateTable(
            financial_year=year,
            source_year=year,
            brackets=tuple(
                TaxBracket(_dec(b["min"]), _dec_or_none(b["max"]), _dec(b["rate"]), _dec(b["base"]))
                for b in data["brackets"]
            ),
            levy=LevyRule(
                full_exemption_threshold=_dec(data["levy"]["full_exemption_threshold"]),
                shade_in_threshold=_dec(data["levy"]["shade_in_threshold"]),
                full_rate=_dec(data["levy"]["full_rate"]),
                shade_in_rate=_dec(data["levy"]["shade_in_rate"]),
            ),
            surcharge=tuple(
                SurchargeTier(_dec(s["threshold"]), _dec(s["rate"])) for s in data.get("surcharge", [])
            ),
            repayment_tiers=tuple(
                RepaymentTier(_dec(t["min"]), _dec_or_none(t["max"]), _dec(t["rate"]))
                for t in data["repayment_tiers"]
            ),
            caps=ContributionCaps(
                concessional=_dec(data["caps"]["concessional"]),
                non_concessional=_dec(data["caps"]["non_concessional"]),
            ),
            super_guarantee_rate=_dec(data["super_guarantee_rate"]),
        )
    except (KeyError, TypeError, ArithmeticError, ValueError) as e:
        raise RateTableError(f"{year}: malformed rate table ({e!r})") from e

    validate_rate_table(table)
    return table


def load_rate_tables(filename: str | None = None) -> dict[str, RateTable]:
    """Load and validate every year in the rates file."""
    raw = load_yaml_config(filename or settings.rates_file)
    years = (raw or {}).get("years") or {}
    if not years:
        raise RateTableError("Rates file defines no financial years")

    tables = {year: parse_rate_table(year, data) for year, data in years.items()}
    logger.info("Loaded rate tables for %s", ", ".join(sorted(tables)))
    return tables


TAX_YEARS: dict[str, RateTable] = load_rate_tables()


def rates_for(financial_year: str, tables: dict[str, RateTable] | None = None) -> RateTable:
    """Return the rate table for a financial year.

    Years without their own table use the nearest earlier year, or the
    earliest table for years before all of them, with an
    ``UnknownYearFallback`` warning so the caller can tell the user.

    Raises:
        InvalidRecordData: if ``financial_year`` is malformed.
        RateTableError: if there are no tables at all.
    """
    tables = TAX_YEARS if tables is None else tables
    target = parse_financial_year(financial_year)

    if financial_year in tables:
        return tables[financial_year]
    if not tables:
        raise RateTableError(f"No rate tables loaded; cannot price {financial_year}")

    earlier = [year for year in tables if parse_financial_year(year) < target]
    if earlier:
        source_year = max(earlier, key=parse_financial_year)
    else:
        source_year = min(tables, key=parse_financial_year)
    message = f"No rate table for {financial_year}; using {source_year} rates"
    logger.warning(message)
    warnings.warn(message, UnknownYearFallback, stacklevel=2)
    return tables[source_year]._replace(financial_year=financial_year)
