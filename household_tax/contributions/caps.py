"""Contribution cap tracking per member and financial year.

Caps are reported against, never enforced: contributions over the cap are
counted as made, and the summary shows ``remaining`` 0 and 100%.
"""

from collections.abc import Iterable
from decimal import Decimal

from household_tax.calculators.tax_data import ContributionCaps
from household_tax.contributions.rules import bring_forward_availability
from household_tax.models import (
    CapUsage,
    CarryForwardAvailability,
    ContributionAlert,
    ContributionRecord,
    ContributionSummary,
    ContributionType,
)
from household_tax.money import percentage, round_money

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")

CONCESSIONAL_TYPES = frozenset({
    ContributionType.CONCESSIONAL,
    ContributionType.EMPLOYER_SG,
    ContributionType.SALARY_SACRIFICE,
    ContributionType.PERSONAL_DEDUCTIBLE,
})

NON_CONCESSIONAL_TYPES = frozenset({
    ContributionType.NON_CONCESSIONAL,
    ContributionType.PERSONAL_NON_DEDUCTIBLE,
    ContributionType.SPOUSE,
})

LOW_REMAINING_WARNING = Decimal("5000")
LOW_UTILISATION_PERCENT = Decimal("50")


def classify_contribution(contribution_type: ContributionType) -> str | None:
    """Which cap a contribution counts toward, or None for neither."""
    if contribution_type in CONCESSIONAL_TYPES:
        return "concessional"
    if contribution_type in NON_CONCESSIONAL_TYPES:
        return "non_concessional"
    return None


def contributions_by_type(records: Iterable[ContributionRecord]) -> dict[ContributionType, Decimal]:
    """Sum contributions per type; every type is present."""
    by_type = {contribution_type: _ZERO for contribution_type in ContributionType}
    for record in records:
        by_type[record.contribution_type] += record.amount
    return by_type


def concessional_total(by_type: dict[ContributionType, Decimal]) -> Decimal:
    return sum((by_type[t] for t in CONCESSIONAL_TYPES), _ZERO)


def non_concessional_total(by_type: dict[ContributionType, Decimal]) -> Decimal:
    return sum((by_type[t] for t in NON_CONCESSIONAL_TYPES), _ZERO)


def cap_usage(used: Decimal, cap: Decimal) -> CapUsage:
    """Usage against a cap. Remaining floors at 0, percentage clamps to [0, 100].

    Any use of a zero cap is over the cap and reads as 100%.
    """
    if cap <= 0 and used > 0:
        used_percent = round_money(_HUNDRED)
    else:
        used_percent = percentage(used, cap)
    return CapUsage(
        used=round_money(used),
        cap=round_money(cap),
        remaining=round_money(max(_ZERO, cap - used)),
        percentage=used_percent,
    )


def summarise_contributions(
    member: str,
    financial_year: str,
    records: Iterable[ContributionRecord],
    caps: ContributionCaps,
    carry_forward: CarryForwardAvailability,
    rate_year: str | None = None,
) -> ContributionSummary:
    """Build a member's cap summary for one year.

    Records for other members or years are ignored.
    """
    by_type = contributions_by_type(
        r for r in records if r.member == member and r.financial_year == financial_year
    )

    return ContributionSummary(
        member=member,
        financial_year=financial_year,
        rate_year=rate_year or financial_year,
        concessional=cap_usage(concessional_total(by_type), caps.concessional),
        non_concessional=cap_usage(non_concessional_total(by_type), caps.non_concessional),
        carry_forward=carry_forward,
        by_type={t: round_money(amount) for t, amount in by_type.items()},
    )


def contribution_alerts(
    summary: ContributionSummary,
    total_super_balance: Decimal | None = None,
) -> list[ContributionAlert]:
    """Status messages for a contribution summary.

    Alerts are for the application to show; nothing here blocks a
    contribution.
    """
    alerts: list[ContributionAlert] = []
    concessional = summary.concessional
    non_concessional = summary.non_concessional

    if concessional.used > concessional.cap:
        excess = concessional.used - concessional.cap
        alerts.append(ContributionAlert(
            level="error",
            message=f"Concessional cap exceeded by ${excess:,}. Excess will be taxed at marginal rate.",
        ))
    elif concessional.remaining < LOW_REMAINING_WARNING:
        alerts.append(ContributionAlert(
            level="warning",
            message=f"Only ${concessional.remaining:,} concessional cap remaining.",
        ))

    if non_concessional.used > non_concessional.cap:
        excess = non_concessional.used - non_concessional.cap
        alerts.append(ContributionAlert(
            level="error",
            message=f"Non-concessional cap exceeded by ${excess:,}. Excess will be taxed at 47%.",
        ))

    if total_super_balance is not None:
        bring_forward = bring_forward_availability(total_super_balance, non_concessional.cap)
        if not bring_forward.available:
            alerts.append(ContributionAlert(
                level="info",
                message="Bring-forward rule not available due to total super balance exceeding $1.9M.",
            ))

    if concessional.percentage < LOW_UTILISATION_PERCENT:
        alerts.append(ContributionAlert(
            level="info",
            message=(
                f"Only {concessional.percentage:.0f}% of concessional cap used. "
                "Consider salary sacrifice to reduce tax."
            ),
        ))

    return alerts
