"""Deduction helpers: work-from-home, vehicle and substantiation checks."""

from decimal import Decimal
from typing import NamedTuple

from household_tax.models import DeductionCategory

WFH_RATE_PER_HOUR = Decimal("0.67")  # fixed rate method, from 1 July 2022
VEHICLE_CENTS_PER_KM_RATE = Decimal("0.85")  # 2024-25
VEHICLE_CENTS_PER_KM_LIMIT = Decimal("5000")  # km
DEFAULT_WEEKS_WORKED = 48

# Claims above these amounts need receipts (0 = always)
REQUIRES_RECEIPT_ABOVE: dict[DeductionCategory, Decimal] = {
    DeductionCategory.CLOTHING_LAUNDRY: Decimal("150"),
    DeductionCategory.TOOLS_EQUIPMENT: Decimal("300"),
    DeductionCategory.PHONE_INTERNET: Decimal("0"),
    DeductionCategory.SELF_EDUCATION: Decimal("0"),
    DeductionCategory.TRAVEL: Decimal("0"),
    DeductionCategory.VEHICLE: Decimal("0"),
}

LARGE_CLAIM_THRESHOLD = Decimal("1000")


class DeductionFlag(NamedTuple):
    flag: bool
    reason: str | None = None


def calculate_wfh_deduction(total_hours: Decimal) -> Decimal:
    """Work-from-home deduction under the fixed rate method."""
    return max(total_hours, Decimal("0")) * WFH_RATE_PER_HOUR


def estimate_annual_wfh_deduction(hours_per_week: Decimal, weeks_worked: int = DEFAULT_WEEKS_WORKED) -> Decimal:
    """Estimate a year's WFH deduction from a typical week (48 weeks allows 4 weeks leave)."""
    return calculate_wfh_deduction(hours_per_week * weeks_worked)


def calculate_vehicle_deduction(kilometres: Decimal) -> Decimal:
    """Cents-per-km vehicle deduction, capped at 5,000 km."""
    claimable = min(max(kilometres, Decimal("0")), VEHICLE_CENTS_PER_KM_LIMIT)
    return claimable * VEHICLE_CENTS_PER_KM_RATE


def should_flag_deduction(category: DeductionCategory, amount: Decimal, has_receipt: bool) -> DeductionFlag:
    """Flag a deduction that is likely to need documentation."""
    if has_receipt:
        return DeductionFlag(False)

    threshold = REQUIRES_RECEIPT_ABOVE.get(category)
    if threshold is not None and amount > threshold:
        return DeductionFlag(True, f"Receipt required for {category.value} claims over ${threshold}")

    if amount > LARGE_CLAIM_THRESHOLD:
        return DeductionFlag(True, "Large deduction without receipt - keep documentation")

    if category is DeductionCategory.WORK_FROM_HOME:
        return DeductionFlag(True, "WFH claims require timesheet/diary records")

    return DeductionFlag(False)
