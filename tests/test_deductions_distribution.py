"""Tests for deduction helpers and trust distribution modelling."""

from decimal import Decimal

import pytest

from household_tax.calculators.deductions import (
    calculate_vehicle_deduction,
    calculate_wfh_deduction,
    estimate_annual_wfh_deduction,
    should_flag_deduction,
)
from household_tax.calculators.distribution import model_distribution
from household_tax.calculators.tax_data import RateTable
from household_tax.models import DeductionCategory

_COMPANY_RATE = Decimal("0.30")


class TestDeductionHelpers:
    def test_wfh(self) -> None:
        assert calculate_wfh_deduction(Decimal("100")) == Decimal("67.00")

    def test_wfh_annual_estimate(self) -> None:
        """10 hours a week for 48 weeks at 67c."""
        assert estimate_annual_wfh_deduction(Decimal("10")) == Decimal("321.60")

    def test_vehicle_capped_at_5000_km(self) -> None:
        assert calculate_vehicle_deduction(Decimal("1000")) == Decimal("850")
        assert calculate_vehicle_deduction(Decimal("6000")) == Decimal("4250")

    def test_negative_inputs(self) -> None:
        assert calculate_wfh_deduction(Decimal("-5")) == 0
        assert calculate_vehicle_deduction(Decimal("-5")) == 0

    def test_receipt_clears_flag(self) -> None:
        assert not should_flag_deduction(DeductionCategory.TRAVEL, Decimal("5000"), True).flag

    def test_category_threshold(self) -> None:
        flag = should_flag_deduction(DeductionCategory.CLOTHING_LAUNDRY, Decimal("200"), False)
        assert flag.flag
        assert "clothing_laundry" in flag.reason

    def test_always_needs_receipt(self) -> None:
        assert should_flag_deduction(DeductionCategory.PHONE_INTERNET, Decimal("10"), False).flag

    def test_large_claim(self) -> None:
        flag = should_flag_deduction(DeductionCategory.DONATIONS, Decimal("1500"), False)
        assert flag.reason.startswith("Large deduction")

    def test_wfh_needs_diary(self) -> None:
        flag = should_flag_deduction(DeductionCategory.WORK_FROM_HOME, Decimal("50"), False)
        assert "timesheet" in flag.reason

    def test_small_unflagged_claim(self) -> None:
        assert should_flag_deduction(DeductionCategory.DONATIONS, Decimal("50"), False) == (False, None)


class TestModelDistribution:
    def test_scenarios(self, rates_2024: RateTable) -> None:
        """$10,000 unfranked to a no-income beneficiary costs nothing.

        Split 50/50 instead, the earner goes to $50,000:
        $4,288 + 5,000 x 30% = $5,788 tax, plus $1,000 levy.
        """
        results = model_distribution(
            Decimal("10000"),
            {"kid": Decimal("0"), "grant": Decimal("45000")},
            [{"kid": Decimal("100")}, {"kid": Decimal("50"), "grant": Decimal("50")}],
            rates_2024,
            _COMPANY_RATE,
            franking_credits=Decimal("0"),
        )
        assert results[0].total_tax == 0
        assert results[0].shares["kid"].amount == Decimal("10000.00")
        assert results[1].shares["grant"].tax_estimate == Decimal("6788.00")
        assert results[1].shares["kid"].tax_estimate == 0
        assert results[1].total_tax == Decimal("6788.00")

    def test_default_is_fully_franked(self, rates_2024: RateTable) -> None:
        """$7,000 at 30% company tax carries $3,000 of credits; all refundable here."""
        results = model_distribution(
            Decimal("7000"), {"kid": Decimal("0")}, [{"kid": Decimal("100")}], rates_2024, _COMPANY_RATE
        )
        share = results[0].shares["kid"]
        assert share.franking_credits == Decimal("3000.00")
        assert share.tax_estimate == 0

    def test_partial_split(self, rates_2024: RateTable) -> None:
        results = model_distribution(
            Decimal("10000"), {"kid": Decimal("0")}, [{"kid": Decimal("40")}], rates_2024, _COMPANY_RATE,
            franking_credits=Decimal("0"),
        )
        assert results[0].shares["kid"].amount == Decimal("4000.00")

    @pytest.mark.parametrize(
        "split",
        [
            {"kid": Decimal("-10")},
            {"kid": Decimal("60"), "grant": Decimal("50")},
            {"stranger": Decimal("10")},
        ],
    )
    def test_invalid_split(self, rates_2024: RateTable, split: dict[str, Decimal]) -> None:
        with pytest.raises(ValueError):
            model_distribution(
                Decimal("10000"),
                {"kid": Decimal("0"), "grant": Decimal("0")},
                [split],
                rates_2024,
                _COMPANY_RATE,
            )
