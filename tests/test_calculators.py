"""Tests for the income tax, levy, surcharge, loan repayment and franking calculators."""

from decimal import Decimal

import pytest

from household_tax.calculators.franking import apply_franking_offset, credit_ratio, gross_up_credit
from household_tax.calculators.income_tax import (
    bracket_label,
    calculate_income_tax,
    find_bracket,
    marginal_rate,
)
from household_tax.calculators.levy import calculate_levy, calculate_surcharge
from household_tax.calculators.loan_repayment import calculate_loan_repayment
from household_tax.calculators.tax_data import RateTable
from household_tax.money import round_money

# --- Income tax tests ---


class TestIncomeTax:
    def test_zero_income(self, rates_2024: RateTable) -> None:
        assert calculate_income_tax(Decimal("0"), rates_2024.brackets) == 0

    def test_negative_income(self, rates_2024: RateTable) -> None:
        assert calculate_income_tax(Decimal("-500"), rates_2024.brackets) == 0

    def test_tax_free_threshold(self, rates_2024: RateTable) -> None:
        assert calculate_income_tax(Decimal("18200"), rates_2024.brackets) == 0

    def test_first_taxed_dollar(self, rates_2024: RateTable) -> None:
        """$18,201 is the first dollar at 16%."""
        assert calculate_income_tax(Decimal("18201"), rates_2024.brackets) == Decimal("0.16")

    def test_45000_stays_in_16_percent_bracket(self, rates_2024: RateTable) -> None:
        """$45,000: 26,800 dollars at 16% = $4,288."""
        bracket = find_bracket(Decimal("45000"), rates_2024.brackets)
        assert (bracket.min, bracket.max) == (Decimal("18201"), Decimal("45000"))
        assert calculate_income_tax(Decimal("45000"), rates_2024.brackets) == Decimal("4288")

    def test_45001_is_first_dollar_of_next_bracket(self, rates_2024: RateTable) -> None:
        """$45,001: $4,288 base + 1 dollar at 30%."""
        assert find_bracket(Decimal("45001"), rates_2024.brackets).min == Decimal("45001")
        assert calculate_income_tax(Decimal("45001"), rates_2024.brackets) == Decimal("4288.30")

    @pytest.mark.parametrize(
        ("income", "expected"),
        [
            ("135000", "31288"),
            ("135001", "31288.37"),
            ("190000", "51638"),
            ("190001", "51638.45"),
            ("200000", "56138"),
        ],
    )
    def test_upper_boundaries(self, rates_2024: RateTable, income: str, expected: str) -> None:
        assert calculate_income_tax(Decimal(income), rates_2024.brackets) == Decimal(expected)

    def test_every_boundary_meets_next_base(self, rates_2024: RateTable) -> None:
        """Tax at each bracket's max equals the next bracket's base."""
        brackets = rates_2024.brackets
        for lower, upper in zip(brackets, brackets[1:]):
            assert calculate_income_tax(lower.max, brackets) == upper.base
            assert calculate_income_tax(lower.max + 1, brackets) == upper.base + upper.rate

    def test_cents_between_brackets(self, rates_2024: RateTable) -> None:
        """$18,200.50 has no gap: taxed by the 16% bracket on 50c."""
        assert calculate_income_tax(Decimal("18200.50"), rates_2024.brackets) == Decimal("0.08")

    def test_monotonic(self, rates_2024: RateTable) -> None:
        incomes = sorted(
            {Decimal(n) for n in range(0, 260000, 2500)}
            | {b.max + d for b in rates_2024.brackets[:-1] for d in (Decimal("-1"), 0, 1)}
        )
        taxes = [calculate_income_tax(i, rates_2024.brackets) for i in incomes]
        assert taxes == sorted(taxes)
        assert all(t >= 0 for t in taxes)

    def test_older_year_brackets(self, rates_2023: RateTable) -> None:
        """2023-24, $60,000: $5,092 + 15,000 at 32.5% = $9,967."""
        assert calculate_income_tax(Decimal("60000"), rates_2023.brackets) == Decimal("9967")

    def test_marginal_rate_at_boundary(self, rates_2024: RateTable) -> None:
        assert marginal_rate(Decimal("45000"), rates_2024.brackets) == Decimal("0.16")
        assert marginal_rate(Decimal("45001"), rates_2024.brackets) == Decimal("0.30")

    def test_bracket_labels(self, rates_2024: RateTable, rates_2023: RateTable) -> None:
        assert bracket_label(Decimal("0"), rates_2024.brackets) == "$0 - $18,200 (0%)"
        assert bracket_label(Decimal("45000"), rates_2024.brackets) == "$18,201 - $45,000 (16%)"
        assert bracket_label(Decimal("45001"), rates_2024.brackets) == "$45,001 - $135,000 (30%)"
        assert bracket_label(Decimal("250000"), rates_2024.brackets) == "$190,001+ (45%)"
        assert bracket_label(Decimal("60000"), rates_2023.brackets) == "$45,001 - $120,000 (32.5%)"


# --- Levy and surcharge tests ---


class TestLevy:
    def test_below_exemption(self, rates_2024: RateTable) -> None:
        assert calculate_levy(Decimal("20000"), rates_2024.levy) == 0

    def test_at_exemption(self, rates_2024: RateTable) -> None:
        assert calculate_levy(Decimal("26000"), rates_2024.levy) == 0

    def test_shade_in_band(self, rates_2024: RateTable) -> None:
        """$30,000: ($30,000 - $26,000) x 10% = $400."""
        assert calculate_levy(Decimal("30000"), rates_2024.levy) == Decimal("400")

    def test_just_below_shade_in_threshold(self, rates_2024: RateTable) -> None:
        assert calculate_levy(Decimal("32499"), rates_2024.levy) == Decimal("649.9")

    def test_at_shade_in_threshold(self, rates_2024: RateTable) -> None:
        """Both formulas agree at $32,500: $650."""
        assert calculate_levy(Decimal("32500"), rates_2024.levy) == Decimal("650")

    def test_full_rate(self, rates_2024: RateTable) -> None:
        assert calculate_levy(Decimal("80000"), rates_2024.levy) == Decimal("1600")


class TestSurcharge:
    def test_private_cover_pays_nothing(self, rates_2024: RateTable) -> None:
        assert calculate_surcharge(Decimal("200000"), rates_2024.surcharge, True) == 0

    def test_at_first_threshold(self, rates_2024: RateTable) -> None:
        assert calculate_surcharge(Decimal("97000"), rates_2024.surcharge, False) == 0

    @pytest.mark.parametrize(
        ("income", "expected"),
        [
            ("97001", "970.01"),  # 1% of the whole income
            ("130000", "1300"),
            ("130001", "1625.0125"),
            ("173000", "2162.5"),
            ("200000", "3000"),
        ],
    )
    def test_flat_rate_on_full_income(self, rates_2024: RateTable, income: str, expected: str) -> None:
        assert calculate_surcharge(Decimal(income), rates_2024.surcharge, False) == Decimal(expected)


# --- Loan repayment tests ---


class TestLoanRepayment:
    def test_no_debt_is_zero_at_any_income(self, rates_2024: RateTable) -> None:
        for income in ("0", "60000", "500000"):
            assert calculate_loan_repayment(Decimal(income), False, rates_2024.repayment_tiers) == 0

    def test_below_threshold(self, rates_2024: RateTable) -> None:
        assert calculate_loan_repayment(Decimal("54435"), True, rates_2024.repayment_tiers) == 0

    def test_first_tier_is_flat(self, rates_2024: RateTable) -> None:
        """$54,436 at 1% of the whole income, not of the excess."""
        assert calculate_loan_repayment(Decimal("54436"), True, rates_2024.repayment_tiers) == Decimal("544.36")

    def test_mid_tier(self, rates_2024: RateTable) -> None:
        assert calculate_loan_repayment(Decimal("60000"), True, rates_2024.repayment_tiers) == Decimal("600")

    def test_top_tier(self, rates_2024: RateTable) -> None:
        """$200,000 at 10% = $20,000."""
        assert calculate_loan_repayment(Decimal("200000"), True, rates_2024.repayment_tiers) == Decimal("20000")

    def test_zero_income_with_debt(self, rates_2024: RateTable) -> None:
        assert calculate_loan_repayment(Decimal("0"), True, rates_2024.repayment_tiers) == 0


# --- Franking tests ---


class TestFranking:
    def test_credit_ratio(self) -> None:
        """30% company tax: 30/70."""
        assert credit_ratio(Decimal("0.30")) == Decimal("0.30") / Decimal("0.70")

    def test_gross_up_fully_franked(self) -> None:
        """$7,000 fully franked dividend carries $3,000 of credits."""
        assert round_money(gross_up_credit(Decimal("7000"), Decimal("0.30"))) == Decimal("3000.00")

    def test_gross_up_partially_franked(self) -> None:
        credit = gross_up_credit(Decimal("7000"), Decimal("0.30"), Decimal("0.5"))
        assert round_money(credit) == Decimal("1500.00")

    def test_gross_up_nothing(self) -> None:
        assert gross_up_credit(Decimal("0"), Decimal("0.30")) == 0

    def test_invalid_company_rate(self) -> None:
        with pytest.raises(ValueError):
            credit_ratio(Decimal("1"))

    def test_offset_reduces_tax(self) -> None:
        result = apply_franking_offset(Decimal("5000"), Decimal("3000"))
        assert result.gross_offset == Decimal("3000")
        assert result.net_tax_payable == Decimal("2000")
        assert result.excess_credits == 0

    def test_offset_floors_at_zero_and_reports_excess(self) -> None:
        result = apply_franking_offset(Decimal("1000"), Decimal("3000"))
        assert result.gross_offset == Decimal("3000")
        assert result.net_tax_payable == 0
        assert result.excess_credits == Decimal("2000")
