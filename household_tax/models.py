"""Pydantic models for input records and calculation results."""

import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from household_tax.financial_year import parse_financial_year

# --- Closed vocabularies ---


class IncomeType(str, Enum):
    SALARY = "salary"
    BONUS = "bonus"
    DIVIDEND = "dividend"
    TRUST_DISTRIBUTION = "trust_distribution"
    RENTAL = "rental"
    INTEREST = "interest"
    CAPITAL_GAIN = "capital_gain"
    GOVERNMENT_PAYMENT = "government_payment"
    OTHER = "other"


class DeductionCategory(str, Enum):
    WORK_FROM_HOME = "work_from_home"
    VEHICLE = "vehicle"
    TRAVEL = "travel"
    CLOTHING_LAUNDRY = "clothing_laundry"
    SELF_EDUCATION = "self_education"
    TOOLS_EQUIPMENT = "tools_equipment"
    PROFESSIONAL_SUBSCRIPTIONS = "professional_subscriptions"
    UNION_FEES = "union_fees"
    PHONE_INTERNET = "phone_internet"
    DONATIONS = "donations"
    INCOME_PROTECTION = "income_protection"
    TAX_AGENT_FEES = "tax_agent_fees"
    INVESTMENT_EXPENSES = "investment_expenses"
    RENTAL_PROPERTY = "rental_property"
    OTHER = "other"


class ContributionType(str, Enum):
    # Concessional
    CONCESSIONAL = "concessional"
    EMPLOYER_SG = "employer_sg"
    SALARY_SACRIFICE = "salary_sacrifice"
    PERSONAL_DEDUCTIBLE = "personal_deductible"
    # Non-concessional
    NON_CONCESSIONAL = "non_concessional"
    PERSONAL_NON_DEDUCTIBLE = "personal_non_deductible"
    SPOUSE = "spouse"
    # Outside both caps
    GOVERNMENT_CO_CONTRIBUTION = "government_co_contribution"
    DOWNSIZER = "downsizer"
    LOW_INCOME_SUPER_OFFSET = "low_income_super_offset"
    OTHER = "other"


# --- Input records (read-only snapshots from the record store) ---


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)

    financial_year: str

    @field_validator("financial_year")
    @classmethod
    def _check_year(cls, value: str) -> str:
        parse_financial_year(value)
        return value


class IncomeRecord(_Record):
    """One income item for a person in a financial year."""

    person: str
    income_type: IncomeType
    amount: Decimal = Field(ge=0)
    franking_credits: Decimal = Field(default=Decimal("0"), ge=0)
    tax_withheld: Decimal = Field(default=Decimal("0"), ge=0)
    is_taxable: bool = True


class DeductionRecord(_Record):
    """One claimed deduction for a person in a financial year."""

    person: str
    category: DeductionCategory
    amount: Decimal = Field(ge=0)


class ContributionRecord(_Record):
    """A super contribution received for a member."""

    member: str
    contribution_type: ContributionType
    amount: Decimal = Field(ge=0)
    date: datetime.date | None = None


class CarryForwardRecord(_Record):
    """Closed-out concessional cap position for one member and year.

    Created once at year end and never modified afterwards.
    """

    member: str
    concessional_cap: Decimal = Field(ge=0)
    concessional_used: Decimal = Field(ge=0)
    unused_amount: Decimal = Field(ge=0)
    total_super_balance_at_year_end: Decimal | None = Field(default=None, ge=0)
    eligible_for_carry_forward: bool = True


# --- Tax results ---


class TaxCalculationResult(BaseModel):
    """Tax liability for one set of totals. Money rounded to cents."""

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
    effective_rate: Decimal  # percent of gross income
    marginal_rate: Decimal  # percent
    bracket_label: str


class IncomeBreakdown(BaseModel):
    salary: Decimal = Decimal("0")
    dividends: Decimal = Decimal("0")
    trust_distributions: Decimal = Decimal("0")
    rental: Decimal = Decimal("0")
    capital_gains: Decimal = Decimal("0")
    other: Decimal = Decimal("0")
    total: Decimal = Decimal("0")


class DeductionBreakdown(BaseModel):
    by_category: dict[DeductionCategory, Decimal]
    total: Decimal


class TaxSummary(BaseModel):
    """Complete tax position for one person and financial year."""

    person: str
    financial_year: str
    rate_year: str
    income: IncomeBreakdown
    deductions: DeductionBreakdown
    franking_credits: Decimal
    tax_withheld: Decimal
    estimated_tax: TaxCalculationResult
    estimated_refund_or_owing: Decimal  # negative = refund
    notes: list[str] = []


class HouseholdTaxSummary(BaseModel):
    financial_year: str
    members: dict[str, TaxSummary]
    combined_tax: Decimal
    combined_refund_or_owing: Decimal


# --- Contribution results ---


class CapUsage(BaseModel):
    used: Decimal
    cap: Decimal
    remaining: Decimal
    percentage: Decimal


class CarryForwardAmount(BaseModel):
    financial_year: str
    amount: Decimal


class CarryForwardAvailability(BaseModel):
    available: Decimal
    eligible: bool
    breakdown: list[CarryForwardAmount] = []
    eligibility_data_missing: bool = False


class ContributionSummary(BaseModel):
    """Cap utilisation for one member and financial year."""

    member: str
    financial_year: str
    rate_year: str
    concessional: CapUsage
    non_concessional: CapUsage
    carry_forward: CarryForwardAvailability
    by_type: dict[ContributionType, Decimal] = {}
    notes: list[str] = []


class ContributionAlert(BaseModel):
    level: str  # "error" | "warning" | "info"
    message: str
