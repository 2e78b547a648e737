"""Shared test fixtures."""

from unittest.mock import MagicMock

import pytest

from household_tax.calculators.tax_data import TAX_YEARS, RateTable


@pytest.fixture
def rates_2024() -> RateTable:
    return TAX_YEARS["2024-25"]


@pytest.fixture
def rates_2023() -> RateTable:
    return TAX_YEARS["2023-24"]


@pytest.fixture
def mock_source() -> MagicMock:
    """Record source holding grant's 2024-25 records as plain dict rows."""
    source = MagicMock()
    source.income_records.return_value = [
        {
            "person": "grant",
            "financial_year": "2024-25",
            "income_type": "salary",
            "amount": "95000",
            "tax_withheld": "22000",
        },
        {
            "person": "grant",
            "financial_year": "2024-25",
            "income_type": "dividend",
            "amount": "7000",
            "franking_credits": "3000",
        },
    ]
    source.deduction_records.return_value = [
        {"person": "grant", "financial_year": "2024-25", "category": "work_from_home", "amount": "2000"},
    ]
    source.contribution_records.return_value = []
    source.carry_forward_records.return_value = []
    return source
