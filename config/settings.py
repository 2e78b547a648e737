"""Engine settings loaded from environment variables."""

from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Engine configuration from environment variables."""

    rates_file: str = "rates.yaml"
    company_tax_rate: Decimal = Decimal("0.30")
    carry_forward_balance_threshold: Decimal = Decimal("500000")
    carry_forward_first_accrual_year: str = "2018-19"

    model_config = {"env_prefix": "HOUSEHOLD_TAX_", "env_file": ".env", "extra": "ignore"}


settings = Settings()
