"""Exceptions and warnings raised by the tax engine."""


class TaxEngineError(Exception):
    """Base class for engine errors."""


class InvalidRecordData(TaxEngineError, ValueError):
    """A raw record broke a basic invariant (negative amount, bad year key, unknown type)."""

    def __init__(self, message: str, record: object = None) -> None:
        super().__init__(message)
        self.record = record


class RateTableError(TaxEngineError):
    """Rate configuration is malformed or has no table for the requested year."""


class YearAlreadyClosed(TaxEngineError):
    """A carry-forward record already exists for this member and financial year."""

    def __init__(self, member: str, financial_year: str) -> None:
        super().__init__(
            f"Financial year {financial_year} is already closed for member {member}. "
            "Use supersede() to replace it."
        )
        self.member = member
        self.financial_year = financial_year


class UnknownYearFallback(UserWarning):
    """No rate table for the exact year; the nearest earlier table was used."""


class MissingEligibilityData(UserWarning):
    """No prior year-end balance on record; carry-forward treated as not eligible."""
