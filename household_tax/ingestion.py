"""Boundary validation: raw rows from the record store into typed records.

Bad rows are rejected with ``InvalidRecordData`` instead of being zeroed,
since they point at a data problem upstream.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from household_tax.errors import InvalidRecordData
from household_tax.models import CarryForwardRecord, ContributionRecord, DeductionRecord, IncomeRecord

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


def _first_error(error: ValidationError) -> str:
    detail = error.errors()[0]
    location = ".".join(str(part) for part in detail["loc"]) or "record"
    return f"{location}: {detail['msg']}"


def validate_records(
    model: type[RecordT],
    rows: Iterable[Mapping[str, Any] | RecordT],
) -> list[RecordT]:
    """Validate rows into ``model`` instances.

    Rows that are already ``model`` instances were validated when built and
    pass straight through.

    Raises:
        InvalidRecordData: on the first row that fails validation.
    """
    records: list[RecordT] = []
    for index, row in enumerate(rows):
        if isinstance(row, model):
            records.append(row)
            continue
        try:
            records.append(model.model_validate(row))
        except ValidationError as e:
            message = f"Rejected {model.__name__} at row {index}: {_first_error(e)}"
            logger.warning(message)
            raise InvalidRecordData(message, record=row) from e
    return records


def validate_income_records(rows: Iterable[Mapping[str, Any] | IncomeRecord]) -> list[IncomeRecord]:
    return validate_records(IncomeRecord, rows)


def validate_deduction_records(rows: Iterable[Mapping[str, Any] | DeductionRecord]) -> list[DeductionRecord]:
    return validate_records(DeductionRecord, rows)


def validate_contribution_records(
    rows: Iterable[Mapping[str, Any] | ContributionRecord],
) -> list[ContributionRecord]:
    return validate_records(ContributionRecord, rows)


def validate_carry_forward_records(
    rows: Iterable[Mapping[str, Any] | CarryForwardRecord],
) -> list[CarryForwardRecord]:
    return validate_records(CarryForwardRecord, rows)
