"""Record validation package."""

from ledger.validation.validator import (
    RecordValidator,
    validate_amount,
    validate_category,
    validate_date,
    validate_description,
    validate_new_entry,
    validate_record,
    validate_records,
)

__all__ = [
    "RecordValidator",
    "validate_amount",
    "validate_category",
    "validate_date",
    "validate_description",
    "validate_new_entry",
    "validate_record",
    "validate_records",
]
