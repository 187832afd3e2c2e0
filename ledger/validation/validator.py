"""
Record Validation

Pure predicates over a single transaction record. They never raise:
any malformed input, including non-mapping input, simply fails.

DESIGN DECISION: There are two gates, on purpose.

GATE 1 - STORE ADD PATH (ledger.store):
- Required fields present, income/expense, positive number
- Lenient: free-text fields are not regex-checked

GATE 2 - PERSISTED RECORD (this module):
- Regex-constrained description, amount, category and date
- id and createdAt/updatedAt timestamps required
- Applied to every save, export and import

A record can pass gate 1 and fail gate 2. It then lives in memory but
the save that follows is aborted. Validation NEVER silently fixes records.
"""

import re
from collections.abc import Mapping
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ledger.models.transaction import Transaction, ValidationIssue


# "no leading/trailing whitespace, at least one non-space character"
DESCRIPTION_PATTERN = re.compile(r"^\S(?:.*\S)?$", re.DOTALL)
# back-reference: "food food", "Food FOOD"
REPEATED_WORD_PATTERN = re.compile(r"\b(\w+)\s+\1\b", re.IGNORECASE)
# no leading zero unless it precedes the decimal point, at most 2 decimals
AMOUNT_PATTERN = re.compile(r"^(?!0\d)\d+(?:\.\d{1,2})?$")
# letters separated by single spaces or hyphens
CATEGORY_PATTERN = re.compile(r"^[A-Za-z]+(?:[ -][A-Za-z]+)*$")
CATEGORY_MAX_LENGTH = 30
# February always allows 01-29; leap years are not checked
DATE_PATTERN = re.compile(
    r"^\d{4}-(?:"
    r"(?:0[13578]|1[02])-(?:0[1-9]|[12]\d|3[01])"
    r"|(?:0[469]|11)-(?:0[1-9]|[12]\d|30)"
    r"|02-(?:0[1-9]|1\d|2\d)"
    r")$"
)
MIN_DESCRIPTION_LENGTH = 3

REQUIRED_TIMESTAMPS = ("createdAt", "updatedAt")


def validate_description(desc: Any) -> bool:
    """At least 3 significant characters, trimmed, no repeated word."""
    return (
        isinstance(desc, str)
        and DESCRIPTION_PATTERN.match(desc) is not None
        and len(desc.strip()) >= MIN_DESCRIPTION_LENGTH
        and REPEATED_WORD_PATTERN.search(desc) is None
    )


def validate_amount(amount: Any) -> bool:
    """Positive, no leading zeros, up to 2 decimal places."""
    if isinstance(amount, bool) or amount is None:
        return False
    text = str(amount)
    if AMOUNT_PATTERN.match(text) is None:
        return False
    try:
        return Decimal(text) > 0
    except InvalidOperation:
        return False


def validate_category(cat: Any) -> bool:
    """Empty, or letters separated by single spaces/hyphens (max 30 chars)."""
    if not isinstance(cat, str):
        return False
    if cat == "":
        return True
    return len(cat) <= CATEGORY_MAX_LENGTH and CATEGORY_PATTERN.match(cat) is not None


def validate_date(value: Any) -> bool:
    """Literal YYYY-MM-DD with month-length day ranges."""
    if isinstance(value, date):
        value = value.isoformat()
    return isinstance(value, str) and DATE_PATTERN.match(value) is not None


def _as_mapping(record: Any) -> Optional[Mapping]:
    if isinstance(record, Transaction):
        return record.to_record()
    if isinstance(record, Mapping):
        return record
    return None


class RecordValidator:
    """
    Explains which field rules a record fails.

    The module-level predicates answer yes/no; this class produces
    ValidationIssue objects for logs and user-facing messages.
    """

    def _field_issues(self, record: Mapping, require_date: bool) -> list[ValidationIssue]:
        issues = []

        if not validate_description(record.get("description")):
            issues.append(ValidationIssue(
                field="description",
                issue_type="invalid_format",
                message=(
                    "Description needs at least 3 characters, no surrounding "
                    "spaces and no repeated words"
                ),
            ))

        if not validate_amount(record.get("amount")):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be a positive number with at most 2 decimals",
            ))

        if not validate_category(record.get("category")):
            issues.append(ValidationIssue(
                field="category",
                issue_type="invalid_format",
                message="Category may only contain letters, spaces and hyphens (max 30)",
            ))

        if require_date or "date" in record:
            if not validate_date(record.get("date")):
                issues.append(ValidationIssue(
                    field="date",
                    issue_type="invalid_format",
                    message="Date must be a valid YYYY-MM-DD date",
                ))

        return issues

    def check_new_entry(self, record: Any) -> list[ValidationIssue]:
        """Field rules only; id, timestamps and date may be absent."""
        mapping = _as_mapping(record)
        if mapping is None:
            return [ValidationIssue(
                field="record",
                issue_type="invalid_type",
                message="Record must be an object",
            )]
        return self._field_issues(mapping, require_date=False)

    def check_persisted(self, record: Any) -> list[ValidationIssue]:
        """Full persisted-record rules."""
        mapping = _as_mapping(record)
        if mapping is None:
            return [ValidationIssue(
                field="record",
                issue_type="invalid_type",
                message="Record must be an object",
            )]

        issues = []
        record_id = mapping.get("id")
        if record_id is None or record_id == "":
            issues.append(ValidationIssue(
                field="id",
                issue_type="missing",
                message="Record id is required",
            ))

        issues.extend(self._field_issues(mapping, require_date=True))

        for key in REQUIRED_TIMESTAMPS:
            if not isinstance(mapping.get(key), str):
                issues.append(ValidationIssue(
                    field=key,
                    issue_type="missing",
                    message=f"{key} timestamp is required",
                ))

        return issues

    def get_user_friendly_summary(self, issues: list[ValidationIssue]) -> str:
        if not issues:
            return "✅ All checks passed!"
        lines = ["❌ Please fix the following:"]
        for issue in issues:
            lines.append(f"   • {issue.message}")
        return "\n".join(lines)


_validator = RecordValidator()


def validate_record(record: Any) -> bool:
    """True iff the record may be written to persistent storage."""
    try:
        return not _validator.check_persisted(record)
    except Exception:
        return False


def validate_records(records: Any) -> bool:
    """True iff records is a list and every element validates."""
    if not isinstance(records, list):
        return False
    return all(validate_record(record) for record in records)


def validate_new_entry(record: Any) -> bool:
    """Stricter form for user input, before the store assigns id and timestamps."""
    try:
        return not _validator.check_new_entry(record)
    except Exception:
        return False
