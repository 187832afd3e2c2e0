"""
Ledger Exceptions

Validation and not-found errors are raised synchronously by store
mutations and must be handled by the immediate caller.

Persistence failures (StorageError, in ledger.services.storage) and
malformed search patterns are absorbed at their own boundaries and
never reach callers as exceptions.
"""

from typing import Optional


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class ValidationError(LedgerError):
    """A transaction field is missing or invalid. No state was changed."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class NotFoundError(LedgerError):
    """No transaction with the requested id exists. No state was changed."""

    def __init__(self, record_id: Optional[str]):
        super().__init__(f"Transaction not found: {record_id}")
        self.record_id = record_id


class ImportFormatError(LedgerError):
    """An import batch was rejected as a whole."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MalformedPatternError(LedgerError):
    """A search pattern is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"Invalid search pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason
