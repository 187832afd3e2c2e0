"""
Data Models Package

This package contains all Pydantic models used in the Personal Ledger.
All data flowing through the system must conform to these schemas.
"""

from ledger.models.transaction import (
    BalancePoint,
    Currency,
    CurrencySettings,
    LedgerStats,
    Theme,
    Transaction,
    TransactionType,
    TransactionUpdate,
    ValidationIssue,
)
from ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "BalancePoint",
    "Currency",
    "CurrencySettings",
    "LedgerStats",
    "Theme",
    "Transaction",
    "TransactionType",
    "TransactionUpdate",
    "ValidationIssue",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
