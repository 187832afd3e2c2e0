"""
Audit Models for Personal Ledger

Every mutation of the ledger and every persistence problem is recorded
as an audit event. This provides:
1. Traceability of what changed and when
2. Debugging information when storage and memory diverge
3. Ability to reconstruct the session history

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


AUDIT_DESCRIPTION_MAX = 500


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Store mutations
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"
    VALIDATION_FAILED = "validation_failed"
    LEDGER_INITIALIZED = "ledger_initialized"

    # Import / export
    LEDGER_IMPORTED = "ledger_imported"
    IMPORT_REJECTED = "import_rejected"
    LEDGER_EXPORTED = "ledger_exported"
    EXPORT_FAILED = "export_failed"

    # Persistence
    SAVE_FAILED = "save_failed"
    LOAD_FAILED = "load_failed"
    SEED_LOAD_FAILED = "seed_load_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'ledger')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Event details
    description: str = Field(
        ...,
        max_length=AUDIT_DESCRIPTION_MAX,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added("7", "expense", "12.50")
        event = AuditEventBuilder.save_failed("Invalid record detected")
    """

    @staticmethod
    def transaction_added(
        transaction_id: str,
        transaction_type: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction added",
            details={
                "type": transaction_type,
                "amount": amount,
            },
        )

    @staticmethod
    def transaction_updated(
        transaction_id: str,
        fields: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction updated",
            details={"fields": fields},
        )

    @staticmethod
    def transaction_deleted(transaction_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction deleted",
        )

    @staticmethod
    def validation_failed(
        field: str,
        message: str,
        transaction_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Rejected transaction: invalid {field}"[:AUDIT_DESCRIPTION_MAX],
            details={"field": field, "message": message},
        )

    @staticmethod
    def ledger_initialized(record_count: int, source: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_INITIALIZED,
            entity_type="ledger",
            description=f"Ledger initialized with {record_count} transactions",
            details={"record_count": record_count, "source": source},
        )

    @staticmethod
    def ledger_imported(record_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_IMPORTED,
            entity_type="ledger",
            description=f"Imported {record_count} transactions",
            details={"record_count": record_count},
        )

    @staticmethod
    def import_rejected(reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            description="Import rejected",
            error_message=reason,
        )

    @staticmethod
    def ledger_exported(record_count: int, destination: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_EXPORTED,
            entity_type="ledger",
            description=f"Exported {record_count} transactions",
            details={"record_count": record_count, "destination": destination},
        )

    @staticmethod
    def export_failed(reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="ledger",
            description="Export aborted",
            error_message=reason,
        )

    @staticmethod
    def save_failed(reason: str, key: Optional[str] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="storage",
            entity_id=key,
            description="Failed to save data",
            error_message=reason,
        )

    @staticmethod
    def load_failed(reason: str, key: Optional[str] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="storage",
            entity_id=key,
            description="Failed to load data",
            error_message=reason,
        )

    @staticmethod
    def seed_load_failed(source: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SEED_LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="ledger",
            description="Failed to load seed data",
            details={"source": source},
            error_message=reason,
        )
