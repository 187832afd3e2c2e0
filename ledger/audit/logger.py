"""
Audit Logger

DESIGN DECISION: Every mutation and every persistence problem is logged.
This provides:
1. Complete traceability of the session
2. Debugging capability when memory and storage diverge
3. A history the user can inspect

The audit logger:
- Is synchronous, like the store that drives it
- Gracefully handles failures (doesn't crash the app if logging fails)
"""

import logging
from typing import Optional

import structlog

from ledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from ledger.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through a stdlib handler at the given level."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper()))


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit storage backend, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_transaction_added(
        self,
        transaction_id: str,
        transaction_type: str,
        amount: str,
    ) -> None:
        self.log(AuditEventBuilder.transaction_added(
            transaction_id=transaction_id,
            transaction_type=transaction_type,
            amount=amount,
        ))

    def log_transaction_updated(self, transaction_id: str, fields: list[str]) -> None:
        self.log(AuditEventBuilder.transaction_updated(
            transaction_id=transaction_id,
            fields=fields,
        ))

    def log_transaction_deleted(self, transaction_id: str) -> None:
        self.log(AuditEventBuilder.transaction_deleted(transaction_id))

    def log_validation_failed(
        self,
        field: str,
        message: str,
        transaction_id: Optional[str] = None,
    ) -> None:
        self.log(AuditEventBuilder.validation_failed(
            field=field,
            message=message,
            transaction_id=transaction_id,
        ))

    def log_ledger_initialized(self, record_count: int, source: str) -> None:
        self.log(AuditEventBuilder.ledger_initialized(record_count, source))

    def log_ledger_imported(self, record_count: int) -> None:
        self.log(AuditEventBuilder.ledger_imported(record_count))

    def log_import_rejected(self, reason: str) -> None:
        self.log(AuditEventBuilder.import_rejected(reason))

    def log_ledger_exported(self, record_count: int, destination: str) -> None:
        self.log(AuditEventBuilder.ledger_exported(record_count, destination))

    def log_export_failed(self, reason: str) -> None:
        self.log(AuditEventBuilder.export_failed(reason))

    def log_save_failed(self, reason: str, key: Optional[str] = None) -> None:
        self.log(AuditEventBuilder.save_failed(reason, key))

    def log_load_failed(self, reason: str, key: Optional[str] = None) -> None:
        self.log(AuditEventBuilder.load_failed(reason, key))

    def log_seed_load_failed(self, source: str, reason: str) -> None:
        self.log(AuditEventBuilder.seed_load_failed(source, reason))

