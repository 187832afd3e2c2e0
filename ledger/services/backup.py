"""
Import / Export

Export writes the full transaction list as a pretty-printed JSON array.
Import replaces the WHOLE list or nothing: the document must be a JSON
array whose every element passes persisted-record validation.
"""

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

import structlog

from ledger.audit import AuditLogger
from ledger.errors import ImportFormatError, ValidationError
from ledger.models.transaction import Transaction
from ledger.store import TransactionStore
from ledger.validation import validate_record, validate_records


logger = structlog.get_logger(__name__)

INVALID_FORMAT_MESSAGE = "❌ Invalid JSON format. Please check your file."
UNREADABLE_MESSAGE = "❌ Could not import file. Invalid JSON or format."


def export_json(transactions: Iterable[Transaction]) -> str:
    """Pretty-printed JSON array of the given transactions."""
    records = [tx.to_record() for tx in transactions]
    return json.dumps(records, indent=2, ensure_ascii=False)


def export_to_file(
    transactions: Iterable[Transaction],
    path: Path,
    audit_logger: Optional[AuditLogger] = None,
) -> bool:
    """
    Validate every record, then write the export file.

    Any invalid record aborts the export; nothing is written.
    Returns True if the file was written.
    """
    transactions = list(transactions)
    for tx in transactions:
        if not validate_record(tx):
            reason = "Invalid record detected, aborting export."
            logger.error("export_aborted", reason=reason, transaction_id=tx.id)
            if audit_logger:
                audit_logger.log_export_failed(reason)
            return False

    path = Path(path)
    try:
        path.write_text(export_json(transactions), encoding="utf-8")
    except OSError as e:
        logger.error("export_failed", path=str(path), error=str(e))
        if audit_logger:
            audit_logger.log_export_failed(str(e))
        return False

    logger.info("ledger_exported", path=str(path), count=len(transactions))
    if audit_logger:
        audit_logger.log_ledger_exported(len(transactions), str(path))
    return True


def _reject(message: str, audit_logger: Optional[AuditLogger]) -> None:
    logger.warning("import_rejected", reason=message)
    if audit_logger:
        audit_logger.log_import_rejected(message)
    raise ImportFormatError(message)


def import_json(
    text: str,
    store: TransactionStore,
    audit_logger: Optional[AuditLogger] = None,
) -> int:
    """
    Replace the store's list with the records in a JSON document.

    Returns the number of imported transactions.

    Raises:
        ImportFormatError: the document was rejected; the store is unchanged.
    """
    try:
        data = json.loads(text)
    except ValueError:
        _reject(UNREADABLE_MESSAGE, audit_logger)

    if not validate_records(data):
        _reject(INVALID_FORMAT_MESSAGE, audit_logger)

    try:
        store.initialize_from(data, persist=True, source_name="import")
    except ValidationError as e:
        _reject(f"{INVALID_FORMAT_MESSAGE} ({e.message})", audit_logger)

    logger.info("ledger_imported", count=len(data))
    if audit_logger:
        audit_logger.log_ledger_imported(len(data))
    return len(data)


def import_from_file(
    path: Path,
    store: TransactionStore,
    audit_logger: Optional[AuditLogger] = None,
) -> int:
    """Read a JSON export from disk and import it."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        _reject(UNREADABLE_MESSAGE, audit_logger)
    return import_json(text, store, audit_logger)
