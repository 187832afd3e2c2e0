"""
Persistence Gateway

The only path between the ledger and its key-value backend.

GUARANTEES:
- Never raises to callers. Backend failures are logged and reported
  as "no data" on load and as False on save.
- Saves are all-or-nothing: one invalid record aborts the whole save
  and nothing is written.
- A failed save does NOT roll back the in-memory mutation that caused
  it. Memory and storage may diverge until the next successful save.
"""

import json
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Optional, Union

import structlog
from pydantic import ValidationError as PydanticValidationError

from ledger.config import StorageSettings, get_settings
from ledger.models.transaction import CurrencySettings, Theme, Transaction
from ledger.services.storage.interface import KeyValueStoreInterface, StorageError
from ledger.validation import validate_record

if TYPE_CHECKING:
    from ledger.audit import AuditLogger


logger = structlog.get_logger(__name__)

RecordLike = Union[Transaction, Mapping[str, Any]]


class PersistenceGateway:
    """
    Load/save of the transaction list, currency settings and theme.
    """

    def __init__(
        self,
        backend: KeyValueStoreInterface,
        storage_settings: Optional[StorageSettings] = None,
        audit_logger: Optional["AuditLogger"] = None,
        default_theme: Theme = Theme.LIGHT,
    ):
        settings = storage_settings or get_settings().storage
        self._backend = backend
        self._records_key = settings.records_key
        self._settings_key = settings.settings_key
        self._theme_key = settings.theme_key
        self._audit_logger = audit_logger
        self._default_theme = default_theme

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def load_records(self) -> Optional[list]:
        """
        Load the persisted transaction list.

        Returns None if nothing is stored, the snapshot is not a JSON
        array, or the backend fails.
        """
        try:
            raw = self._backend.get(self._records_key)
            if not raw:
                return None
            data = json.loads(raw)
        except (StorageError, ValueError) as e:
            logger.error("records_load_failed", key=self._records_key, error=str(e))
            if self._audit_logger:
                self._audit_logger.log_load_failed(str(e), key=self._records_key)
            return None

        if not isinstance(data, list):
            logger.warning("records_snapshot_not_a_list", key=self._records_key)
            return None
        return data

    def save_records(self, records: Iterable[RecordLike]) -> bool:
        """
        Validate and persist the full transaction list.

        Returns True if the snapshot was written.
        """
        payload = [
            record.to_record() if isinstance(record, Transaction) else dict(record)
            for record in records
        ]

        for record in payload:
            if not validate_record(record):
                reason = "Invalid record detected, aborting save."
                logger.error(
                    "records_save_aborted",
                    reason=reason,
                    record_id=record.get("id"),
                )
                if self._audit_logger:
                    self._audit_logger.log_save_failed(reason, key=self._records_key)
                return False

        try:
            self._backend.set(self._records_key, json.dumps(payload))
        except (StorageError, TypeError, ValueError) as e:
            logger.error("records_save_failed", key=self._records_key, error=str(e))
            if self._audit_logger:
                self._audit_logger.log_save_failed(str(e), key=self._records_key)
            return False

        logger.debug("records_saved", count=len(payload))
        return True

    def clear_records(self) -> bool:
        """Remove the persisted snapshot (for testing or reset)."""
        try:
            self._backend.remove(self._records_key)
        except StorageError as e:
            logger.error("records_clear_failed", error=str(e))
            return False
        return True

    # -------------------------------------------------------------------------
    # Currency settings
    # -------------------------------------------------------------------------

    def load_settings(self) -> Optional[CurrencySettings]:
        try:
            raw = self._backend.get(self._settings_key)
            if not raw:
                return None
            return CurrencySettings.model_validate_json(raw)
        except (StorageError, PydanticValidationError) as e:
            logger.warning("settings_load_failed", error=str(e))
            return None

    def save_settings(self, settings: CurrencySettings) -> bool:
        try:
            self._backend.set(self._settings_key, settings.model_dump_json())
        except StorageError as e:
            logger.error("settings_save_failed", error=str(e))
            return False
        return True

    # -------------------------------------------------------------------------
    # Theme
    # -------------------------------------------------------------------------

    def load_theme(self) -> Theme:
        try:
            raw = self._backend.get(self._theme_key)
        except StorageError as e:
            logger.warning("theme_load_failed", error=str(e))
            return self._default_theme
        try:
            return Theme(raw) if raw else self._default_theme
        except ValueError:
            return self._default_theme

    def save_theme(self, theme: Union[Theme, str]) -> bool:
        try:
            self._backend.set(self._theme_key, Theme(theme).value)
        except (StorageError, ValueError) as e:
            logger.error("theme_save_failed", error=str(e))
            return False
        return True
