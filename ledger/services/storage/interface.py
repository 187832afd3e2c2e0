"""
Abstract Storage Interface

DESIGN DECISION: Persistence is a key-value blob store, the same shape
as browser localStorage: one string value per key. This allows us to:
1. Keep the snapshot on local disk (one JSON file per key)
2. Use in-memory storage for testing
3. Swap in another backend without touching the store

Backends raise StorageError. The PersistenceGateway catches it, so a
broken backend never takes the ledger down.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ledger.models.audit import AuditEvent


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for the blob store behind the persistence gateway.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Replace the value stored under a key.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """
        Delete a key. Missing keys are ignored.

        Raises:
            StorageError: If the delete fails
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific entity, in chronological order.
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events (newest first).
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageUnavailableError(StorageError):
    """The storage backend could not be reached or read."""
    pass
