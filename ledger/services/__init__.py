"""Services package."""

from ledger.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    PersistenceGateway,
    StorageError,
    StorageUnavailableError,
    load_seed,
)

__all__ = [
    "AuditStorageInterface",
    "InMemoryAuditStorage",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStoreInterface",
    "PersistenceGateway",
    "StorageError",
    "StorageUnavailableError",
    "load_seed",
]
