"""
Storage Services Package

Provides the abstract key-value interface, concrete backends, and the
persistence gateway the transaction store writes through.
"""

from ledger.services.storage.interface import (
    AuditStorageInterface,
    KeyValueStoreInterface,
    StorageError,
    StorageUnavailableError,
)
from ledger.services.storage.json_file import JsonFileKeyValueStore
from ledger.services.storage.memory import InMemoryAuditStorage, InMemoryKeyValueStore
from ledger.services.storage.gateway import PersistenceGateway
from ledger.services.storage.seed import load_seed

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "KeyValueStoreInterface",
    # Exceptions
    "StorageError",
    "StorageUnavailableError",
    # Implementations
    "InMemoryAuditStorage",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "PersistenceGateway",
    "load_seed",
]
