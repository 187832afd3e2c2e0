"""Shared fixtures: in-memory backends and a wired store with a fixed clock."""

from datetime import datetime, timezone

import pytest

from ledger.audit import AuditLogger
from ledger.services.storage import (
    InMemoryAuditStorage,
    InMemoryKeyValueStore,
    PersistenceGateway,
)
from ledger.store import TransactionStore


FIXED_NOW = datetime(2024, 3, 15, 9, 30, tzinfo=timezone.utc)
RECORDS_KEY = "finance-tracker:data"


@pytest.fixture
def backend():
    return InMemoryKeyValueStore()


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage):
    return AuditLogger(audit_storage)


@pytest.fixture
def gateway(backend, audit_logger):
    return PersistenceGateway(backend, audit_logger=audit_logger)


@pytest.fixture
def store(gateway, audit_logger):
    return TransactionStore(
        gateway=gateway,
        audit_logger=audit_logger,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def persisted_record():
    """A record that passes persisted-record validation."""
    return {
        "id": "1",
        "type": "expense",
        "amount": 12.5,
        "category": "Food",
        "description": "Lunch with team",
        "date": "2024-01-08",
        "createdAt": "2024-01-08T12:00:00+00:00",
        "updatedAt": "2024-01-08T12:00:00+00:00",
    }


@pytest.fixture
def new_expense():
    return {
        "type": "expense",
        "amount": 20,
        "category": "Food",
        "description": "Pizza night",
    }
