"""
End-to-end flow tests: startup, browse, preferences, import/export.

All sessions run against in-memory backends; only seed documents
are written to pytest's tmp_path.
"""

import asyncio
import json
import locale

import pytest

from ledger.config import Settings
from ledger.models.transaction import Currency, Theme
from ledger.orchestrator import (
    LedgerSession,
    bootstrap,
    configure_collation,
    create_app_components,
)
from ledger.queries import SortDirection, SortKey
from ledger.services.storage import InMemoryKeyValueStore

from tests.conftest import RECORDS_KEY


@pytest.fixture
def backend():
    return InMemoryKeyValueStore()


@pytest.fixture
def components(backend):
    return create_app_components(settings=Settings(), backend=backend)


@pytest.fixture
def session(components):
    asyncio.run(bootstrap(components))
    return LedgerSession(components)


def _write_seed(tmp_path, monkeypatch, records):
    path = tmp_path / "seed.json"
    path.write_text(json.dumps(records), encoding="utf-8")
    monkeypatch.setenv("LEDGER_STORAGE_SEED_PATH", str(path))
    return path


class TestBootstrap:

    def test_seed_used_when_nothing_persisted(self, components, backend):
        store = asyncio.run(bootstrap(components))
        assert len(store) == 8
        assert backend.get(RECORDS_KEY) is None

    def test_snapshot_wins_over_seed(self, backend, persisted_record):
        backend.set(RECORDS_KEY, json.dumps([persisted_record]))
        components = create_app_components(settings=Settings(), backend=backend)
        store = asyncio.run(bootstrap(components))
        assert [tx.id for tx in store.list()] == ["1"]
        assert store.get("1").description == "Lunch with team"

    def test_empty_snapshot_is_respected(self, backend):
        backend.set(RECORDS_KEY, "[]")
        components = create_app_components(settings=Settings(), backend=backend)
        assert len(asyncio.run(bootstrap(components))) == 0

    def test_unusable_snapshot_starts_empty(self, backend, persisted_record):
        backend.set(RECORDS_KEY, json.dumps([persisted_record, persisted_record]))
        components = create_app_components(settings=Settings(), backend=backend)
        assert len(asyncio.run(bootstrap(components))) == 0

    def test_missing_seed_starts_empty(self, tmp_path, monkeypatch, backend):
        monkeypatch.setenv("LEDGER_STORAGE_SEED_PATH", str(tmp_path / "absent.json"))
        components = create_app_components(settings=Settings(), backend=backend)
        assert len(asyncio.run(bootstrap(components))) == 0

    def test_invalid_seed_entry_starts_empty(self, tmp_path, monkeypatch, backend):
        _write_seed(tmp_path, monkeypatch, [
            {"type": "expense", "amount": 5, "description": "Coffee beans", "date": "2024-01-01"},
            {"type": "refund", "amount": 5, "description": "Odd entry", "date": "2024-01-02"},
        ])
        components = create_app_components(settings=Settings(), backend=backend)
        assert len(asyncio.run(bootstrap(components))) == 0

    def test_seed_without_ids_gets_positional_ids(self, tmp_path, monkeypatch, backend):
        _write_seed(tmp_path, monkeypatch, [
            {"type": "expense", "amount": 5, "description": "Coffee beans", "date": "2024-01-01"},
            {"type": "income", "amount": 50, "description": "Birthday gift", "date": "2024-01-02"},
        ])
        components = create_app_components(settings=Settings(), backend=backend)
        store = asyncio.run(bootstrap(components))
        assert [tx.id for tx in store.list()] == ["1", "2"]

    def test_mutations_survive_a_new_session(self, components, backend, new_expense):
        store = asyncio.run(bootstrap(components))
        added = store.add(new_expense)

        reopened = create_app_components(settings=Settings(), backend=backend)
        restored = asyncio.run(bootstrap(reopened))
        assert len(restored) == 9
        assert restored.get(added.id).description == "Pizza night"


class TestSessionSearch:

    def test_default_is_newest_first(self, session):
        result = session.search()
        dates = [tx.date for tx in result.transactions]
        assert dates == sorted(dates, reverse=True)
        assert result.pattern_valid is True

    def test_filter_then_sort(self, session):
        result = session.search("food|rent", sort_key=SortKey.AMOUNT, direction=SortDirection.ASC)
        assert [tx.description for tx in result.transactions] == [
            "Lunch with team", "Apartment rent",
        ]
        assert result.markup("Food") == '<mark aria-label="match">Food</mark>'

    def test_case_sensitive(self, session):
        assert session.search("salary", case_sensitive=True).transactions[0].id == "1"
        assert session.search("SALARY", case_sensitive=True).transactions == []

    def test_invalid_pattern(self, session):
        result = session.search("(")
        assert result.transactions == []
        assert result.pattern_valid is False
        assert result.markup("(") == "("


class TestSessionPreferences:

    def test_currency_persists_across_sessions(self, components, session):
        assert session.currency_settings.currency == Currency.USD
        assert session.set_currency("EUR") is True
        assert LedgerSession(components).currency_settings.currency == Currency.EUR

    def test_exchange_rate(self, session):
        session.set_exchange_rate(Currency.GBP, "0.8")
        assert str(session.currency_settings.rates[Currency.GBP]) == "0.8"
        with pytest.raises(ValueError):
            session.set_exchange_rate(Currency.GBP, -1)

    def test_currency_settings_is_a_copy(self, session):
        settings = session.currency_settings
        settings.set_currency(Currency.RWF)
        assert session.currency_settings.currency == Currency.USD

    def test_default_currency_from_environment(self, monkeypatch, backend):
        monkeypatch.setenv("LEDGER_DEFAULT_CURRENCY", "GBP")
        components = create_app_components(settings=Settings(), backend=backend)
        assert LedgerSession(components).currency_settings.currency == Currency.GBP

    def test_configuration_status(self, session, monkeypatch):
        assert session.configuration_status() == {"storage": True, "app": True}
        monkeypatch.setenv("LEDGER_LOG_LEVEL", "chatty")
        status = session.configuration_status()
        assert status["storage"] is True
        assert status["app"] is False
        assert "chatty" in status["app_error"]
        assert isinstance(status["app_error"], str)

    def test_toggle_theme(self, components, session):
        assert session.theme == Theme.LIGHT
        assert session.toggle_theme() == Theme.DARK
        assert LedgerSession(components).theme == Theme.DARK
        assert session.toggle_theme() == Theme.LIGHT


class TestSessionBackup:

    def test_export_then_import(self, session, tmp_path, new_expense):
        session.store.add(new_expense)
        exported = session.export_json()
        before = session.store.list()

        assert session.export_to_file(tmp_path / "backup.json") is True
        assert session.import_json(exported) == 9
        assert session.store.list() == before

    def test_seeded_records_export_after_first_save(self, session, tmp_path, new_expense):
        """Seed records carry no timestamps until the first save stamps them."""
        assert session.export_to_file(tmp_path / "early.json") is False
        session.store.add(new_expense)
        assert session.export_to_file(tmp_path / "later.json") is True


class TestCollation:

    def test_uses_environment_locale(self, monkeypatch):
        calls = []
        monkeypatch.setattr(locale, "setlocale", lambda category, name: calls.append((category, name)))
        assert configure_collation() is True
        assert calls == [(locale.LC_COLLATE, "")]

    def test_unusable_locale_falls_back(self, monkeypatch):
        def broken(category, name):
            raise locale.Error("unsupported locale setting")

        monkeypatch.setattr(locale, "setlocale", broken)
        assert configure_collation() is False

    def test_startup_configures_collation(self, monkeypatch, backend):
        calls = []
        monkeypatch.setattr(locale, "setlocale", lambda category, name: calls.append(category))
        create_app_components(settings=Settings(), backend=backend)
        assert calls == [locale.LC_COLLATE]
