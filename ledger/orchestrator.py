"""
Main Orchestrator for Personal Ledger

Wires the components together and defines the end-to-end flows:
1. Startup (persisted snapshot → or seed → store)
2. Browse (store → search filter → sort → view)
3. Settings, theme, import and export

DESIGN DECISION: Components are built once per session by
create_app_components() and passed by reference. Nothing here is a
module-level singleton.
"""

import locale
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

import structlog

from ledger.audit import AuditLogger, configure_logging
from ledger.config import Settings, get_settings, validate_all_settings
from ledger.errors import ValidationError
from ledger.models.transaction import Currency, CurrencySettings, Theme, Transaction
from ledger.queries import SortDirection, SortKey, compile_search, sort_transactions
from ledger.services.backup import export_json, export_to_file, import_json
from ledger.services.storage import (
    InMemoryAuditStorage,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    PersistenceGateway,
    load_seed,
)
from ledger.store import TransactionStore


logger = structlog.get_logger(__name__)


@dataclass
class LedgerComponents:
    """Everything one session needs, built once."""

    settings: Settings
    backend: KeyValueStoreInterface
    gateway: PersistenceGateway
    audit_logger: AuditLogger
    store: TransactionStore
    seed_path: Path


@dataclass
class SearchResult:
    """Filtered, sorted records plus the highlighter for the same pattern."""

    transactions: list[Transaction]
    markup: Callable[[Optional[str]], Optional[str]]
    pattern_valid: bool


def configure_collation() -> bool:
    """
    Use the user's locale for description sorting.

    Falls back to codepoint order when the environment locale is unusable.
    """
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logger.warning("collation_locale_unavailable", error=str(e))
        return False
    return True


def create_app_components(
    settings: Optional[Settings] = None,
    backend: Optional[KeyValueStoreInterface] = None,
) -> LedgerComponents:
    """
    Create all application components.

    Call this once at application startup.
    """
    settings = settings or get_settings()
    storage_settings = settings.storage
    app_settings = settings.app

    configure_logging(app_settings.log_level)
    configure_collation()

    backend = backend or JsonFileKeyValueStore(storage_settings.data_dir)
    audit_logger = AuditLogger(InMemoryAuditStorage())
    gateway = PersistenceGateway(
        backend,
        storage_settings=storage_settings,
        audit_logger=audit_logger,
        default_theme=Theme(app_settings.default_theme),
    )
    store = TransactionStore(gateway=gateway, audit_logger=audit_logger)

    return LedgerComponents(
        settings=settings,
        backend=backend,
        gateway=gateway,
        audit_logger=audit_logger,
        store=store,
        seed_path=storage_settings.resolved_seed_path,
    )


async def bootstrap(components: LedgerComponents) -> TransactionStore:
    """
    Initialize the store for a new session.

    The persisted snapshot wins; the seed document is read only when
    there is none. Unusable data leaves the store empty, never crashes.
    """
    store = components.store
    persisted = components.gateway.load_records()

    if persisted is not None:
        try:
            store.initialize_from(persisted, source_name="snapshot")
            return store
        except ValidationError as e:
            logger.error("snapshot_unusable", field=e.field, error=e.message)
            components.audit_logger.log_load_failed(e.message)
            store.initialize_from([], source_name="empty")
            return store

    seed = await load_seed(components.seed_path, components.audit_logger)
    try:
        store.initialize_from(seed, source_name="seed")
    except ValidationError as e:
        logger.error("seed_unusable", field=e.field, error=e.message)
        components.audit_logger.log_seed_load_failed(str(components.seed_path), e.message)
        store.initialize_from([], source_name="empty")
    return store


class LedgerSession:
    """
    Facade the view layer talks to.

    Holds the current search/sort state and user preferences on top of
    the store; mutations go straight to the store.
    """

    def __init__(self, components: LedgerComponents):
        self._components = components
        self._store = components.store
        self._gateway = components.gateway
        self._currency_settings = (
            self._gateway.load_settings()
            or CurrencySettings(currency=Currency(components.settings.app.default_currency))
        )
        self._theme = self._gateway.load_theme()

    @property
    def store(self) -> TransactionStore:
        return self._store

    # -------------------------------------------------------------------------
    # Browse
    # -------------------------------------------------------------------------

    def search(
        self,
        pattern: Optional[str] = None,
        case_sensitive: bool = False,
        sort_key: Union[SortKey, str, None] = SortKey.DATE,
        direction: Union[SortDirection, str] = SortDirection.DESC,
    ) -> SearchResult:
        """Store → filter → sort, the pipeline behind the transaction list."""
        search = compile_search(pattern, case_sensitive)
        filtered = search.filter(self._store.list())
        return SearchResult(
            transactions=sort_transactions(filtered, sort_key, direction),
            markup=search.markup,
            pattern_valid=search.valid,
        )

    # -------------------------------------------------------------------------
    # Preferences
    # -------------------------------------------------------------------------

    @property
    def currency_settings(self) -> CurrencySettings:
        return self._currency_settings.model_copy(deep=True)

    def set_currency(self, currency: Union[Currency, str]) -> bool:
        self._currency_settings.set_currency(currency)
        return self._gateway.save_settings(self._currency_settings)

    def set_exchange_rate(self, currency: Union[Currency, str], rate) -> bool:
        self._currency_settings.set_rate(currency, rate)
        return self._gateway.save_settings(self._currency_settings)

    def configuration_status(self) -> dict[str, Union[bool, str]]:
        """Which settings groups load from the environment, for a settings view."""
        return validate_all_settings(self._components.settings)

    @property
    def theme(self) -> Theme:
        return self._theme

    def toggle_theme(self) -> Theme:
        self._theme = Theme.DARK if self._theme == Theme.LIGHT else Theme.LIGHT
        self._gateway.save_theme(self._theme)
        return self._theme

    # -------------------------------------------------------------------------
    # Import / export
    # -------------------------------------------------------------------------

    def export_json(self) -> str:
        return export_json(self._store.list())

    def export_to_file(self, path: Optional[Path] = None) -> bool:
        path = path or Path(self._components.settings.app.export_filename)
        return export_to_file(self._store.list(), path, self._components.audit_logger)

    def import_json(self, text: str) -> int:
        return import_json(text, self._store, self._components.audit_logger)
