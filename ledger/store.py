"""
Transaction Store

The authoritative in-memory list of transactions for one session.

DESIGN DECISION: The store is an explicit object, constructed once and
passed to its collaborators. There is no module-level singleton.

GUARANTEES:
- Ids are unique across the live list after every mutation
- A rejected mutation leaves the list untouched
- Every mutation persists first, then notifies listeners, synchronously,
  before the mutating call returns
- Callers only ever see copies; the store is the sole mutator
"""

from __future__ import annotations

import copy
import re
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Optional, Union

import structlog
from pydantic import ValidationError as PydanticValidationError

from ledger.audit import AuditLogger
from ledger.errors import NotFoundError, ValidationError
from ledger.models.transaction import (
    LedgerStats,
    Transaction,
    TransactionType,
    TransactionUpdate,
)
from ledger.services.storage import PersistenceGateway


logger = structlog.get_logger(__name__)

Listener = Callable[[list[Transaction]], None]
RecordLike = Union[Transaction, Mapping[str, Any]]

REQUIRED_FIELDS = ("type", "amount", "category", "description")

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _numeric_id(value: Any) -> int:
    """Leading integer of an id, 0 when there is none."""
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


def _first_error_field(exc: PydanticValidationError) -> str:
    errors = exc.errors()
    if errors and errors[0].get("loc"):
        return str(errors[0]["loc"][0])
    return "record"


def _coerce_date(value: Union[date, str]) -> date:
    return value if isinstance(value, date) else date.fromisoformat(value)


def _same_id(stored: str, wanted: Any) -> bool:
    """Loose id equality: "1", 1 and 1.0 all name the same transaction."""
    if stored == str(wanted):
        return True
    if isinstance(wanted, bool):
        return False
    try:
        return Decimal(stored) == Decimal(str(wanted))
    except ArithmeticError:
        return False


class TransactionStore:
    """
    Owns the transaction list, its listeners and its mutation protocol.

    Collaborators are optional: without a gateway nothing is persisted,
    without an audit logger nothing is audited.
    """

    def __init__(
        self,
        gateway: Optional[PersistenceGateway] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._transactions: list[Transaction] = []
        self._listeners: list[Listener] = []
        self._gateway = gateway
        self._audit_logger = audit_logger
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def __len__(self) -> int:
        return len(self._transactions)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _now_iso(self) -> str:
        return self._clock().isoformat()

    def _today(self) -> date:
        return self._clock().date()

    def _next_id(self) -> str:
        """High-water mark over the current list, plus one."""
        max_id = 0
        for transaction in self._transactions:
            max_id = max(max_id, _numeric_id(transaction.id))
        return str(max_id + 1)

    def _index_of(self, record_id: Any) -> int:
        for idx, transaction in enumerate(self._transactions):
            if _same_id(transaction.id, record_id):
                return idx
        return -1

    def _reject(self, field: str, message: str, record_id: Optional[str] = None) -> None:
        if self._audit_logger:
            self._audit_logger.log_validation_failed(field, message, record_id)
        raise ValidationError(field, message)

    def _persist(self) -> bool:
        """
        Write the full list through the gateway.

        Records still missing timestamps get them now; a failed save does
        not undo the mutation that triggered it.
        """
        if self._gateway is None:
            return True

        now = None
        for idx, transaction in enumerate(self._transactions):
            if transaction.created_at is None or transaction.updated_at is None:
                now = now or self._now_iso()
                self._transactions[idx] = transaction.model_copy(update={
                    "created_at": transaction.created_at or now,
                    "updated_at": transaction.updated_at or now,
                })

        saved = self._gateway.save_records(self._transactions)
        if not saved:
            logger.warning("store_persist_failed", count=len(self._transactions))
        return saved

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.list())

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def initialize_from(
        self,
        source: Iterable[RecordLike],
        *,
        persist: bool = False,
        source_name: str = "memory",
    ) -> None:
        """
        Replace the whole list with a deep copy of source.

        Entries without an id get their 1-based position as id, or the
        next free id when that position is already taken. Any entry that
        cannot be coerced into a Transaction rejects the whole call.
        """
        entries: list[dict] = []
        for entry in source:
            if isinstance(entry, Transaction):
                entries.append(entry.to_record())
            elif isinstance(entry, Mapping):
                entries.append(copy.deepcopy(dict(entry)))
            else:
                self._reject("record", "Transaction must be an object")

        taken: set[str] = set()
        for entry in entries:
            record_id = entry.get("id")
            if record_id is None or record_id == "":
                continue
            record_id = str(record_id)
            if record_id in taken:
                self._reject("id", "Duplicate transaction id", record_id)
            taken.add(record_id)

        for position, entry in enumerate(entries, start=1):
            if entry.get("id") is None or entry.get("id") == "":
                candidate = str(position)
                if candidate in taken:
                    candidate = str(max(_numeric_id(i) for i in taken) + 1)
                entry["id"] = candidate
                taken.add(candidate)

        transactions = []
        for entry in entries:
            try:
                transactions.append(Transaction.model_validate(entry))
            except PydanticValidationError as e:
                field = _first_error_field(e)
                self._reject(field, f"Invalid {field} in transaction", str(entry.get("id")))

        self._transactions = transactions
        logger.info("store_initialized", count=len(transactions), source=source_name)
        if self._audit_logger:
            self._audit_logger.log_ledger_initialized(len(transactions), source_name)

        if persist:
            self._persist()
        self._notify()

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add(self, partial: Mapping[str, Any]) -> Transaction:
        """
        Validate and append a new transaction.

        Raises:
            ValidationError: citing the first missing or invalid field.
                The list is unchanged.
        """
        if not isinstance(partial, Mapping):
            self._reject("record", "Transaction must be an object")

        for field in REQUIRED_FIELDS:
            if field not in partial or partial[field] is None or partial[field] == "":
                self._reject(field, f"Missing required field: {field}")

        try:
            TransactionType(partial["type"])
        except ValueError:
            self._reject("type", "Type must be 'income' or 'expense'")

        amount = partial["amount"]
        if (
            isinstance(amount, bool)
            or not isinstance(amount, (int, float, Decimal))
            or (isinstance(amount, Decimal) and not amount.is_finite())
            or not amount > 0
        ):
            self._reject("amount", "Amount must be a positive number")

        now = self._now_iso()
        record = copy.deepcopy(dict(partial))
        for key in ("created_at", "updated_at"):
            record.pop(key, None)
        record["id"] = self._next_id()
        record["date"] = record.get("date") or self._today()
        record["createdAt"] = now
        record["updatedAt"] = now

        try:
            transaction = Transaction.model_validate(record)
        except PydanticValidationError as e:
            field = _first_error_field(e)
            self._reject(field, f"Invalid value for {field}")

        self._transactions.append(transaction)
        logger.info("transaction_added", transaction_id=transaction.id)
        if self._audit_logger:
            self._audit_logger.log_transaction_added(
                transaction_id=transaction.id,
                transaction_type=transaction.type.value,
                amount=str(transaction.amount),
            )

        self._persist()
        self._notify()
        return transaction.model_copy(deep=True)

    def update(self, changes: Union[TransactionUpdate, Mapping[str, Any]]) -> Transaction:
        """
        Shallow-merge the provided fields over an existing transaction.

        The id is resolved before any field is checked, and the merged
        record must still be a valid Transaction.

        Raises:
            NotFoundError: no transaction has this id
            ValidationError: the merge would produce an invalid record
        """
        if isinstance(changes, TransactionUpdate):
            record_id = changes.id
        elif isinstance(changes, Mapping) and changes.get("id") not in (None, ""):
            record_id = changes["id"]
        else:
            raise NotFoundError(None)

        idx = self._index_of(record_id)
        if idx == -1:
            raise NotFoundError(str(record_id))
        existing = self._transactions[idx]

        if not isinstance(changes, TransactionUpdate):
            try:
                changes = TransactionUpdate.model_validate({**changes, "id": existing.id})
            except PydanticValidationError as e:
                field = _first_error_field(e)
                self._reject(field, f"Invalid value for {field}", existing.id)

        fields = changes.changes()
        merged = {
            **existing.model_dump(),
            **fields,
            "id": existing.id,
            "updated_at": self._now_iso(),
        }
        try:
            updated = Transaction.model_validate(merged)
        except PydanticValidationError as e:
            field = _first_error_field(e)
            self._reject(field, f"Update would make {field} invalid", existing.id)

        self._transactions[idx] = updated
        logger.info("transaction_updated", transaction_id=updated.id, fields=sorted(fields))
        if self._audit_logger:
            self._audit_logger.log_transaction_updated(updated.id, sorted(fields))

        self._persist()
        self._notify()
        return updated.model_copy(deep=True)

    def delete_by_id(self, record_id: Any) -> bool:
        """
        Remove the first transaction with this id.

        Unknown ids are a no-op: nothing is persisted or notified.
        Returns True if a transaction was removed.
        """
        idx = self._index_of(record_id)
        if idx == -1:
            return False

        removed = self._transactions.pop(idx)
        logger.info("transaction_deleted", transaction_id=removed.id)
        if self._audit_logger:
            self._audit_logger.log_transaction_deleted(removed.id)

        self._persist()
        self._notify()
        return True

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    def list(self) -> list[Transaction]:
        """Independent copies of all transactions, in insertion order."""
        return [transaction.model_copy(deep=True) for transaction in self._transactions]

    def get(self, record_id: Any) -> Optional[Transaction]:
        idx = self._index_of(record_id)
        if idx == -1:
            return None
        return self._transactions[idx].model_copy(deep=True)

    def subscribe(self, listener: Listener) -> Callable[[], bool]:
        """
        Register a listener and replay the current list to it immediately.

        Returns a callable that unsubscribes the listener.
        """
        self._listeners.append(listener)
        listener(self.list())
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> bool:
        try:
            self._listeners.remove(listener)
        except ValueError:
            return False
        return True

    # -------------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------------

    def income(self) -> Decimal:
        return sum(
            (t.amount for t in self._transactions if t.is_income),
            Decimal("0"),
        )

    def expenses(self) -> Decimal:
        return sum(
            (t.amount for t in self._transactions if t.is_expense),
            Decimal("0"),
        )

    def balance(self) -> Decimal:
        return self.income() - self.expenses()

    def stats(self) -> LedgerStats:
        income = self.income()
        expenses = self.expenses()
        return LedgerStats(
            income=income,
            expenses=expenses,
            balance=income - expenses,
            transaction_count=len(self._transactions),
        )

    def by_category(self, category: str) -> list[Transaction]:
        return [
            t.model_copy(deep=True) for t in self._transactions
            if t.category == category
        ]

    def by_date_range(
        self,
        start: Union[date, str],
        end: Union[date, str],
    ) -> list[Transaction]:
        """Transactions dated within [start, end], inclusive."""
        start_date = _coerce_date(start)
        end_date = _coerce_date(end)
        return [
            t.model_copy(deep=True) for t in self._transactions
            if start_date <= t.date <= end_date
        ]
