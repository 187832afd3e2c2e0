"""
Sort Stage

Deterministic ordering applied after search filtering, before display.

NOTE: descending order is the REVERSAL of the stable ascending result,
not a descending comparator. Records with equal keys therefore come out
in reverse original order when sorting desc.
"""

import locale
from collections.abc import Mapping, Sequence
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Optional, TypeVar, Union

from ledger.models.transaction import Transaction


R = TypeVar("R", Transaction, Mapping)


class SortKey(str, Enum):
    DATE = "date"
    DESCRIPTION = "description"
    AMOUNT = "amount"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


def _field(record: Union[Transaction, Mapping[str, Any]], name: str) -> Any:
    if isinstance(record, Transaction):
        return getattr(record, name)
    return record.get(name)


def _date_key(record) -> date:
    value = _field(record, "date")
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        return date.min


def _description_key(record) -> str:
    text = str(_field(record, "description") or "")
    return locale.strxfrm(text.casefold())


def _amount_key(record) -> Decimal:
    value = _field(record, "amount")
    if isinstance(value, float):
        return Decimal(repr(value))
    try:
        return Decimal(str(value))
    except ArithmeticError:
        return Decimal("0")


_KEY_FUNCS: dict[SortKey, Callable[[Any], Any]] = {
    SortKey.DATE: _date_key,
    SortKey.DESCRIPTION: _description_key,
    SortKey.AMOUNT: _amount_key,
}


def _parse_key(key: Union[SortKey, str, None]) -> Optional[SortKey]:
    try:
        return SortKey(key)
    except ValueError:
        return None


def sort_transactions(
    records: Sequence[R],
    key: Union[SortKey, str, None],
    direction: Union[SortDirection, str] = SortDirection.ASC,
) -> list[R]:
    """
    Return a sorted copy of records.

    Unknown keys leave the order as given. The input is never mutated.
    """
    result = list(records)
    sort_key = _parse_key(key)
    if sort_key is None:
        return result

    result.sort(key=_KEY_FUNCS[sort_key])
    if getattr(direction, "value", direction) == SortDirection.DESC.value:
        result.reverse()
    return result
