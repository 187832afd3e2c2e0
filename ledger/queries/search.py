"""
Search & Highlight Engine

A raw pattern string plus a case-sensitivity flag compiles into a
record matcher and a markup function for the view layer.

DESIGN DECISION: Patterns are regular expressions typed by the user,
so compilation is expected to fail often while they type. A pattern
that does not compile matches NOTHING and highlights nothing; it never
raises to the caller, so the UI stays responsive.
"""

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Optional, TypeVar, Union

import structlog

from ledger.errors import MalformedPatternError
from ledger.models.transaction import Transaction


logger = structlog.get_logger(__name__)

HIGHLIGHT_TEMPLATE = '<mark aria-label="match">{}</mark>'

RecordLike = Union[Transaction, Mapping[str, Any]]
R = TypeVar("R", Transaction, Mapping)


def amount_text(amount: Any) -> str:
    """Decimal-string form of an amount: 12, 12.5, 0.75."""
    if isinstance(amount, Decimal):
        return format(amount.normalize(), "f")
    if isinstance(amount, float) and amount.is_integer():
        return str(int(amount))
    return str(amount)


def _searchable_fields(record: RecordLike) -> list[str]:
    """description, category, type label, amount."""
    if isinstance(record, Transaction):
        return [
            record.description,
            record.category,
            record.type.value,
            amount_text(record.amount),
        ]
    if isinstance(record, Mapping):
        kind = record.get("type")
        return [
            str(record.get("description") or ""),
            str(record.get("category") or ""),
            str(getattr(kind, "value", kind) or ""),
            amount_text(record.get("amount")),
        ]
    return []


def _compile_pattern(pattern: str, case_sensitive: bool) -> re.Pattern:
    flags = 0 if case_sensitive else re.IGNORECASE
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise MalformedPatternError(pattern, str(e))


def _identity(text: Optional[str]) -> Optional[str]:
    return text


@dataclass(frozen=True)
class CompiledSearch:
    """A compiled pattern: `matches` filters records, `markup` highlights text."""

    pattern: Optional[str]
    regex: Optional[re.Pattern]
    valid: bool = True

    @property
    def is_empty(self) -> bool:
        return self.valid and self.regex is None

    def matches(self, record: RecordLike) -> bool:
        if not self.valid:
            return False
        if self.regex is None:
            return True
        return any(self.regex.search(text) for text in _searchable_fields(record))

    def markup(self, text: Optional[str]) -> Optional[str]:
        """Wrap every non-overlapping match; other text is left verbatim."""
        if self.regex is None or not text:
            return text
        return self.regex.sub(lambda m: HIGHLIGHT_TEMPLATE.format(m.group(0)), text)

    def filter(self, records: Sequence[R]) -> list[R]:
        return [record for record in records if self.matches(record)]


def compile_search(pattern: Optional[str], case_sensitive: bool = False) -> CompiledSearch:
    """
    Compile a user pattern.

    - Empty or None: matches everything, markup is the identity
    - Invalid regex: matches nothing, markup is the identity
    """
    if not pattern:
        return CompiledSearch(pattern=pattern, regex=None)

    try:
        regex = _compile_pattern(pattern, case_sensitive)
    except MalformedPatternError as e:
        logger.debug("search_pattern_invalid", pattern=e.pattern, reason=e.reason)
        return CompiledSearch(pattern=pattern, regex=None, valid=False)

    return CompiledSearch(pattern=pattern, regex=regex)


def filter_and_highlight(
    records: Sequence[R],
    pattern: Optional[str],
    case_sensitive: bool = False,
) -> tuple[list[R], Callable[[Optional[str]], Optional[str]]]:
    """Filtered records plus the markup function for the same pattern."""
    search = compile_search(pattern, case_sensitive)
    if not search.valid:
        return [], _identity
    return search.filter(records), search.markup


def filter_by_keyword(records: Sequence[R], keyword: Optional[str]) -> Sequence[R]:
    """
    Case-insensitive substring search over description and category.

    A falsy or blank keyword returns the input sequence itself.
    """
    if not keyword:
        return records
    needle = keyword.strip().lower()
    if not needle:
        return records

    def _hit(record: R) -> bool:
        fields = _searchable_fields(record)[:2]
        return any(needle in field.lower() for field in fields)

    return [record for record in records if _hit(record)]
