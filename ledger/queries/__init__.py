"""Search, sort and report package."""

from ledger.queries.reports import balance_over_time, calculate_stats, category_totals
from ledger.queries.search import (
    CompiledSearch,
    compile_search,
    filter_and_highlight,
    filter_by_keyword,
)
from ledger.queries.sorting import SortDirection, SortKey, sort_transactions

__all__ = [
    "CompiledSearch",
    "SortDirection",
    "SortKey",
    "balance_over_time",
    "calculate_stats",
    "category_totals",
    "compile_search",
    "filter_and_highlight",
    "filter_by_keyword",
    "sort_transactions",
]
