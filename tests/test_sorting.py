"""Tests for the sort stage."""

import pytest
from datetime import date

from ledger.models.transaction import Transaction
from ledger.queries import SortDirection, SortKey, sort_transactions


def _tx(record_id, day, description="Coffee beans", amount=5):
    return Transaction(
        id=record_id, type="expense", amount=amount,
        description=description, date=date(2024, 1, day),
    )


class TestSortByDate:

    def test_ascending_and_descending(self):
        records = [
            {"id": "a", "date": "2024-01-02"},
            {"id": "b", "date": "2024-01-01"},
        ]
        asc = sort_transactions(records, "date", "asc")
        desc = sort_transactions(records, "date", "desc")
        assert [r["date"] for r in asc] == ["2024-01-01", "2024-01-02"]
        assert [r["date"] for r in desc] == ["2024-01-02", "2024-01-01"]

    def test_ties_keep_original_order_ascending(self):
        records = [_tx("1", 5), _tx("2", 3), _tx("3", 5)]
        result = sort_transactions(records, SortKey.DATE, SortDirection.ASC)
        assert [tx.id for tx in result] == ["2", "1", "3"]

    def test_descending_reverses_ties(self):
        """Test desc is the reversed ascending result, ties included."""
        records = [_tx("1", 5), _tx("2", 3), _tx("3", 5)]
        result = sort_transactions(records, SortKey.DATE, SortDirection.DESC)
        assert [tx.id for tx in result] == ["3", "1", "2"]


class TestSortByOtherKeys:

    def test_description_ignores_case(self):
        records = [
            _tx("1", 1, "bus pass"),
            _tx("2", 1, "Apartment rent"),
            _tx("3", 1, "Coffee beans"),
        ]
        result = sort_transactions(records, "description")
        assert [tx.description for tx in result] == [
            "Apartment rent", "bus pass", "Coffee beans",
        ]

    def test_amount_is_numeric(self):
        records = [_tx("1", 1, amount=100), _tx("2", 1, amount=9.5), _tx("3", 1, amount=20)]
        result = sort_transactions(records, SortKey.AMOUNT, "desc")
        assert [tx.id for tx in result] == ["1", "3", "2"]

    def test_mixed_record_shapes(self):
        records = [{"id": "a", "amount": "12.5"}, {"id": "b", "amount": 3}]
        assert [r["id"] for r in sort_transactions(records, "amount")] == ["b", "a"]


class TestSortContract:

    @pytest.mark.parametrize("key", ["category", "", None, "DATE"])
    def test_unknown_key_keeps_order(self, key):
        records = [_tx("1", 5), _tx("2", 3)]
        result = sort_transactions(records, key, "desc")
        assert [tx.id for tx in result] == ["1", "2"]

    def test_input_is_not_mutated(self):
        records = [_tx("1", 5), _tx("2", 3)]
        result = sort_transactions(records, "date")
        assert [tx.id for tx in records] == ["1", "2"]
        assert result is not records

    def test_empty_list(self):
        assert sort_transactions([], "date", "desc") == []
