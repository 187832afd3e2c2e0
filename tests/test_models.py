"""
Tests for Personal Ledger

Test strategy:
1. Unit tests for individual components (models, validators, search, sort)
2. Store and flow tests against in-memory storage backends
3. No real files outside pytest's tmp_path
"""

import pytest
from datetime import date
from decimal import Decimal

from ledger.models.transaction import (
    Currency,
    CurrencySettings,
    Transaction,
    TransactionType,
    TransactionUpdate,
)
from ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestTransactionModel:
    """Tests for the Transaction model."""

    def test_transaction_creation(self):
        """Test Transaction model creation from wire data."""
        tx = Transaction.model_validate({
            "id": "3",
            "type": "expense",
            "amount": 64.3,
            "category": "Groceries",
            "description": "Weekly groceries",
            "date": "2024-01-05",
        })
        assert tx.type == TransactionType.EXPENSE
        assert tx.amount == Decimal("64.3")
        assert tx.date == date(2024, 1, 5)
        assert tx.created_at is None

    def test_float_amount_keeps_its_decimal_digits(self):
        """Test 0.1 becomes Decimal('0.1'), not the binary expansion."""
        tx = Transaction(
            id="1", type="income", amount=0.1, description="Tiny refund",
            date=date(2024, 1, 1),
        )
        assert tx.amount == Decimal("0.1")
        assert str(tx.amount) == "0.1"

    def test_numeric_id_is_coerced_to_string(self):
        """Test seed files with numeric ids."""
        tx = Transaction(
            id=7, type="income", amount=1, description="Gift card",
            date=date(2024, 1, 1),
        )
        assert tx.id == "7"

    def test_rejects_non_positive_amount(self):
        """Test that zero and negative amounts are rejected."""
        with pytest.raises(ValueError):
            Transaction(
                id="1", type="expense", amount=Decimal("-5"),
                description="Bad amount", date=date(2024, 1, 1),
            )
        with pytest.raises(ValueError):
            Transaction(
                id="1", type="expense", amount=0,
                description="Bad amount", date=date(2024, 1, 1),
            )

    def test_rejects_unknown_type(self):
        """Test that only income and expense are accepted."""
        with pytest.raises(ValueError):
            Transaction(
                id="1", type="transfer", amount=1,
                description="Move money", date=date(2024, 1, 1),
            )

    def test_to_record_uses_wire_names(self):
        """Test conversion to the persisted JSON shape."""
        tx = Transaction(
            id="1", type="expense", amount=Decimal("12.50"), category="Food",
            description="Lunch with team", date=date(2024, 1, 8),
            created_at="2024-01-08T12:00:00+00:00",
            updated_at="2024-01-08T12:00:00+00:00",
        )
        record = tx.to_record()
        assert record == {
            "id": "1",
            "type": "expense",
            "amount": 12.5,
            "category": "Food",
            "description": "Lunch with team",
            "date": "2024-01-08",
            "createdAt": "2024-01-08T12:00:00+00:00",
            "updatedAt": "2024-01-08T12:00:00+00:00",
        }

    def test_to_record_omits_missing_timestamps(self):
        """Test in-session records without timestamps."""
        tx = Transaction(
            id="1", type="income", amount=100, description="Salary advance",
            date=date(2024, 1, 1),
        )
        record = tx.to_record()
        assert "createdAt" not in record
        assert record["amount"] == 100
        assert isinstance(record["amount"], int)

    def test_signed_amount(self):
        """Test expenses count negatively towards the balance."""
        expense = Transaction(
            id="1", type="expense", amount=5, description="Coffee beans",
            date=date(2024, 1, 1),
        )
        assert expense.signed_amount == Decimal("-5")
        assert expense.is_expense and not expense.is_income


class TestTransactionUpdate:
    """Tests for partial updates."""

    def test_changes_only_contains_set_fields(self):
        """Test unset fields are not merged."""
        update = TransactionUpdate(id="4", amount=15)
        assert update.changes() == {"amount": Decimal("15")}

    def test_explicit_none_is_a_change(self):
        """Test explicitly set None is kept so the merge can reject it."""
        update = TransactionUpdate.model_validate({"id": "4", "category": None})
        assert update.changes() == {"category": None}


class TestCurrencySettings:
    """Tests for display currency settings."""

    def test_defaults(self):
        """Test default currency and tables."""
        settings = CurrencySettings()
        assert settings.currency == Currency.USD
        assert settings.symbol() == "$"
        assert settings.rates[Currency.USD] == Decimal("1")

    def test_convert(self):
        """Test conversion rounds to cents."""
        settings = CurrencySettings()
        settings.set_rate("EUR", "0.9")
        assert settings.convert(Decimal("10.05"), Currency.EUR) == Decimal("9.05")

    def test_set_rate_rejects_non_positive(self):
        """Test non-positive exchange rates."""
        settings = CurrencySettings()
        with pytest.raises(ValueError):
            settings.set_rate(Currency.GBP, 0)

    def test_json_round_trip(self):
        """Test settings survive persistence as JSON."""
        settings = CurrencySettings()
        settings.set_currency("GBP")
        restored = CurrencySettings.model_validate_json(settings.model_dump_json())
        assert restored == settings


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            description="Transaction added",
        )
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.transaction_added("7", "expense", "12.5")
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "transaction_added"
        assert log_dict["entity_id"] == "7"
        assert log_dict["details"]["amount"] == "12.5"

    def test_save_failed_is_an_error(self):
        """Test AuditEventBuilder.save_failed severity."""
        event = AuditEventBuilder.save_failed("disk full", key="finance-tracker:data")
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"
