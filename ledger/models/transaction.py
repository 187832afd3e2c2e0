"""
Core Data Models for Personal Ledger

These models define the schemas for all data flowing through the ledger.
They are designed to:
1. Enforce type safety at runtime
2. Round-trip through the persisted JSON format unchanged
3. Be serializable for storage, export and logging

DESIGN DECISION: The Transaction model is intentionally LENIENT.
It checks types, the income/expense enum and a positive amount, but not
the regex field rules. Those belong to the persisted-record validator
(ledger.validation), which gates every write to storage. A record can
therefore live in memory while still failing the stricter rules.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)


TWO_PLACES = Decimal("0.01")

# Alias keeps the `date` field name from shadowing the type in class bodies
CalendarDate = date


def _float_to_decimal(v: Any) -> Any:
    if isinstance(v, float):
        return Decimal(repr(v))
    return v


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


class Currency(str, Enum):
    """
    Display currencies the user can pick from.

    Amounts are always stored in the base currency (USD);
    these only affect how totals are shown.
    """
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    RWF = "RWF"


class Theme(str, Enum):
    """UI theme preference."""
    LIGHT = "light"
    DARK = "dark"


# =============================================================================
# CORE TRANSACTION MODEL
# =============================================================================

class Transaction(BaseModel):
    """
    A single income or expense record.

    Wire format (persisted snapshot, seed, import/export) uses camelCase
    for the timestamps: ``createdAt`` and ``updatedAt``.
    """
    model_config = ConfigDict(populate_by_name=True)

    # Identity
    id: str = Field(
        ...,
        min_length=1,
        description="Store-assigned identifier, numeric string"
    )

    type: TransactionType = Field(
        ...,
        description="income or expense"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Positive amount in the base currency"
    )
    category: str = Field(
        default="",
        description="Free-text category, may be empty"
    )
    description: str = Field(
        ...,
        description="What the transaction was for"
    )
    date: CalendarDate

    # Timestamps (persisted records only)
    created_at: Optional[str] = Field(
        default=None,
        alias="createdAt",
        description="ISO timestamp of creation"
    )
    updated_at: Optional[str] = Field(
        default=None,
        alias="updatedAt",
        description="ISO timestamp of the last update"
    )

    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        """Seed files carry numeric ids; the store compares them as strings."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator('amount', mode='before')
    @classmethod
    def float_amount_via_repr(cls, v: Any) -> Any:
        """12.5 must become Decimal('12.5'), not its binary expansion."""
        return _float_to_decimal(v)

    @field_serializer('amount', when_used='json')
    def serialize_amount(self, v: Decimal) -> Any:
        """Amounts are JSON numbers on the wire."""
        if v == v.to_integral_value():
            return int(v)
        return float(v)

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the sign it has on the balance."""
        return self.amount if self.is_income else -self.amount

    def to_record(self) -> dict:
        """
        Convert to the wire dictionary used for storage and export.

        Timestamps are omitted until the record has them.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class TransactionUpdate(BaseModel):
    """
    Partial update for an existing transaction.

    Only fields explicitly provided are merged over the stored record;
    everything else is preserved.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    type: Optional[TransactionType] = None
    amount: Optional[Decimal] = None
    category: Optional[str] = None
    description: Optional[str] = None
    date: Optional[CalendarDate] = None

    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator('amount', mode='before')
    @classmethod
    def float_amount_via_repr(cls, v: Any) -> Any:
        return _float_to_decimal(v)

    def changes(self) -> dict[str, Any]:
        """Fields the caller actually set, excluding the id."""
        return self.model_dump(exclude_unset=True, exclude={"id"})


# =============================================================================
# AGGREGATE MODELS
# =============================================================================

class LedgerStats(BaseModel):
    """Dashboard totals."""

    income: Decimal = Field(default=Decimal("0"))
    expenses: Decimal = Field(default=Decimal("0"))
    balance: Decimal = Field(default=Decimal("0"))
    transaction_count: int = Field(default=0, ge=0)


class BalancePoint(BaseModel):
    """Running balance after the transactions of one date entry."""

    date: CalendarDate
    balance: Decimal


# =============================================================================
# USER SETTINGS
# =============================================================================

def _default_symbols() -> dict[Currency, str]:
    return {
        Currency.USD: "$",
        Currency.EUR: "€",
        Currency.GBP: "£",
        Currency.RWF: "FRw",
    }


def _default_rates() -> dict[Currency, Decimal]:
    return {
        Currency.USD: Decimal("1"),
        Currency.EUR: Decimal("0.92"),
        Currency.GBP: Decimal("0.79"),
        Currency.RWF: Decimal("1300"),
    }


class CurrencySettings(BaseModel):
    """
    Display currency preference plus symbol and exchange-rate tables.

    Rates are units of the currency per one unit of the base currency (USD).
    The rate table is mutable at runtime.
    """

    currency: Currency = Field(default=Currency.USD)
    symbols: dict[Currency, str] = Field(default_factory=_default_symbols)
    rates: dict[Currency, Decimal] = Field(default_factory=_default_rates)

    @field_validator('rates')
    @classmethod
    def validate_rates(cls, v: dict[Currency, Decimal]) -> dict[Currency, Decimal]:
        for currency, rate in v.items():
            if rate <= 0:
                raise ValueError(f"Exchange rate for {currency.value} must be positive")
        return v

    def set_currency(self, currency: Currency | str) -> None:
        self.currency = Currency(currency)

    def set_rate(self, currency: Currency | str, rate: Decimal | float | str) -> None:
        """Change one exchange rate. Raises ValueError for non-positive rates."""
        value = Decimal(str(rate))
        if value <= 0:
            raise ValueError("Exchange rate must be positive")
        self.rates[Currency(currency)] = value

    def symbol(self, currency: Optional[Currency] = None) -> str:
        currency = currency or self.currency
        return self.symbols.get(currency, currency.value)

    def convert(self, amount: Decimal, currency: Optional[Currency] = None) -> Decimal:
        """Convert a base-currency amount, rounded to cents."""
        currency = currency or self.currency
        rate = self.rates.get(currency)
        if rate is None:
            raise ValueError(f"No exchange rate configured for {currency.value}")
        return (Decimal(amount) * rate).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single field rule a record fails."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'invalid_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
