"""
Report Data

Deterministic aggregations behind the dashboard totals and charts.
Only the numbers live here; drawing is the view layer's job.
"""

from collections.abc import Iterable
from decimal import Decimal
from typing import Union

from ledger.models.transaction import (
    TWO_PLACES,
    BalancePoint,
    LedgerStats,
    Transaction,
    TransactionType,
)


def calculate_stats(transactions: Iterable[Transaction]) -> LedgerStats:
    """Income, expenses and balance over any sequence of transactions."""
    income = Decimal("0")
    expenses = Decimal("0")
    count = 0
    for tx in transactions:
        count += 1
        if tx.is_income:
            income += tx.amount
        elif tx.is_expense:
            expenses += tx.amount
    return LedgerStats(
        income=income,
        expenses=expenses,
        balance=income - expenses,
        transaction_count=count,
    )


def category_totals(
    transactions: Iterable[Transaction],
    transaction_type: Union[TransactionType, str] = TransactionType.EXPENSE,
) -> dict[str, Decimal]:
    """
    Sum of amounts per category for one transaction type.

    Categories appear in first-seen order.
    """
    wanted = TransactionType(transaction_type)
    totals: dict[str, Decimal] = {}
    for tx in transactions:
        if tx.type != wanted:
            continue
        totals[tx.category] = totals.get(tx.category, Decimal("0")) + tx.amount
    return totals


def balance_over_time(transactions: Iterable[Transaction]) -> list[BalancePoint]:
    """
    Running balance, one point per transaction in date order.

    Transactions on the same date keep their relative order.
    """
    ordered = sorted(transactions, key=lambda tx: tx.date)
    balance = Decimal("0")
    points = []
    for tx in ordered:
        balance += tx.signed_amount
        points.append(BalancePoint(
            date=tx.date,
            balance=balance.quantize(TWO_PLACES),
        ))
    return points
