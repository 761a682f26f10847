"""Deterministic aggregates computed from a validated statement."""

import math
from collections.abc import Mapping, Sequence
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from budget_worker.analysis.models import Category, SpendingStats, StatementRecord, Transaction
from budget_worker.analysis.validator import transactions_from_items

NO_DATE_INFORMATION = "no date information"

_ONE_DAY = timedelta(days=1)
_CENTS = Decimal("0.01")


def compute_spending_stats(
    transactions: Sequence[Transaction],
    total_spent: float,
) -> SpendingStats:
    """Derive the statement period and the average daily spend.

    The period spans the earliest to the latest transaction date; the day
    count includes both endpoints. Without dated transactions the period is
    NO_DATE_INFORMATION and the average is 0.
    """
    if not transactions:
        return SpendingStats(period=NO_DATE_INFORMATION, day_count=0, average_daily_spent=0.0)

    dates = sorted(t.date for t in transactions)
    first, last = dates[0], dates[-1]
    day_count = math.ceil(abs(last - first) / _ONE_DAY) + 1
    if day_count == 0:
        return SpendingStats(period=NO_DATE_INFORMATION, day_count=0, average_daily_spent=0.0)

    return SpendingStats(
        period=f"{_iso(first)} ~ {_iso(last)}",
        day_count=day_count,
        average_daily_spent=_round_cents(total_spent / day_count),
    )


def stats_from_structured_data(structured_data: Mapping[str, Any]) -> SpendingStats:
    """Recompute the aggregates from a persisted structured_data payload."""
    transactions = transactions_from_items(structured_data.get("items", []))
    return compute_spending_stats(transactions, float(structured_data.get("totalAmount") or 0))


def dominant_category(transactions: Sequence[Transaction]) -> Category:
    """Category with the largest summed absolute amount; ties go to the earlier category."""
    if not transactions:
        return Category.OTHER
    totals = dict.fromkeys(Category, 0.0)
    for transaction in transactions:
        totals[transaction.category] += abs(transaction.amount)
    return max(Category, key=lambda category: totals[category])


def build_structured_data(record: StatementRecord) -> dict[str, Any]:
    """Shape a statement into the persisted structured_data payload."""
    return {
        "totalAmount": record.total_spent,
        "category": dominant_category(record.transactions).value,
        "items": [t.to_dict() for t in record.transactions],
        "advice": record.advice,
    }


def _iso(value: date) -> str:
    return value.isoformat()


def _round_cents(value: float) -> float:
    return float(Decimal(repr(value)).quantize(_CENTS, rounding=ROUND_HALF_UP))
