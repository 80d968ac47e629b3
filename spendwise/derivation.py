"""Derived budget figures.

This module contains pure functions that turn the store's income and
expense list into the values the dashboard displays: the month's expense
subset, its total, the remaining balance, a per-category breakdown and a
per-day spending series.  Nothing here is cached or persisted; callers
recompute from scratch on every read, which is cheap at the expected
data volume (hundreds of rows).

The functions never mutate their inputs, so calling any of them twice on
the same arguments yields identical results.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

import pandas as pd

from .errors import ValidationError
from .models import Expense, parse_year_month

logger = logging.getLogger(__name__)

FRAME_COLUMNS = ["id", "name", "amount", "category", "timestamp"]


@dataclass(frozen=True)
class BudgetSnapshot:
    """Everything the presentation layer needs for one render."""

    year_month: Optional[str]
    income: float
    expenses: List[Expense] = field(default_factory=list)
    total: float = 0.0
    balance: float = 0.0
    category_totals: Dict[str, float] = field(default_factory=dict)
    daily_totals: List[float] = field(default_factory=list)


def expenses_frame(expenses: Iterable[Expense]) -> pd.DataFrame:
    """Tabular view of ``expenses`` with one row per record."""
    rows = [
        {
            "id": e.id,
            "name": e.name,
            "amount": float(e.amount),
            "category": e.category,
            "timestamp": e.timestamp,
        }
        for e in expenses
    ]
    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    df["amount"] = df["amount"].astype(float)
    df["timestamp"] = pd.to_datetime(df["timestamp"])
    return df


def filter_by_month(expenses: Sequence[Expense], year_month: Optional[str]) -> List[Expense]:
    """Return the expenses whose timestamp falls in ``year_month``.

    ``None`` or an empty string means no filter: every expense is returned.
    Order is preserved.
    """
    parsed = parse_year_month(year_month)
    if parsed is None:
        return list(expenses)
    year, month = parsed
    return [e for e in expenses if e.timestamp.year == year and e.timestamp.month == month]


def total(expenses: Iterable[Expense]) -> float:
    return float(sum(e.amount for e in expenses))


def balance(income: float, spent: float) -> float:
    """Income minus spending.  Negative results are returned as-is."""
    return income - spent


def category_totals(expenses: Sequence[Expense]) -> Dict[str, float]:
    """Sum amounts per category.

    Only categories that actually occur are included, in order of first
    appearance.
    """
    df = expenses_frame(expenses)
    if df.empty:
        return {}
    grouped = df.groupby("category", sort=False)["amount"].sum()
    return {str(cat): float(value) for cat, value in grouped.items()}


def days_in_month(year: int, month: int) -> int:
    return int(pd.Period(year=year, month=month, freq="M").days_in_month)


def daily_totals(year_month: Optional[str], expenses: Sequence[Expense]) -> List[float]:
    """Per-day spending for ``year_month``.

    Returns a list with one entry per calendar day of the month (28-31);
    entry ``i`` holds the total for day ``i + 1``.  Days without spending
    are zero.  Expenses from other months are ignored.

    Raises:
        ValidationError: if ``year_month`` is empty
    """
    parsed = parse_year_month(year_month)
    if parsed is None:
        raise ValidationError("A month (YYYY-MM) is required for daily totals")
    year, month = parsed
    days = range(1, days_in_month(year, month) + 1)

    df = expenses_frame(filter_by_month(expenses, year_month))
    if df.empty:
        return [0.0 for _ in days]
    by_day = df.groupby(df["timestamp"].dt.day)["amount"].sum()
    return [float(v) for v in by_day.reindex(days, fill_value=0.0)]


def summarize(income: float, expenses: Sequence[Expense], year_month: Optional[str]) -> BudgetSnapshot:
    """Recompute every derived figure for one render."""
    filtered = filter_by_month(expenses, year_month)
    spent = total(filtered)
    month = str(year_month).strip() if year_month else None
    snapshot = BudgetSnapshot(
        year_month=month,
        income=float(income),
        expenses=filtered,
        total=spent,
        balance=balance(float(income), spent),
        category_totals=category_totals(filtered),
        daily_totals=daily_totals(month, expenses) if month else [],
    )
    logger.debug(
        "Recomputed snapshot for %s: %d expenses, total=%.2f",
        month or "all months", len(filtered), spent,
    )
    return snapshot
