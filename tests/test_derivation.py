"""Derived figures: month filtering, totals, category and daily breakdowns."""

from datetime import datetime

import pytest

from spendwise.derivation import (
    balance,
    category_totals,
    daily_totals,
    days_in_month,
    expenses_frame,
    filter_by_month,
    summarize,
    total,
)
from spendwise.errors import ValidationError
from spendwise.models import Expense


def _march_expenses():
    return [
        Expense(id=1, name='Lunch', amount=200.0, category='Food', timestamp=datetime(2024, 3, 5, 13, 0)),
        Expense(id=2, name='Electricity', amount=300.0, category='Bills', timestamp=datetime(2024, 3, 20, 9, 0)),
    ]


def test_march_scenario():
    expenses = _march_expenses() + [
        Expense(id=3, name='Taxi', amount=90.0, category='Transport', timestamp=datetime(2024, 2, 28, 22, 0)),
    ]
    snapshot = summarize(5000.0, expenses, '2024-03')

    assert snapshot.total == 500.0
    assert snapshot.balance == 4500.0
    assert snapshot.category_totals == {'Food': 200.0, 'Bills': 300.0}
    assert len(snapshot.daily_totals) == 31
    assert snapshot.daily_totals[4] == 200.0
    assert snapshot.daily_totals[19] == 300.0
    assert sum(snapshot.daily_totals) == 500.0
    assert [e.id for e in snapshot.expenses] == [1, 2]


def test_filter_without_month_returns_everything_in_order():
    expenses = _march_expenses()
    assert filter_by_month(expenses, None) == expenses
    assert filter_by_month(expenses, '') == expenses
    assert filter_by_month(expenses, '2024-04') == []


def test_balance_can_go_negative():
    assert balance(100.0, 250.0) == -150.0
    assert balance(0.0, 0.0) == 0.0


def test_total_of_nothing_is_zero():
    assert total([]) == 0.0
    assert category_totals([]) == {}


def test_category_totals_sum_to_total():
    expenses = _march_expenses() + [
        Expense(id=3, name='Dinner', amount=150.5, category='Food', timestamp=datetime(2024, 3, 6)),
    ]
    totals = category_totals(expenses)
    assert totals == {'Food': 350.5, 'Bills': 300.0}
    assert sum(totals.values()) == pytest.approx(total(expenses))


@pytest.mark.parametrize('year, month, expected', [
    (2024, 2, 29),
    (2023, 2, 28),
    (2024, 4, 30),
    (2024, 12, 31),
])
def test_days_in_month(year, month, expected):
    assert days_in_month(year, month) == expected


def test_daily_totals_leap_february():
    expenses = [Expense(id=1, name='Cake', amount=40.0, category='Food', timestamp=datetime(2024, 2, 29, 18, 0))]
    daily = daily_totals('2024-02', expenses)
    assert len(daily) == 29
    assert daily[28] == 40.0
    assert sum(daily) == 40.0


def test_daily_totals_for_empty_month_is_all_zero():
    assert daily_totals('2023-04', []) == [0.0] * 30


def test_daily_totals_requires_a_month():
    with pytest.raises(ValidationError):
        daily_totals(None, _march_expenses())


def test_summarize_without_month_has_no_daily_series():
    snapshot = summarize(1000.0, _march_expenses(), None)
    assert snapshot.year_month is None
    assert snapshot.total == 500.0
    assert snapshot.daily_totals == []


def test_derivations_are_idempotent_and_do_not_mutate_input():
    expenses = _march_expenses()
    before = list(expenses)
    first = summarize(5000.0, expenses, '2024-03')
    second = summarize(5000.0, expenses, '2024-03')
    assert first == second
    assert expenses == before


def test_expenses_frame_columns():
    df = expenses_frame(_march_expenses())
    assert list(df.columns) == ['id', 'name', 'amount', 'category', 'timestamp']
    assert df['amount'].sum() == 500.0
    assert expenses_frame([]).empty
