from datetime import datetime

import pytest

from spendwise.errors import ValidationError
from spendwise.planner import Planner, PlanRequest, Verdict, evaluate_plan
from spendwise.store import Store


def test_overdraw_is_cautioned():
    request = PlanRequest.build('New phone', 4600, 'Shopping')
    evaluation = evaluate_plan(request, income=5000.0, filtered_total=500.0)
    assert evaluation.balance == 4500.0
    assert evaluation.balance_after_once == -100.0
    assert evaluation.verdict is Verdict.CAUTION
    assert not evaluation.approved
    assert evaluation.balance_after_recurring is None
    assert evaluation.percent_of_income == pytest.approx(92.0)


def test_affordable_plan_is_approved():
    request = PlanRequest.build('Headphones', 4500, 'Shopping')
    evaluation = evaluate_plan(request, income=5000.0, filtered_total=500.0)
    assert evaluation.balance_after_once == 0.0
    assert evaluation.verdict is Verdict.APPROVED


def test_recurring_projection():
    request = PlanRequest.build('Gym', 800, 'Bills', recurring=True)
    evaluation = evaluate_plan(request, income=3000.0, filtered_total=1000.0)
    assert evaluation.balance_after_recurring == 1200.0


def test_percent_is_zero_without_income():
    request = PlanRequest.build('Gift', 100, 'Other')
    evaluation = evaluate_plan(request, income=0.0, filtered_total=0.0)
    assert evaluation.percent_of_income == 0.0
    assert evaluation.verdict is Verdict.CAUTION


@pytest.mark.parametrize('description, amount, category', [
    ('', 100, 'Other'),
    ('Gift', 0, 'Other'),
    ('Gift', 100, 'Gifts'),
])
def test_plan_request_validates_like_add(description, amount, category):
    with pytest.raises(ValidationError):
        PlanRequest.build(description, amount, category)


def test_commit_gate_allows_one_commit_per_evaluation():
    store = Store()
    store.set_income(5000)
    planner = Planner()
    assert not planner.can_commit
    with pytest.raises(ValidationError):
        planner.commit(store)

    planner.evaluate(PlanRequest.build('New phone', 4600, 'Shopping'), 5000.0, 500.0)
    assert planner.can_commit
    expense = planner.commit(store)
    assert expense.name == 'New phone'
    assert isinstance(expense.timestamp, datetime)
    assert not planner.can_commit
    with pytest.raises(ValidationError):
        planner.commit(store)
    assert len(store) == 1


def test_clear_resets_planner():
    planner = Planner()
    planner.evaluate(PlanRequest.build('Book', 300, 'Shopping'), 1000.0, 0.0)
    planner.clear()
    assert planner.evaluation is None
    assert not planner.can_commit
