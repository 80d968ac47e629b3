"""What-if planning for a prospective expense.

:func:`evaluate_plan` projects what a purchase would do to the current
balance, once and (optionally) as a monthly recurring cost, and labels
it ``APPROVED`` when the balance stays non-negative or ``CAUTION``
otherwise.  The verdict is advisory; a cautioned plan can still be
committed.

:class:`Planner` adds the commit gate used by the UI: one evaluation
permits one commit, so repeated clicks cannot add the same expense twice.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from .errors import ValidationError
from .models import Expense, validate_amount, validate_category, validate_name

logger = logging.getLogger(__name__)


class Verdict(enum.Enum):
    APPROVED = "approved"
    CAUTION = "caution"


@dataclass(frozen=True)
class PlanRequest:
    description: str
    amount: float
    category: str
    recurring: bool = False

    @classmethod
    def build(cls, description, amount, category, recurring: bool = False) -> "PlanRequest":
        """Validate raw input with the same rules as adding an expense."""
        return cls(
            description=validate_name(description),
            amount=validate_amount(amount),
            category=validate_category(category),
            recurring=bool(recurring),
        )


@dataclass(frozen=True)
class PlanEvaluation:
    request: PlanRequest
    percent_of_income: float
    balance: float
    balance_after_once: float
    balance_after_recurring: Optional[float]
    verdict: Verdict

    @property
    def approved(self) -> bool:
        return self.verdict is Verdict.APPROVED


def evaluate_plan(request: PlanRequest, income: float, filtered_total: float) -> PlanEvaluation:
    """Project the effect of ``request`` on the balance for the current month."""
    current_balance = income - filtered_total
    after_once = current_balance - request.amount
    after_recurring = income - (filtered_total + request.amount) if request.recurring else None
    percent = (request.amount / income * 100) if income > 0 else 0.0
    return PlanEvaluation(
        request=request,
        percent_of_income=percent,
        balance=current_balance,
        balance_after_once=after_once,
        balance_after_recurring=after_recurring,
        verdict=Verdict.APPROVED if after_once >= 0 else Verdict.CAUTION,
    )


class Planner:
    """Holds the latest evaluation and allows a single commit per evaluation."""

    def __init__(self):
        self.evaluation: Optional[PlanEvaluation] = None
        self._commit_enabled = False

    @property
    def can_commit(self) -> bool:
        return self._commit_enabled and self.evaluation is not None

    def evaluate(self, request: PlanRequest, income: float, filtered_total: float) -> PlanEvaluation:
        self.evaluation = evaluate_plan(request, income, filtered_total)
        self._commit_enabled = True
        logger.info(
            "Planned '%s' (%.2f): balance after once %.2f -> %s",
            request.description, request.amount,
            self.evaluation.balance_after_once, self.evaluation.verdict.value,
        )
        return self.evaluation

    def commit(self, store) -> Expense:
        """Add the evaluated expense to ``store`` and close the gate.

        Raises:
            ValidationError: if there is no evaluation awaiting commit
        """
        if not self.can_commit:
            raise ValidationError("Evaluate a plan before adding it")
        request = self.evaluation.request
        expense = store.add_expense(request.description, request.amount, request.category)
        self._commit_enabled = False
        return expense

    def clear(self) -> None:
        self.evaluation = None
        self._commit_enabled = False
