"""Single owner of the budgeting session state.

:class:`BudgetController` wires the store, the undo manager and the
planner together and runs every user action through the same sequence:
validate, mutate the store, persist, and let the next :meth:`snapshot`
recompute all derived figures.

Save failures do not undo the in-memory change.  The error is logged and
kept in :attr:`BudgetController.save_error` so the UI can show it, and
:meth:`BudgetController.retry_save` tries again.  Unknown expense ids
always raise :class:`~spendwise.errors.NotFoundError`, whether the action
is an edit, a delete or a restore.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from .derivation import BudgetSnapshot, filter_by_month, summarize, total
from .errors import NotFoundError, PersistenceError
from .models import Expense, month_key, parse_year_month
from .planner import PlanEvaluation, Planner, PlanRequest
from .store import Backend, Store
from .undo import PendingDeletion, UndoManager

logger = logging.getLogger(__name__)


class BudgetController:
    """Coordinates mutations, persistence and recomputation."""

    def __init__(
        self,
        backend: Optional[Backend] = None,
        undo: Optional[UndoManager] = None,
        month: Optional[str] = None,
    ):
        self.store = Store(backend)
        self.undo = undo or UndoManager()
        self.planner = Planner()
        self.save_error: Optional[PersistenceError] = None
        self._month: Optional[str] = None
        self.set_month_filter(month or month_key(datetime.now()))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load(self) -> BudgetSnapshot:
        self.store.load()
        return self.snapshot()

    def _persist(self) -> bool:
        try:
            self.store.save()
        except PersistenceError as e:
            self.save_error = e
            logger.warning("Save failed; keeping in-memory state until the next successful save: %s", e)
            return False
        self.save_error = None
        return True

    def retry_save(self) -> bool:
        """Try to persist the current state again.  Returns True on success."""
        return self._persist()

    # ------------------------------------------------------------------
    # Month filter
    # ------------------------------------------------------------------

    @property
    def month(self) -> Optional[str]:
        return self._month

    def set_month_filter(self, year_month: Optional[str]) -> None:
        parsed = parse_year_month(year_month)
        self._month = f"{parsed[0]:04d}-{parsed[1]:02d}" if parsed else None

    def clear_month_filter(self) -> None:
        self._month = None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def snapshot(self) -> BudgetSnapshot:
        return summarize(self.store.income, self.store.expenses, self._month)

    def filtered_total(self) -> float:
        return total(filter_by_month(self.store.expenses, self._month))

    @property
    def pending_undo(self) -> Optional[PendingDeletion]:
        return self.undo.pending

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_income(self, amount) -> BudgetSnapshot:
        self.store.set_income(amount)
        self._persist()
        return self.snapshot()

    def reset_income(self) -> BudgetSnapshot:
        self.store.reset_income()
        self._persist()
        return self.snapshot()

    def add_expense(self, name, amount, category, timestamp: Optional[datetime] = None) -> Expense:
        expense = self.store.add_expense(name, amount, category, timestamp)
        self._persist()
        return expense

    def edit_expense(self, expense_id: int, name=None, amount=None, category=None) -> Expense:
        expense = self.store.edit_expense(expense_id, name=name, amount=amount, category=category)
        self._persist()
        return expense

    def delete_expense(self, expense_id: int) -> PendingDeletion:
        """Remove an expense and hold it in the undo slot."""
        removed, index = self.store.delete_expense(expense_id)
        pending = self.undo.remember(removed, index)
        self._persist()
        return pending

    def undo_delete(self) -> Expense:
        """Put the pending deleted expense back where it was.

        Raises:
            NotFoundError: if nothing is pending (never deleted, dismissed or expired)
        """
        pending = self.undo.restore()
        if pending is None:
            raise NotFoundError(message="Nothing to restore")
        self.store.insert_expense(pending.record, pending.index)
        self._persist()
        return pending.record

    def dismiss_undo(self) -> Optional[Expense]:
        return self.undo.dismiss()

    # ------------------------------------------------------------------
    # Planner
    # ------------------------------------------------------------------

    def evaluate_plan(self, description, amount, category, recurring: bool = False) -> PlanEvaluation:
        """Evaluate a prospective expense.  Invalid input also withdraws the previous plan."""
        self.planner.clear()
        request = PlanRequest.build(description, amount, category, recurring)
        return self.planner.evaluate(request, self.store.income, self.filtered_total())

    def commit_plan(self) -> Expense:
        expense = self.planner.commit(self.store)
        self._persist()
        return expense
