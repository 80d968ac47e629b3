"""Authoritative budget state.

The :class:`Store` holds the income value and the ordered expense list and
is the only place either is mutated.  Persistence is delegated to a
backend object implementing :class:`Backend`; two are provided
(:class:`~spendwise.local_storage.JsonSlotBackend` and
:class:`~spendwise.remote.RemoteBackend`) and they are interchangeable.

Every mutating method validates all of its input before touching state,
so a rejected call leaves the store exactly as it was.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Protocol, Tuple

from .errors import NotFoundError, ValidationError
from .models import (
    Expense,
    coerce_timestamp,
    validate_amount,
    validate_category,
    validate_name,
)

logger = logging.getLogger(__name__)


class Backend(Protocol):
    """Persistence contract shared by the local and remote backends."""

    def load(self) -> Tuple[float, List[Expense]]:
        """Return ``(income, expenses)``.  Must not raise; absent data loads as ``(0.0, [])``."""
        ...

    def save(self, income: float, expenses: List[Expense]) -> None:
        """Overwrite persisted state.  Raises ``PersistenceError`` on failure."""
        ...


class Store:
    """In-memory income and expense collection backed by a :class:`Backend`."""

    def __init__(self, backend: Optional[Backend] = None):
        self.backend = backend
        self._income = 0.0
        self._expenses: List[Expense] = []
        # Highest id ever issued; ids are never reused
        self._last_id = 0

    @property
    def income(self) -> float:
        return self._income

    @property
    def expenses(self) -> List[Expense]:
        """A copy of the expense list in insertion order."""
        return list(self._expenses)

    def __len__(self) -> int:
        return len(self._expenses)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> Tuple[float, List[Expense]]:
        """Replace in-memory state with whatever the backend holds.

        Records without an id (older local data) get one assigned, as do
        records whose id collides with an earlier one.
        """
        if self.backend is None:
            return self._income, self.expenses
        income, expenses = self.backend.load()
        self._income = max(float(income or 0.0), 0.0)
        self._expenses = _normalize_ids(expenses)
        self._last_id = max((e.id for e in self._expenses), default=0)
        logger.info("Loaded income=%.2f and %d expenses", self._income, len(self._expenses))
        return self._income, self.expenses

    def save(self) -> None:
        """Persist income and every expense, replacing prior state."""
        if self.backend is None:
            return
        self.backend.save(self._income, self.expenses)
        logger.debug("Saved income=%.2f and %d expenses", self._income, len(self._expenses))

    # ------------------------------------------------------------------
    # Income
    # ------------------------------------------------------------------

    def set_income(self, amount) -> float:
        try:
            value = validate_amount(amount)
        except ValidationError:
            raise ValidationError("Please enter a valid income amount") from None
        self._income = value
        logger.info("Income set to %.2f", value)
        return value

    def reset_income(self) -> None:
        self._income = 0.0
        logger.info("Income reset to 0")

    # ------------------------------------------------------------------
    # Expenses
    # ------------------------------------------------------------------

    def _issue_id(self) -> int:
        self._last_id = max(self._last_id, max((e.id for e in self._expenses), default=0)) + 1
        return self._last_id

    def find(self, expense_id: int) -> Expense:
        return self._expenses[self.index_of(expense_id)]

    def index_of(self, expense_id: int) -> int:
        for idx, expense in enumerate(self._expenses):
            if expense.id == expense_id:
                return idx
        raise NotFoundError(expense_id)

    def add_expense(self, name, amount, category, timestamp: Optional[datetime] = None) -> Expense:
        """Validate and append a new expense, assigning it a fresh id."""
        fields = dict(
            name=validate_name(name),
            amount=validate_amount(amount),
            category=validate_category(category),
            timestamp=coerce_timestamp(timestamp) if timestamp is not None else datetime.now(),
        )
        expense = Expense(id=self._issue_id(), **fields)
        self._expenses.append(expense)
        logger.info("Added expense %d '%s' (%.2f, %s)", expense.id, expense.name, expense.amount, expense.category)
        return expense

    def edit_expense(self, expense_id: int, name=None, amount=None, category=None) -> Expense:
        """Update name/amount/category of an existing expense in place.

        Fields left as ``None`` keep their current value.  The id and
        timestamp never change.

        Raises:
            NotFoundError: if no expense has ``expense_id``
            ValidationError: if any supplied field is invalid
        """
        idx = self.index_of(expense_id)
        current = self._expenses[idx]
        changes = {}
        if name is not None:
            changes["name"] = validate_name(name)
        if amount is not None:
            changes["amount"] = validate_amount(amount)
        if category is not None:
            changes["category"] = validate_category(category)
        updated = current.with_changes(**changes)
        self._expenses[idx] = updated
        logger.info("Edited expense %d: %s", expense_id, ", ".join(sorted(changes)) or "no changes")
        return updated

    def delete_expense(self, expense_id: int) -> Tuple[Expense, int]:
        """Remove an expense and return it together with its former index."""
        idx = self.index_of(expense_id)
        removed = self._expenses.pop(idx)
        logger.info("Deleted expense %d '%s' from position %d", removed.id, removed.name, idx)
        return removed, idx

    def insert_expense(self, expense: Expense, index: int) -> int:
        """Reinsert a previously removed expense.

        The position is clamped to ``[0, len]``.  Returns the index used.
        """
        if any(e.id == expense.id for e in self._expenses):
            raise ValidationError(f"Expense {expense.id} is already present")
        position = min(max(int(index), 0), len(self._expenses))
        self._expenses.insert(position, expense)
        logger.info("Restored expense %d at position %d", expense.id, position)
        return position


def _normalize_ids(expenses: List[Expense]) -> List[Expense]:
    seen = set()
    next_id = max((e.id for e in expenses if e.id > 0), default=0) + 1
    normalized: List[Expense] = []
    for expense in expenses:
        if expense.id <= 0 or expense.id in seen:
            expense = expense.with_changes(id=next_id)
            next_id += 1
        seen.add(expense.id)
        normalized.append(expense)
    return normalized
