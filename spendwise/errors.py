"""Exception types shared across the budgeting core.

Every failure a user action can hit falls into one of three buckets:

* :class:`ValidationError` - the input was rejected before anything changed
* :class:`NotFoundError` - an expense id did not resolve to a record
* :class:`PersistenceError` - the storage backend could not be read or written

The subclasses also inherit from the closest built-in exception so callers
that only know about ``ValueError``/``LookupError``/``OSError`` still catch
them.
"""

from __future__ import annotations

from typing import Optional


class SpendWiseError(Exception):
    """Base class for all errors raised by the package."""


class ValidationError(SpendWiseError, ValueError):
    """Raised when user input fails validation. No state is mutated."""


class NotFoundError(SpendWiseError, LookupError):
    """Raised when an expense id cannot be resolved."""

    def __init__(self, expense_id: Optional[int] = None, message: Optional[str] = None):
        super().__init__(message or f"Expense {expense_id} not found")
        self.expense_id = expense_id


class PersistenceError(SpendWiseError, OSError):
    """Raised when a backend fails to load or save state."""
