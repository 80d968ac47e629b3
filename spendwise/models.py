"""Data model for expense records.

An :class:`Expense` is a single dated spending entry.  Records carry an
explicit integer ``id`` assigned by the store at creation time; the
``timestamp`` is the creation instant and is used for ordering and month
filtering only, never for identity.

Validation helpers live here so the store, the planner and the remote
service all apply exactly the same rules.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from .errors import ValidationError

CATEGORIES: Tuple[str, ...] = ("Food", "Transport", "Shopping", "Bills", "Other")

_CATEGORY_LOOKUP = {c.lower(): c for c in CATEGORIES}


@dataclass
class Expense:
    """A single expense entry.

    Fields:
      - id: unique integer key within the collection (0 until the store assigns one)
      - name: non-empty description
      - amount: strictly positive amount
      - category: one of :data:`CATEGORIES`
      - timestamp: calendar-local creation time
    """

    name: str
    amount: float
    category: str
    timestamp: datetime = field(default_factory=datetime.now)
    id: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dict suitable for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "amount": self.amount,
            "category": self.category,
            "timestamp": self.timestamp.isoformat(),
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Expense":
        """Construct a validated Expense from a dict (inverse of to_dict).

        Missing ids load as 0 so the store can assign one.

        Raises:
            ValidationError: if any field is missing or invalid
        """
        if not isinstance(d, dict):
            raise ValidationError("Expense entry must be a mapping")
        raw_id = d.get("id") or 0
        try:
            expense_id = int(raw_id)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid expense id: {raw_id!r}") from None
        return Expense(
            id=expense_id,
            name=validate_name(d.get("name")),
            amount=validate_amount(d.get("amount")),
            category=validate_category(d.get("category")),
            timestamp=coerce_timestamp(d.get("timestamp")),
        )

    def with_changes(self, **changes: Any) -> "Expense":
        return replace(self, **changes)


def validate_name(name: Any) -> str:
    """Return the stripped name or raise if it is empty."""
    if name is None or not str(name).strip():
        raise ValidationError("Name cannot be empty")
    return str(name).strip()


def validate_amount(amount: Any) -> float:
    """Return ``amount`` as a float, rejecting non-numeric, non-finite and non-positive values."""
    if isinstance(amount, bool):
        raise ValidationError(f"Invalid amount: {amount!r}")
    try:
        value = float(amount)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid amount: {amount!r}") from None
    if not math.isfinite(value) or value <= 0:
        raise ValidationError("Amount must be greater than zero")
    return value


def validate_category(category: Any) -> str:
    """Return the canonical category name (case-insensitive match)."""
    if category is None:
        raise ValidationError("Category is required")
    canonical = _CATEGORY_LOOKUP.get(str(category).strip().lower())
    if canonical is None:
        raise ValidationError(
            f"Unknown category '{category}'. Expected one of: {', '.join(CATEGORIES)}"
        )
    return canonical


def coerce_timestamp(value: Any) -> datetime:
    """Normalize ``value`` to a naive, calendar-local datetime.

    Accepts datetimes and ISO-8601 strings (including a trailing ``Z``).
    Aware values are converted to local time before the tzinfo is dropped.
    """
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            ts = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(f"Invalid timestamp: {value!r}") from None
    else:
        raise ValidationError(f"Invalid timestamp: {value!r}")
    if ts.tzinfo is not None:
        ts = ts.astimezone().replace(tzinfo=None)
    return ts


def parse_year_month(year_month: Optional[str]) -> Optional[Tuple[int, int]]:
    """Parse ``"YYYY-MM"`` into ``(year, month)``.

    ``None`` and ``""`` mean "no filter" and return ``None``.
    """
    if year_month is None or not str(year_month).strip():
        return None
    text = str(year_month).strip()
    parts = text.split("-")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValidationError(f"Invalid month '{year_month}'. Expected YYYY-MM")
    year, month = int(parts[0]), int(parts[1])
    if not 1 <= month <= 12 or year < 1:
        raise ValidationError(f"Invalid month '{year_month}'. Expected YYYY-MM")
    return year, month


def month_key(ts: datetime) -> str:
    return ts.strftime("%Y-%m")
