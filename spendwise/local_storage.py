"""Local persistence in two named JSON slots.

The income value and the expense list live in separate files inside the
data directory (``income.json`` and ``expenses.json``).  Loading is
forgiving: a missing or unreadable slot yields the default value and a
warning, and individual malformed expense entries are skipped.  Saving
overwrites both slots.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Tuple

from .config import DATA_DIR, EXPENSES_SLOT, INCOME_SLOT
from .errors import PersistenceError, ValidationError
from .models import Expense

logger = logging.getLogger(__name__)


class JsonSlotBackend:
    """Stores income and expenses as two JSON files in ``data_dir``."""

    def __init__(self, data_dir: Optional[Path] = None):
        self.data_dir = Path(data_dir or DATA_DIR)

    def slot_path(self, slot: str) -> Path:
        return self.data_dir / f"{slot}.json"

    def _read_slot(self, slot: str, default: Any) -> Any:
        target = self.slot_path(slot)
        if not target.exists():
            return default
        try:
            with target.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not read slot '%s' from %s: %s", slot, target, e)
            return default

    def _write_slot(self, slot: str, value: Any) -> None:
        target = self.slot_path(slot)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open("w", encoding="utf-8") as handle:
                json.dump(value, handle, indent=2, ensure_ascii=False)
        except OSError as e:
            raise PersistenceError(f"Failed to save '{slot}' to {target}: {e}") from e

    def load(self) -> Tuple[float, List[Expense]]:
        raw_income = self._read_slot(INCOME_SLOT, 0)
        try:
            income = float(raw_income or 0)
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid stored income %r", raw_income)
            income = 0.0
        if income < 0:
            income = 0.0

        raw_expenses = self._read_slot(EXPENSES_SLOT, [])
        if not isinstance(raw_expenses, list):
            logger.warning("Ignoring stored expenses: expected a list, got %s", type(raw_expenses).__name__)
            raw_expenses = []

        expenses: List[Expense] = []
        for entry in raw_expenses:
            try:
                expenses.append(Expense.from_dict(entry))
            except ValidationError as e:
                logger.warning("Skipping invalid expense %r: %s", entry, e)
        return income, expenses

    def save(self, income: float, expenses: List[Expense]) -> None:
        self._write_slot(INCOME_SLOT, income)
        self._write_slot(EXPENSES_SLOT, [e.to_dict() for e in expenses])
