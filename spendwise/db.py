from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import DB_PATH, ensure_data_directories
from .models import parse_year_month

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;
PRAGMA synchronous=NORMAL;

CREATE TABLE IF NOT EXISTS income (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    amount REAL NOT NULL,
    set_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS expenses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    amount REAL NOT NULL,
    category TEXT NOT NULL,
    timestamp TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS ix_expenses_timestamp ON expenses (timestamp);
"""


def _resolve(db_path: Optional[Path]) -> Path:
    if db_path is None:
        ensure_data_directories()
        return DB_PATH
    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


@contextmanager
def connect(db_path: Optional[Path] = None) -> sqlite3.Connection:
    conn = sqlite3.connect(str(_resolve(db_path)))
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


def init_db(db_path: Optional[Path] = None) -> None:
    with connect(db_path) as conn:
        conn.executescript(SCHEMA_SQL)
        conn.commit()
    logger.info("Database ready at %s", _resolve(db_path))


def _now() -> str:
    return datetime.now().isoformat()


def _row_to_expense(row: sqlite3.Row) -> Dict[str, Any]:
    return {
        "id": row["id"],
        "name": row["name"],
        "amount": float(row["amount"]),
        "category": row["category"],
        "timestamp": row["timestamp"],
    }


def fetch_latest_income(db_path: Optional[Path] = None) -> float:
    """Most recently recorded income, or 0 if none has been set."""
    with connect(db_path) as conn:
        row = conn.execute(
            "SELECT amount FROM income ORDER BY id DESC LIMIT 1"
        ).fetchone()
    return float(row["amount"]) if row else 0.0


def insert_income(amount: float, db_path: Optional[Path] = None) -> None:
    """Append an income entry; earlier values are kept as history."""
    with connect(db_path) as conn:
        conn.execute("INSERT INTO income (amount, set_at) VALUES (?, ?)", (amount, _now()))
        conn.commit()


def fetch_expenses(year_month: Optional[str] = None, db_path: Optional[Path] = None) -> List[Dict[str, Any]]:
    """All expenses in insertion order, optionally limited to one month."""
    sql = "SELECT id, name, amount, category, timestamp FROM expenses"
    params: List[Any] = []
    parsed = parse_year_month(year_month)
    if parsed:
        sql += " WHERE substr(timestamp, 1, 7) = ?"
        params.append(f"{parsed[0]:04d}-{parsed[1]:02d}")
    sql += " ORDER BY id ASC"
    with connect(db_path) as conn:
        rows = conn.execute(sql, params).fetchall()
    return [_row_to_expense(r) for r in rows]


def insert_expense(
    name: str,
    amount: float,
    category: str,
    timestamp: Optional[str] = None,
    db_path: Optional[Path] = None,
) -> int:
    with connect(db_path) as conn:
        cursor = conn.execute(
            "INSERT INTO expenses (name, amount, category, timestamp) VALUES (?, ?, ?, ?)",
            (name, amount, category, timestamp or _now()),
        )
        conn.commit()
        return int(cursor.lastrowid)


def update_expense(
    expense_id: int,
    name: str,
    amount: float,
    category: str,
    db_path: Optional[Path] = None,
) -> bool:
    """Update an expense by id.

    Returns True if a row was updated, False if the id does not exist.
    """
    with connect(db_path) as conn:
        cursor = conn.execute(
            "UPDATE expenses SET name = ?, amount = ?, category = ? WHERE id = ?",
            (name, amount, category, expense_id),
        )
        conn.commit()
        return cursor.rowcount > 0


def delete_expense(expense_id: int, db_path: Optional[Path] = None) -> bool:
    with connect(db_path) as conn:
        cursor = conn.execute("DELETE FROM expenses WHERE id = ?", (expense_id,))
        conn.commit()
        return cursor.rowcount > 0


def count_expenses(db_path: Optional[Path] = None) -> int:
    with connect(db_path) as conn:
        row = conn.execute("SELECT COUNT(*) FROM expenses").fetchone()
    return int(row[0])
