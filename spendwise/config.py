"""Settings for SpendWise.

Paths, defaults and the environment variables that override them live
here, along with the logging and backend factories used by entry points.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

# Base project root - assumes this file is in spendwise/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("SPENDWISE_DATA_DIR", _PROJECT_ROOT / "data"))

# Local slot files
INCOME_SLOT = "income"
EXPENSES_SLOT = "expenses"

# Relational store behind the remote service
DB_PATH = Path(
    os.getenv("SPENDWISE_DB_PATH", DATA_DIR / "spendwise.db")
).resolve()

# Packaged resources (keyword map for category suggestions)
RESOURCES_DIR = Path(__file__).parent / "resources"

# Seconds a deleted expense stays restorable
UNDO_GRACE_SECONDS = float(os.getenv("SPENDWISE_UNDO_SECONDS", "6.0"))

CURRENCY_SYMBOL = os.getenv("SPENDWISE_CURRENCY", "₹")

# Which backend is authoritative: "local" (JSON slots) or "remote" (HTTP service)
BACKEND = os.getenv("SPENDWISE_BACKEND", "local").strip().lower()
REMOTE_URL = os.getenv("SPENDWISE_REMOTE_URL", "http://127.0.0.1:5000")
REMOTE_TIMEOUT = float(os.getenv("SPENDWISE_REMOTE_TIMEOUT", "10"))

LOG_LEVEL = os.getenv("SPENDWISE_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)


def configure_logging(level: Optional[str] = None) -> None:
    """Install a stream handler on the package logger.

    Entry points (dashboard, scripts, service) call this once.  Library
    modules only create loggers and never touch handlers.
    """
    logger = logging.getLogger("spendwise")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level or LOG_LEVEL)


def build_backend(kind: Optional[str] = None):
    """Return the authoritative storage backend named by ``kind``.

    Defaults to the ``SPENDWISE_BACKEND`` setting.  Only one backend is
    used per controller; the other is never written to implicitly.
    """
    kind = (kind or BACKEND).strip().lower()
    if kind == "local":
        from .local_storage import JsonSlotBackend

        return JsonSlotBackend(DATA_DIR)
    if kind == "remote":
        from .remote import RemoteBackend

        return RemoteBackend(base_url=REMOTE_URL, timeout=REMOTE_TIMEOUT)
    raise ValueError(f"Unknown backend '{kind}'. Expected 'local' or 'remote'.")
