"""Single-level undo for expense deletion.

The manager is a two-state machine::

    EMPTY  --remember()-->  PENDING(record, index, deadline)
    PENDING --restore() / dismiss() / deadline passes-->  EMPTY
    PENDING --remember()-->  PENDING (previous record is discarded)

There is exactly one slot.  Deleting a second expense while the first is
still pending drops the first one for good; this matches how the app has
always behaved and is logged as a warning.

Expiry is evaluated lazily against ``clock`` every time the state is
read, which is all a Streamlit rerun loop needs.  Long-running hosts can
also pass a ``scheduler`` exposing ``call_later(delay, callback)`` (an
``asyncio`` event loop fits) so the slot clears on time without being
polled.  At most one scheduled callback is outstanding, and a callback
that fires after the slot has moved on does nothing.
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .config import UNDO_GRACE_SECONDS
from .models import Expense

logger = logging.getLogger(__name__)


class UndoState(enum.Enum):
    EMPTY = "empty"
    PENDING = "pending"


@dataclass(frozen=True)
class PendingDeletion:
    record: Expense
    index: int
    deadline: float


class UndoManager:
    """Holds the most recently deleted expense for a fixed grace period."""

    def __init__(
        self,
        grace_period: float = UNDO_GRACE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        scheduler: Optional[Any] = None,
    ):
        if grace_period <= 0:
            raise ValueError("grace_period must be positive")
        self.grace_period = float(grace_period)
        self._clock = clock
        self._scheduler = scheduler
        self._pending: Optional[PendingDeletion] = None
        self._timer = None
        self._token: Optional[object] = None

    @property
    def state(self) -> UndoState:
        return UndoState.PENDING if self.pending is not None else UndoState.EMPTY

    @property
    def pending(self) -> Optional[PendingDeletion]:
        self._expire_if_due()
        return self._pending

    def remaining(self) -> float:
        """Seconds left before the pending record is dropped (0 when empty)."""
        pending = self.pending
        if pending is None:
            return 0.0
        return max(pending.deadline - self._clock(), 0.0)

    def remember(self, record: Expense, index: int) -> PendingDeletion:
        """Hold ``record`` (removed from ``index``) for the grace period."""
        previous = self.pending
        if previous is not None:
            logger.warning(
                "Discarding pending deletion of expense %d '%s'; a newer deletion replaced it",
                previous.record.id, previous.record.name,
            )
        self._pending = PendingDeletion(
            record=record,
            index=index,
            deadline=self._clock() + self.grace_period,
        )
        self._start_timer()
        logger.info("Expense %d '%s' can be restored for %.1fs", record.id, record.name, self.grace_period)
        return self._pending

    def restore(self) -> Optional[PendingDeletion]:
        """Release the pending deletion so the caller can reinsert it."""
        pending = self.pending
        if pending is None:
            return None
        self._clear()
        logger.info("Restoring expense %d '%s'", pending.record.id, pending.record.name)
        return pending

    def dismiss(self) -> Optional[Expense]:
        """Drop the pending record permanently."""
        pending = self.pending
        if pending is None:
            return None
        self._clear()
        logger.info("Dismissed undo for expense %d '%s'", pending.record.id, pending.record.name)
        return pending.record

    # ------------------------------------------------------------------

    def _expire_if_due(self) -> None:
        if self._pending is not None and self._clock() >= self._pending.deadline:
            logger.info(
                "Undo window closed for expense %d '%s'",
                self._pending.record.id, self._pending.record.name,
            )
            self._clear()

    def _clear(self) -> None:
        self._pending = None
        self._cancel_timer()

    def _start_timer(self) -> None:
        self._cancel_timer()
        token = object()
        self._token = token
        if self._scheduler is not None:
            self._timer = self._scheduler.call_later(self.grace_period, lambda: self._on_timeout(token))

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = None
        self._token = None

    def _on_timeout(self, token: object) -> None:
        if token is not self._token or self._pending is None:
            return
        logger.info(
            "Undo window closed for expense %d '%s'",
            self._pending.record.id, self._pending.record.name,
        )
        self._clear()
