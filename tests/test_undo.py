"""Undo slot behaviour driven by a fake clock and a fake scheduler."""

from datetime import datetime

import pytest

from spendwise.models import Expense
from spendwise.undo import UndoManager, UndoState


class _FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


class _FakeHandle:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class _FakeScheduler:
    def __init__(self):
        self.handles = []

    def call_later(self, delay, callback):
        handle = _FakeHandle(delay, callback)
        self.handles.append(handle)
        return handle


def _expense(expense_id, name='Lunch'):
    return Expense(id=expense_id, name=name, amount=100.0, category='Food', timestamp=datetime(2024, 3, 5))


def test_grace_period_must_be_positive():
    with pytest.raises(ValueError):
        UndoManager(grace_period=0)


def test_remember_then_restore():
    clock = _FakeClock()
    undo = UndoManager(grace_period=6, clock=clock)
    assert undo.state is UndoState.EMPTY

    undo.remember(_expense(1), 0)
    assert undo.state is UndoState.PENDING
    clock.now += 5.9
    assert undo.remaining() == pytest.approx(0.1)

    pending = undo.restore()
    assert pending.record.id == 1
    assert pending.index == 0
    assert undo.state is UndoState.EMPTY
    assert undo.restore() is None


def test_pending_expires_at_deadline():
    clock = _FakeClock()
    undo = UndoManager(grace_period=6, clock=clock)
    undo.remember(_expense(1), 0)
    clock.now += 6
    assert undo.pending is None
    assert undo.state is UndoState.EMPTY
    assert undo.remaining() == 0.0
    assert undo.restore() is None


def test_dismiss_drops_record():
    undo = UndoManager(grace_period=6, clock=_FakeClock())
    undo.remember(_expense(1), 0)
    assert undo.dismiss().id == 1
    assert undo.state is UndoState.EMPTY
    assert undo.dismiss() is None


def test_new_delete_discards_older_pending_record(caplog):
    undo = UndoManager(grace_period=6, clock=_FakeClock())
    undo.remember(_expense(1, 'Lunch'), 0)
    with caplog.at_level('WARNING'):
        undo.remember(_expense(2, 'Taxi'), 3)
    assert 'Discarding pending deletion' in caplog.text
    assert undo.restore().record.id == 2
    assert undo.restore() is None


def test_scheduler_clears_slot_and_only_one_timer_is_live():
    scheduler = _FakeScheduler()
    undo = UndoManager(grace_period=6, clock=_FakeClock(), scheduler=scheduler)
    undo.remember(_expense(1), 0)
    undo.remember(_expense(2), 1)

    first, second = scheduler.handles
    assert first.cancelled
    assert not second.cancelled
    assert second.delay == 6

    second.callback()
    assert undo.state is UndoState.EMPTY


def test_stale_timer_callback_is_a_no_op():
    scheduler = _FakeScheduler()
    undo = UndoManager(grace_period=6, clock=_FakeClock(), scheduler=scheduler)
    undo.remember(_expense(1), 0)
    undo.remember(_expense(2), 1)

    scheduler.handles[0].callback()
    assert undo.pending.record.id == 2


def test_restore_cancels_timer():
    scheduler = _FakeScheduler()
    undo = UndoManager(grace_period=6, clock=_FakeClock(), scheduler=scheduler)
    undo.remember(_expense(1), 0)
    undo.restore()
    assert scheduler.handles[0].cancelled
    scheduler.handles[0].callback()
    assert undo.state is UndoState.EMPTY
