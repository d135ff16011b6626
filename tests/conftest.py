"""Shared fixtures for QuickBill tests."""

from datetime import date, datetime

import pytest

from quickbill.audit import AuditLogger
from quickbill.models.expense import Expense, ExpenseCategory
from quickbill.orchestrator import ExpenseTracker
from quickbill.services.storage import InMemoryKeyValueStore
from quickbill.store import ExpenseStore


class RecordingLogger:
    """Stands in for a structlog logger and remembers every call."""

    def __init__(self):
        self.calls = []

    def _record(self, level):
        def method(event, **kw):
            self.calls.append((level, event, kw))
        return method

    def __getattr__(self, name):
        if name in ("debug", "info", "warning", "error"):
            return self._record(name)
        raise AttributeError(name)


class FakeClock:
    """Settable clock; each call returns the current value."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def kv():
    return InMemoryKeyValueStore()


@pytest.fixture
def clock():
    # Monday
    return FakeClock(datetime(2024, 6, 10, 9, 30, 0))


@pytest.fixture
def recording_logger():
    return RecordingLogger()


@pytest.fixture
def audit_logger(recording_logger):
    return AuditLogger(history_size=50, logger=recording_logger)


@pytest.fixture
def store(kv, clock, audit_logger):
    s = ExpenseStore(kv, clock=clock, audit_logger=audit_logger)
    s.load()
    return s


@pytest.fixture
def tracker(store, clock, audit_logger):
    return ExpenseTracker(store, audit_logger=audit_logger, clock=clock)


def make_expense(
    expense_id: int,
    title: str = "Coffee",
    amount: str = "2.50",
    category: ExpenseCategory = ExpenseCategory.FOOD,
    day: date = date(2024, 6, 10),
) -> Expense:
    return Expense(id=expense_id, title=title, amount=amount, category=category, date=day)
