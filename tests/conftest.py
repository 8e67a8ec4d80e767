"""
Shared fixtures for Expense Ledger tests.

Stores are returned uninitialized so each test decides when
initialize() runs. SQLite stores use a file under tmp_path.
"""

import datetime as dt
from decimal import Decimal

import pytest

from expense_ledger.config import get_settings
from expense_ledger.models.expense import ExpenseRecord
from expense_ledger.services.storage import (
    InMemoryExpenseStorage,
    SQLiteClient,
    SQLiteExpenseStorage,
)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so env changes in a test take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+pysqlite:///{tmp_path / 'ledger.db'}"


@pytest.fixture
def sqlite_store(database_url):
    client = SQLiteClient(database_url)
    yield SQLiteExpenseStorage(client)
    client.dispose()


@pytest.fixture
def memory_store():
    return InMemoryExpenseStorage()


@pytest.fixture(params=["sqlite", "memory"])
def store(request, database_url):
    """Every storage backend, uninitialized."""
    if request.param == "memory":
        yield InMemoryExpenseStorage()
        return
    client = SQLiteClient(database_url)
    yield SQLiteExpenseStorage(client)
    client.dispose()


@pytest.fixture
def make_record():
    """Factory for ExpenseRecord snapshots without a store."""
    def _make(
        expense_id: int,
        amount: str,
        category: str,
        day: dt.date,
        note=None,
    ) -> ExpenseRecord:
        return ExpenseRecord(
            id=expense_id,
            amount=Decimal(amount),
            category=category,
            note=note,
            date=day,
        )
    return _make
