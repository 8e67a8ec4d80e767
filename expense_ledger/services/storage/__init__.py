"""
Storage Services Package

Provides the abstract expense storage interface and its implementations.
SQLite is the durable backend; the in-memory store serves tests.
"""

from expense_ledger.services.storage.interface import (
    ExpenseStorageInterface,
    NotFoundError,
    StorageError,
    StorageUnavailableError,
)
from expense_ledger.services.storage.memory import InMemoryExpenseStorage
from expense_ledger.services.storage.sqlite import (
    SQLiteClient,
    SQLiteExpenseStorage,
)

__all__ = [
    # Interface
    "ExpenseStorageInterface",
    # Exceptions
    "NotFoundError",
    "StorageError",
    "StorageUnavailableError",
    # Implementations
    "InMemoryExpenseStorage",
    "SQLiteClient",
    "SQLiteExpenseStorage",
]
