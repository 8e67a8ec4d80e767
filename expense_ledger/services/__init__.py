"""Services package."""

from expense_ledger.services.storage import (
    ExpenseStorageInterface,
    InMemoryExpenseStorage,
    NotFoundError,
    SQLiteClient,
    SQLiteExpenseStorage,
    StorageError,
    StorageUnavailableError,
)

__all__ = [
    "ExpenseStorageInterface",
    "InMemoryExpenseStorage",
    "NotFoundError",
    "SQLiteClient",
    "SQLiteExpenseStorage",
    "StorageError",
    "StorageUnavailableError",
]
