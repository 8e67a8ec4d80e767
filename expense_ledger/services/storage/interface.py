"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for expense storage.
This allows us to:
1. Keep SQLite as the durable backend without leaking it into callers
2. Use in-memory storage for testing
3. Keep the view engine decoupled from how records are stored

The interface is intentionally small - we're not building a full ORM.
Just the operations the ledger needs.
"""

import datetime as dt
from abc import ABC, abstractmethod
from typing import Any, Optional

from expense_ledger.exceptions import (
    NotFoundError,
    StorageError,
    StorageUnavailableError,
)
from expense_ledger.models.expense import ExpenseRecord


class ExpenseStorageInterface(ABC):
    """
    Abstract interface for expense storage operations.

    Any storage implementation must honour these rules:
    - ids are assigned by the store, increase monotonically, and are
      never reused, even after the newest record is deleted
    - invalid input raises ValidationError before any I/O
    - I/O failures raise StorageUnavailableError and are not retried
    - records handed out are snapshots, never live storage objects
    """

    @abstractmethod
    async def initialize(self) -> None:
        """
        Ensure the backing schema exists.

        Safe to call on every process start. Must complete before any
        other operation is used.

        Raises:
            StorageUnavailableError: If the medium cannot be opened or written
        """
        pass

    @abstractmethod
    async def create_expense(
        self,
        amount: Any,
        category: Any,
        note: Any = None,
        expense_date: Optional[dt.date] = None,
    ) -> int:
        """
        Validate and store a new expense.

        Args:
            amount: Positive number (Decimal, int, float or numeric text)
            category: Non-empty label; surrounding whitespace is trimmed
            note: Optional text; blank becomes None
            expense_date: Defaults to today's local date

        Returns:
            The newly assigned expense id

        Raises:
            ValidationError: If amount or category is invalid
            StorageUnavailableError: If the write fails
        """
        pass

    @abstractmethod
    async def list_expenses(self) -> list[ExpenseRecord]:
        """
        Return every stored expense, newest id first.

        The returned list is a fresh copy on every call.
        """
        pass

    @abstractmethod
    async def get_expense(self, expense_id: int) -> Optional[ExpenseRecord]:
        """
        Retrieve one expense by id.

        Returns:
            The record if found, None otherwise
        """
        pass

    @abstractmethod
    async def update_expense(
        self,
        expense_id: int,
        amount: Any,
        category: Any,
        note: Any = None,
    ) -> ExpenseRecord:
        """
        Replace the amount, category and note of an existing expense.

        The id and date are never modified.

        Returns:
            The record as stored after the update

        Raises:
            ValidationError: If the new values are invalid
            NotFoundError: If no expense has this id
            StorageUnavailableError: If the write fails
        """
        pass

    @abstractmethod
    async def delete_expense(self, expense_id: int) -> bool:
        """
        Delete an expense by id. Idempotent.

        Returns:
            True if a record was removed, False if none existed
        """
        pass


__all__ = [
    "ExpenseStorageInterface",
    "NotFoundError",
    "StorageError",
    "StorageUnavailableError",
]
