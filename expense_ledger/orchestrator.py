"""
Ledger Orchestrator

Ties the expense store and the view engine together and defines the one
flow a presentation layer needs:

    mutate through the store -> re-fetch the records -> re-project the view

DESIGN DECISION: The orchestrator holds no view state. The current
window selection belongs to the caller and is passed into view() every
time, together with the reference date if the caller wants a fixed one.
"""

import datetime as dt
from typing import Any, Optional, Union
from uuid import UUID

from expense_ledger.activity import ActivityLogger, create_correlation_id
from expense_ledger.exceptions import NotFoundError, StorageError, ValidationError
from expense_ledger.models.expense import ExpenseRecord, LedgerView, TimeWindow
from expense_ledger.projection import LedgerViewEngine
from expense_ledger.services.storage import (
    ExpenseStorageInterface,
    SQLiteClient,
    SQLiteExpenseStorage,
)


class ExpenseLedger:
    """
    Orchestrates expense mutations and view refreshes.

    Every mutation is logged with a correlation ID. Errors are logged
    and then re-raised unchanged for the caller to present.
    """

    def __init__(
        self,
        storage: ExpenseStorageInterface,
        engine: Optional[LedgerViewEngine] = None,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self._storage = storage
        self._engine = engine or LedgerViewEngine()
        self._activity = activity_logger or ActivityLogger()

    @property
    def storage(self) -> ExpenseStorageInterface:
        return self._storage

    async def open(self) -> None:
        """Initialize the underlying store. Safe to call repeatedly."""
        try:
            await self._storage.initialize()
        except StorageError as e:
            self._activity.log_storage_error("initialize", str(e))
            raise
        self._activity.log_ledger_opened(
            database=getattr(self._storage, "url", type(self._storage).__name__)
        )

    async def add_expense(
        self,
        amount: Any,
        category: Any,
        note: Any = None,
        expense_date: Optional[dt.date] = None,
        correlation_id: Optional[UUID] = None,
    ) -> int:
        """Record a new expense and return its id."""
        correlation_id = correlation_id or create_correlation_id()
        try:
            expense_id = await self._storage.create_expense(
                amount, category, note, expense_date
            )
            record = await self._storage.get_expense(expense_id)
        except ValidationError as e:
            self._activity.log_validation_failed(
                issues=[issue.model_dump() for issue in e.issues],
                correlation_id=correlation_id,
            )
            raise
        except StorageError as e:
            self._activity.log_storage_error("create", str(e), correlation_id)
            raise

        if record is None:
            raise NotFoundError(f"Expense not found after create: {expense_id}")

        self._activity.log_expense_created(
            expense_id=record.id,
            amount=str(record.amount),
            category=record.category,
            correlation_id=correlation_id,
        )
        return expense_id

    async def edit_expense(
        self,
        expense_id: int,
        amount: Any,
        category: Any,
        note: Any = None,
        correlation_id: Optional[UUID] = None,
    ) -> ExpenseRecord:
        """Replace amount, category and note of an existing expense."""
        correlation_id = correlation_id or create_correlation_id()
        try:
            record = await self._storage.update_expense(
                expense_id, amount, category, note
            )
        except ValidationError as e:
            self._activity.log_validation_failed(
                issues=[issue.model_dump() for issue in e.issues],
                expense_id=expense_id if isinstance(expense_id, int) else None,
                correlation_id=correlation_id,
            )
            raise
        except NotFoundError:
            self._activity.log_expense_not_found(expense_id, correlation_id)
            raise
        except StorageError as e:
            self._activity.log_storage_error("update", str(e), correlation_id)
            raise

        self._activity.log_expense_updated(
            expense_id=record.id,
            amount=str(record.amount),
            category=record.category,
            correlation_id=correlation_id,
        )
        return record

    async def remove_expense(
        self,
        expense_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """Delete an expense. Deleting a missing id is not an error."""
        correlation_id = correlation_id or create_correlation_id()
        try:
            removed = await self._storage.delete_expense(expense_id)
        except StorageError as e:
            self._activity.log_storage_error("delete", str(e), correlation_id)
            raise

        self._activity.log_expense_deleted(expense_id, removed, correlation_id)
        return removed

    async def view(
        self,
        window: Union[TimeWindow, str] = TimeWindow.ALL,
        now: Optional[dt.date] = None,
    ) -> LedgerView:
        """
        Fetch a fresh snapshot from the store and project it.

        Args:
            window: Which records to include
            now: Reference date for WEEK/MONTH; defaults to today
        """
        try:
            records = await self._storage.list_expenses()
        except StorageError as e:
            self._activity.log_storage_error("list", str(e))
            raise

        view = self._engine.project(records, window, now or dt.date.today())
        self._activity.log_view_projected(
            window=view.window.value,
            record_count=view.record_count,
            total=str(view.total),
        )
        return view


def create_ledger(database_url: Optional[str] = None) -> ExpenseLedger:
    """
    Factory function wiring a SQLite-backed ledger.

    Args:
        database_url: SQLAlchemy URL; defaults to StorageSettings.

    The returned ledger still needs `await ledger.open()`.
    """
    storage = SQLiteExpenseStorage(SQLiteClient(database_url))
    return ExpenseLedger(storage=storage)
