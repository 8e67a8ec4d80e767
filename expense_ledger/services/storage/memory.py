"""
In-Memory Storage Implementation

Keeps expenses in a dict for the lifetime of the object. Used by tests
and by callers that want a throwaway ledger. Follows the same contract
as the SQLite store, including never reusing ids.
"""

import datetime as dt
from typing import Any, Optional

from expense_ledger.activity.logger import get_logger
from expense_ledger.exceptions import NotFoundError, StorageUnavailableError
from expense_ledger.models.expense import ExpenseRecord
from expense_ledger.services.storage.interface import ExpenseStorageInterface
from expense_ledger.validation import ExpenseValidator


class InMemoryExpenseStorage(ExpenseStorageInterface):
    """Dict-backed expense storage."""

    def __init__(self, validator: Optional[ExpenseValidator] = None):
        self._validator = validator or ExpenseValidator()
        self._records: dict[int, ExpenseRecord] = {}
        self._last_id = 0
        self._initialized = False
        self._logger = get_logger(__name__)

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise StorageUnavailableError(
                "Expense store is not initialized; call initialize() first"
            )

    async def initialize(self) -> None:
        self._initialized = True

    async def create_expense(
        self,
        amount: Any,
        category: Any,
        note: Any = None,
        expense_date: Optional[dt.date] = None,
    ) -> int:
        values = self._validator.validate(amount, category, note)
        day = self._validator.validate_date(expense_date)
        self._require_initialized()

        self._last_id += 1
        record = ExpenseRecord(
            id=self._last_id,
            amount=values.amount,
            category=values.category,
            note=values.note,
            date=day,
        )
        self._records[record.id] = record
        self._logger.debug("expense_created", expense_id=record.id, backend="memory")
        return record.id

    async def list_expenses(self) -> list[ExpenseRecord]:
        self._require_initialized()
        return [self._records[key] for key in sorted(self._records, reverse=True)]

    async def get_expense(self, expense_id: int) -> Optional[ExpenseRecord]:
        expense_id = self._validator.validate_id(expense_id)
        self._require_initialized()
        return self._records.get(expense_id)

    async def update_expense(
        self,
        expense_id: int,
        amount: Any,
        category: Any,
        note: Any = None,
    ) -> ExpenseRecord:
        expense_id = self._validator.validate_id(expense_id)
        values = self._validator.validate(amount, category, note)
        self._require_initialized()

        existing = self._records.get(expense_id)
        if existing is None:
            raise NotFoundError(f"Expense not found: {expense_id}")

        updated = existing.model_copy(update={
            "amount": values.amount,
            "category": values.category,
            "note": values.note,
        })
        self._records[expense_id] = updated
        self._logger.debug("expense_updated", expense_id=expense_id, backend="memory")
        return updated

    async def delete_expense(self, expense_id: int) -> bool:
        expense_id = self._validator.validate_id(expense_id)
        self._require_initialized()
        removed = self._records.pop(expense_id, None) is not None
        self._logger.debug(
            "expense_deleted", expense_id=expense_id, removed=removed, backend="memory"
        )
        return removed
