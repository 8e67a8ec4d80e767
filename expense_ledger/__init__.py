"""
Expense Ledger - Source Package

A local personal expense ledger: record expenses, keep them in SQLite,
and view totals for all time, this week, or this month.

DESIGN PRINCIPLES:
1. Invalid input never reaches storage
2. Amounts are Decimal; totals never drift
3. Views are recomputed from a snapshot, never patched in place
4. Storage failures are surfaced, not retried or hidden
"""

from expense_ledger.exceptions import (
    LedgerError,
    NotFoundError,
    StorageError,
    StorageUnavailableError,
    ValidationError,
)
from expense_ledger.models import ExpenseRecord, LedgerView, TimeWindow
from expense_ledger.orchestrator import ExpenseLedger, create_ledger
from expense_ledger.projection import LedgerViewEngine, project

__version__ = "1.0.0"

__all__ = [
    "ExpenseLedger",
    "ExpenseRecord",
    "LedgerError",
    "LedgerView",
    "LedgerViewEngine",
    "NotFoundError",
    "StorageError",
    "StorageUnavailableError",
    "TimeWindow",
    "ValidationError",
    "create_ledger",
    "project",
]
