"""
Data Models Package

This package contains all Pydantic models used in the Expense Ledger.
All data flowing through the ledger must conform to these schemas.
"""

from expense_ledger.models.expense import (
    ExpenseInput,
    ExpenseRecord,
    LedgerView,
    TimeWindow,
    ValidationIssue,
    parse_amount,
)
from expense_ledger.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
)

__all__ = [
    # Expense models
    "ExpenseInput",
    "ExpenseRecord",
    "LedgerView",
    "TimeWindow",
    "ValidationIssue",
    "parse_amount",
    # Activity models
    "ActivityEvent",
    "ActivityEventBuilder",
    "ActivityEventType",
    "ActivitySeverity",
]
