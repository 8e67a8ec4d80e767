"""
Exception hierarchy for the Expense Ledger.

Every error raised by this package derives from LedgerError, so callers
can catch one base class at the presentation boundary.
"""

from typing import Optional

from expense_ledger.models.expense import ValidationIssue


class LedgerError(Exception):
    """Base exception for the expense ledger."""
    pass


class ValidationError(LedgerError):
    """Input violates a record invariant. Never reaches storage."""

    def __init__(
        self,
        message: str,
        issues: Optional[list[ValidationIssue]] = None,
    ):
        super().__init__(message)
        self.issues = issues or []

    @property
    def fields(self) -> list[str]:
        """Names of the fields that failed."""
        return [issue.field for issue in self.issues]


class StorageError(LedgerError):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class StorageUnavailableError(StorageError):
    """The storage medium could not be opened, read or written."""
    pass
