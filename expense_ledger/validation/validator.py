"""
Expense Input Validation

DESIGN DECISION: Every storage backend validates through this one module
before touching its medium. The presentation layer is expected to reject
bad input first, but the store re-checks and never persists invalid state.

Validation NEVER silently fixes bad values. The only normalizations are
the documented ones: trimming text and turning a blank note into None.
"""

import datetime as dt
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from expense_ledger.exceptions import ValidationError
from expense_ledger.models.expense import ExpenseInput, ValidationIssue


class ExpenseValidator:
    """Turns raw (amount, category, note, date) input into validated values."""

    def validate(
        self,
        amount: Any,
        category: Any,
        note: Any = None,
    ) -> ExpenseInput:
        """
        Validate and normalize the mutable expense fields.

        Raises:
            ValidationError: If amount or category is unusable.
                             Every failing field is reported at once.
        """
        try:
            return ExpenseInput(amount=amount, category=category, note=note)
        except PydanticValidationError as e:
            issues = [self._issue_from_error(error) for error in e.errors()]
            summary = "; ".join(issue.message for issue in issues)
            raise ValidationError(f"Invalid expense: {summary}", issues) from e

    def validate_date(self, value: Optional[Any]) -> dt.date:
        """
        Resolve the expense date, defaulting to today's local date.

        A datetime is reduced to its date; anything else is rejected.
        """
        if value is None:
            return dt.date.today()
        if isinstance(value, dt.datetime):
            return value.date()
        if isinstance(value, dt.date):
            return value
        if isinstance(value, str):
            try:
                return dt.date.fromisoformat(value.strip())
            except ValueError:
                pass
        raise ValidationError(
            f"Invalid expense date: {value!r}",
            [ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message="Date must be a calendar date in YYYY-MM-DD form",
            )],
        )

    def validate_id(self, expense_id: Any) -> int:
        """
        Reject ids that are not integers.

        Integers that were never assigned are left to the store, which
        treats them like any other missing id.
        """
        if isinstance(expense_id, bool) or not isinstance(expense_id, int):
            raise ValidationError(
                f"Invalid expense id: {expense_id!r}",
                [ValidationIssue(
                    field="id",
                    issue_type="invalid_value",
                    message="Expense id must be an integer",
                )],
            )
        return expense_id

    @staticmethod
    def _issue_from_error(error: dict) -> ValidationIssue:
        field = str(error["loc"][0]) if error.get("loc") else "expense"
        message = error.get("msg", "Invalid value")
        # pydantic prefixes messages raised from our validators
        message = message.removeprefix("Value error, ")
        issue_type = "missing" if error.get("type") == "missing" else "invalid_value"
        return ValidationIssue(
            field=field,
            issue_type=issue_type,
            message=message,
        )
