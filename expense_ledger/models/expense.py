"""
Core Data Models for Expense Ledger

These models define the schemas for all data flowing through the ledger.
They are designed to:
1. Enforce the record invariants at runtime
2. Provide clear validation error messages
3. Hand out immutable snapshots, never live storage objects

DESIGN DECISION: Amounts are Decimal end to end. Floats are converted
through their shortest string form on the way in, so 0.1 is stored as
Decimal("0.1") and a hundred of them sum to exactly 10.0.
"""

import datetime as dt
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TimeWindow(str, Enum):
    """
    Which records participate in a ledger view.

    WEEK uses a simple day-count bucketing, not ISO-8601 weeks.
    See expense_ledger.projection.engine.week_number.
    """
    ALL = "ALL"
    WEEK = "WEEK"
    MONTH = "MONTH"

    @classmethod
    def _missing_(cls, value: object) -> Optional["TimeWindow"]:
        # Accept "week", " Month " etc. from form controls
        if isinstance(value, str):
            normalized = value.strip().upper()
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    @property
    def label(self) -> str:
        """Display label for the window."""
        return _WINDOW_LABELS[self]


_WINDOW_LABELS = {
    TimeWindow.ALL: "All",
    TimeWindow.WEEK: "This Week",
    TimeWindow.MONTH: "This Month",
}


# =============================================================================
# INPUT NORMALIZATION
# =============================================================================

def parse_amount(value: Any) -> Decimal:
    """
    Convert user or caller input into a positive, finite Decimal.

    Raises ValueError with a user-facing message otherwise.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError("Amount must be a number")

    if isinstance(value, float):
        value = str(value)
    if isinstance(value, str):
        value = value.strip()

    try:
        amount = value if isinstance(value, Decimal) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError("Amount must be a number")

    if not amount.is_finite():
        raise ValueError("Amount must be a finite number")
    if amount <= 0:
        raise ValueError("Amount must be greater than zero")
    return amount


class ExpenseInput(BaseModel):
    """
    The mutable fields of an expense after normalization.

    Produced by ExpenseValidator and consumed by every storage backend,
    so all backends agree on what "valid" means.
    """
    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(
        ...,
        description="Positive expense amount"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="Category label, trimmed, case preserved"
    )
    note: Optional[str] = Field(
        default=None,
        description="Optional note; None when blank"
    )

    @field_validator('amount', mode='before')
    @classmethod
    def coerce_amount(cls, v: Any) -> Decimal:
        return parse_amount(v)

    @field_validator('category', mode='before')
    @classmethod
    def trim_category(cls, v: Any) -> str:
        if not isinstance(v, str):
            raise ValueError("Category must be text")
        v = v.strip()
        if not v:
            raise ValueError("Category is required")
        return v

    @field_validator('note', mode='before')
    @classmethod
    def blank_note_to_none(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        if not isinstance(v, str):
            raise ValueError("Note must be text")
        return v.strip() or None


# =============================================================================
# CORE EXPENSE MODEL
# =============================================================================

class ExpenseRecord(BaseModel):
    """
    A persisted expense.

    CRITICAL: Instances are read-only snapshots. Changing a record means
    calling the store's update operation, never editing one of these.
    """
    model_config = ConfigDict(frozen=True)

    id: int = Field(
        ...,
        ge=1,
        description="Store-assigned identifier, never reused"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Positive expense amount"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="Category label"
    )
    note: Optional[str] = Field(
        default=None,
        min_length=1,
        description="Optional note"
    )
    date: dt.date = Field(
        ...,
        description="Calendar date of the expense; the filtering key"
    )


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


# =============================================================================
# VIEW MODELS
# =============================================================================

class LedgerView(BaseModel):
    """
    Projection of a record set through a time window.

    Produced by LedgerViewEngine.project; recomputed rather than updated.
    """
    model_config = ConfigDict(frozen=True)

    window: TimeWindow
    reference_date: dt.date = Field(
        ...,
        description="The 'today' the window was evaluated against"
    )
    filtered_records: list[ExpenseRecord] = Field(default_factory=list)
    total: Decimal = Field(
        default=Decimal("0"),
        description="Sum of amounts over filtered_records"
    )
    category_totals: dict[str, Decimal] = Field(
        default_factory=dict,
        description="Per-category sums, in order of first appearance"
    )

    @property
    def record_count(self) -> int:
        return len(self.filtered_records)

    @property
    def is_empty(self) -> bool:
        return not self.filtered_records
