"""
Activity Models for Expense Ledger

Each ledger action (add, edit, remove, view refresh) produces one
structured event that is written to the local log. Events are never
persisted alongside the expenses; they exist for debugging only.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class ActivityEventType(str, Enum):
    """Types of ledger events we log."""
    LEDGER_OPENED = "ledger_opened"

    EXPENSE_CREATED = "expense_created"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"
    EXPENSE_NOT_FOUND = "expense_not_found"

    VALIDATION_FAILED = "validation_failed"
    VIEW_PROJECTED = "view_projected"

    STORAGE_ERROR = "storage_error"


class ActivitySeverity(str, Enum):
    """Severity level for activity events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ActivityEvent(BaseModel):
    """A single ledger activity event."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    event_type: ActivityEventType
    severity: ActivitySeverity = ActivitySeverity.INFO

    expense_id: Optional[int] = Field(
        default=None,
        description="Expense the event relates to, if any"
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Links events caused by one user action"
    )

    description: str
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict[str, Any]:
        """Flatten into keyword arguments for the structured logger."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "expense_id": self.expense_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class ActivityEventBuilder:
    """Factory methods for the events the ledger emits."""

    @staticmethod
    def ledger_opened(database: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.LEDGER_OPENED,
            description="Expense store initialized",
            details={"database": database},
        )

    @staticmethod
    def expense_created(
        expense_id: int,
        amount: str,
        category: str,
        correlation_id: Optional[UUID] = None,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.EXPENSE_CREATED,
            expense_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense {expense_id} recorded",
            details={"amount": amount, "category": category},
        )

    @staticmethod
    def expense_updated(
        expense_id: int,
        amount: str,
        category: str,
        correlation_id: Optional[UUID] = None,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.EXPENSE_UPDATED,
            expense_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense {expense_id} updated",
            details={"amount": amount, "category": category},
        )

    @staticmethod
    def expense_deleted(
        expense_id: int,
        removed: bool,
        correlation_id: Optional[UUID] = None,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.EXPENSE_DELETED,
            expense_id=expense_id,
            correlation_id=correlation_id,
            description=(
                f"Expense {expense_id} deleted" if removed
                else f"Expense {expense_id} was already gone"
            ),
            details={"removed": removed},
        )

    @staticmethod
    def expense_not_found(
        expense_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.EXPENSE_NOT_FOUND,
            severity=ActivitySeverity.WARNING,
            expense_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense {expense_id} does not exist",
        )

    @staticmethod
    def validation_failed(
        issues: list[dict],
        expense_id: Optional[int] = None,
        correlation_id: Optional[UUID] = None,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.VALIDATION_FAILED,
            severity=ActivitySeverity.WARNING,
            expense_id=expense_id,
            correlation_id=correlation_id,
            description="Expense input rejected",
            details={"issues": issues},
        )

    @staticmethod
    def view_projected(
        window: str,
        record_count: int,
        total: str,
        correlation_id: Optional[UUID] = None,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.VIEW_PROJECTED,
            severity=ActivitySeverity.DEBUG,
            correlation_id=correlation_id,
            description=f"Ledger view for {window}",
            details={"record_count": record_count, "total": total},
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.STORAGE_ERROR,
            severity=ActivitySeverity.ERROR,
            correlation_id=correlation_id,
            description=f"Storage failure during {operation}",
            error_message=error_message,
        )
