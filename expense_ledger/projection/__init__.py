"""Ledger view projection package."""

from expense_ledger.projection.engine import (
    LedgerViewEngine,
    coerce_window,
    format_amount,
    project,
    week_number,
)

__all__ = [
    "LedgerViewEngine",
    "coerce_window",
    "format_amount",
    "project",
    "week_number",
]
