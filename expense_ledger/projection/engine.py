"""
Ledger View Engine

DESIGN DECISION: Projection is DETERMINISTIC and stateless.
Given the same records, window and reference date it always returns the
same view. The engine never reads the clock and never touches storage;
the caller fetches a snapshot from the store and passes "now" in.

This is what lets a presentation layer recompute the view after every
mutation without totals drifting from the stored records.
"""

import datetime as dt
from collections.abc import Iterable
from decimal import (
    MAX_EMAX,
    MAX_PREC,
    MIN_EMIN,
    ROUND_HALF_UP,
    Decimal,
    Inexact,
    Overflow,
    localcontext,
)
from typing import Union

from expense_ledger.exceptions import ValidationError
from expense_ledger.models.expense import (
    ExpenseRecord,
    LedgerView,
    TimeWindow,
    ValidationIssue,
)


_CENTS = Decimal("0.01")


def week_number(day: dt.date) -> int:
    """
    Bucket a date into a week of its year.

    Counts days since January 1, shifts by January 1's weekday (Sunday
    is 0), and floors into 7-day buckets. This is NOT an ISO-8601 week:
    there is no Thursday anchoring and weeks never span two years.
    Do not replace it with date.isocalendar().
    """
    jan_first = dt.date(day.year, 1, 1)
    jan_first_weekday = (jan_first.weekday() + 1) % 7
    return ((day - jan_first).days + jan_first_weekday) // 7


def coerce_window(window: Union[TimeWindow, str]) -> TimeWindow:
    """Accept a TimeWindow or its name; anything else is a ValidationError."""
    if isinstance(window, TimeWindow):
        return window
    try:
        return TimeWindow(window)
    except ValueError:
        raise ValidationError(
            f"Unknown time window: {window!r}",
            [ValidationIssue(
                field="window",
                issue_type="invalid_value",
                message="Window must be one of ALL, WEEK, MONTH",
            )],
        )


def format_amount(amount: Decimal) -> str:
    """Render an amount as money with two decimals, e.g. $30.00."""
    return f"${amount.quantize(_CENTS, rounding=ROUND_HALF_UP)}"


class LedgerViewEngine:
    """
    Projects a record set through a time window.

    GUARANTEES:
    - Output depends only on the arguments
    - Totals are Decimal sums, exact for any number of records
    - Category totals only contain categories with filtered records,
      in order of first appearance
    """

    def project(
        self,
        records: Iterable[ExpenseRecord],
        window: Union[TimeWindow, str],
        now: dt.date,
    ) -> LedgerView:
        """Filter the records, then total them overall and per category."""
        window = coerce_window(window)
        reference_date = now.date() if isinstance(now, dt.datetime) else now

        filtered = [
            record for record in records
            if self.matches(record, window, reference_date)
        ]
        total, category_totals = self.aggregate(filtered)

        return LedgerView(
            window=window,
            reference_date=reference_date,
            filtered_records=filtered,
            total=total,
            category_totals=category_totals,
        )

    def matches(
        self,
        record: ExpenseRecord,
        window: TimeWindow,
        reference_date: dt.date,
    ) -> bool:
        """Does the record fall inside the window around reference_date?"""
        if window == TimeWindow.ALL:
            return True

        day = record.date
        if day.year != reference_date.year:
            return False

        if window == TimeWindow.MONTH:
            return day.month == reference_date.month
        # WEEK
        return week_number(day) == week_number(reference_date)

    def aggregate(
        self,
        records: Iterable[ExpenseRecord],
    ) -> tuple[Decimal, dict[str, Decimal]]:
        """
        Grand total and per-category totals.

        Sums run in a context wide enough to hold any amount the validator
        accepts. Inexact is trapped, so a total is either exact or an error.
        """
        total = Decimal("0")
        category_totals: dict[str, Decimal] = {}

        with localcontext() as ctx:
            ctx.prec = MAX_PREC
            ctx.Emax = MAX_EMAX
            ctx.Emin = MIN_EMIN
            ctx.traps[Inexact] = True
            try:
                for record in records:
                    total += record.amount
                    category_totals[record.category] = (
                        category_totals.get(record.category, Decimal("0"))
                        + record.amount
                    )
            except (Inexact, Overflow, MemoryError) as e:
                raise ValidationError(
                    "Amounts are too large to total exactly",
                    [ValidationIssue(
                        field="amount",
                        issue_type="invalid_value",
                        message="Amounts are too large to total exactly",
                    )],
                ) from e

        return total, category_totals


_default_engine = LedgerViewEngine()


def project(
    records: Iterable[ExpenseRecord],
    window: Union[TimeWindow, str],
    now: dt.date,
) -> LedgerView:
    """Module-level shortcut for LedgerViewEngine().project."""
    return _default_engine.project(records, window, now)
