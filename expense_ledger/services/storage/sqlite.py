"""
SQLite Storage Implementation

DESIGN DECISION: SQLite is the durable backend because:
1. The ledger is single-user and local; no server to run
2. One file is easy to back up or move
3. AUTOINCREMENT gives us ids that are never reused

TRADEOFFS:
- No protection against a second process writing the same file
  (the ledger assumes a single writer)
- Amounts are stored as decimal text, not REAL, so nothing is lost to
  float rounding on the way in or out

The implementation follows the abstract interface, so callers never see
SQLAlchemy types.
"""

import datetime as dt
from collections.abc import Iterator
from contextlib import contextmanager
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from sqlalchemy import Date, Integer, String, Text, create_engine, select
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.types import TypeDecorator

from expense_ledger.activity.logger import get_logger
from expense_ledger.config import get_settings
from expense_ledger.exceptions import NotFoundError, StorageUnavailableError
from expense_ledger.models.expense import ExpenseRecord
from expense_ledger.services.storage.interface import ExpenseStorageInterface
from expense_ledger.validation import ExpenseValidator


# =============================================================================
# SCHEMA
# =============================================================================

class Base(DeclarativeBase):
    pass


class DecimalText(TypeDecorator):
    """Stores a Decimal as its exact string form."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value: Optional[Decimal], dialect) -> Optional[str]:
        if value is None:
            return None
        return str(value)

    def process_result_value(self, value: Optional[str], dialect) -> Optional[Decimal]:
        if value is None:
            return None
        return Decimal(value)


class ExpenseRow(Base):
    __tablename__ = "expenses"
    # AUTOINCREMENT keeps SQLite from handing out a deleted max id again
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    amount: Mapped[Decimal] = mapped_column(DecimalText, nullable=False)
    category: Mapped[str] = mapped_column(Text, nullable=False)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # SQLAlchemy's Date renders as YYYY-MM-DD text on SQLite
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)


# =============================================================================
# CLIENT
# =============================================================================

class SQLiteClient:
    """
    Low-level SQLite connection wrapper.

    Owns the engine and session factory; every store operation runs
    inside one session_scope().
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        echo: Optional[bool] = None,
    ):
        settings = get_settings().storage
        self._url = database_url or settings.url
        self._echo = settings.echo_sql if echo is None else echo
        self._engine: Optional[Engine] = None
        self._session_maker: Optional[sessionmaker[Session]] = None

    @property
    def url(self) -> str:
        return self._url

    def connect(self) -> Engine:
        """Create the engine on first use."""
        if self._engine is None:
            url = make_url(self._url)
            kwargs: dict[str, Any] = {"echo": self._echo}
            if url.database in (None, "", ":memory:"):
                # One shared connection, or every session sees its own empty DB
                kwargs["poolclass"] = StaticPool
                kwargs["connect_args"] = {"check_same_thread": False}
            self._engine = create_engine(url, **kwargs)
            self._session_maker = sessionmaker(
                bind=self._engine,
                expire_on_commit=False,
                class_=Session,
            )
        return self._engine

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Provide a transactional scope around a series of operations."""
        self.connect()
        assert self._session_maker is not None  # bound by connect()
        session = self._session_maker()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        """Close pooled connections. The client reconnects on next use."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_maker = None


# =============================================================================
# STORAGE
# =============================================================================

class SQLiteExpenseStorage(ExpenseStorageInterface):
    """
    SQLite implementation of expense storage.

    One row per expense in the `expenses` table.
    """

    def __init__(
        self,
        client: Optional[SQLiteClient] = None,
        validator: Optional[ExpenseValidator] = None,
    ):
        self._client = client or SQLiteClient()
        self._validator = validator or ExpenseValidator()
        self._initialized = False
        self._logger = get_logger(__name__)

    @property
    def url(self) -> str:
        return self._client.url

    def close(self) -> None:
        """Release pooled connections; the store reconnects on next use."""
        self._client.dispose()

    @contextmanager
    def _storage_operation(self, operation: str) -> Iterator[None]:
        """Translate backend failures and unreadable rows into StorageUnavailableError."""
        try:
            yield
        except (SQLAlchemyError, OSError, InvalidOperation, ValueError) as e:
            self._logger.error(
                "storage_unavailable",
                operation=operation,
                database=self.url,
                error=str(e),
            )
            raise StorageUnavailableError(f"Failed to {operation}: {e}") from e

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise StorageUnavailableError(
                "Expense store is not initialized; call initialize() first"
            )

    @staticmethod
    def _row_to_record(row: ExpenseRow) -> ExpenseRecord:
        return ExpenseRecord(
            id=row.id,
            amount=row.amount,
            category=row.category,
            note=row.note,
            date=row.date,
        )

    async def initialize(self) -> None:
        with self._storage_operation("initialize expense store"):
            engine = self._client.connect()
            # create_all checks for the table first, so reruns are no-ops
            Base.metadata.create_all(bind=engine)
        self._initialized = True
        self._logger.info("expense_store_initialized", database=self.url)

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

        with self._storage_operation("save expense"):
            with self._client.session_scope() as session:
                row = ExpenseRow(
                    amount=values.amount,
                    category=values.category,
                    note=values.note,
                    date=day,
                )
                session.add(row)
                session.flush()
                expense_id = row.id

        self._logger.info("expense_created", expense_id=expense_id)
        return expense_id

    async def list_expenses(self) -> list[ExpenseRecord]:
        self._require_initialized()
        with self._storage_operation("list expenses"):
            with self._client.session_scope() as session:
                rows = session.scalars(
                    select(ExpenseRow).order_by(ExpenseRow.id.desc())
                ).all()
                return [self._row_to_record(row) for row in rows]

    async def get_expense(self, expense_id: int) -> Optional[ExpenseRecord]:
        expense_id = self._validator.validate_id(expense_id)
        self._require_initialized()
        with self._storage_operation("get expense"):
            with self._client.session_scope() as session:
                row = session.get(ExpenseRow, expense_id)
                return self._row_to_record(row) if row is not None else None

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

        with self._storage_operation("update expense"):
            with self._client.session_scope() as session:
                row = session.get(ExpenseRow, expense_id)
                if row is None:
                    raise NotFoundError(f"Expense not found: {expense_id}")

                row.amount = values.amount
                row.category = values.category
                row.note = values.note
                session.flush()
                record = self._row_to_record(row)

        self._logger.info("expense_updated", expense_id=expense_id)
        return record

    async def delete_expense(self, expense_id: int) -> bool:
        expense_id = self._validator.validate_id(expense_id)
        self._require_initialized()

        with self._storage_operation("delete expense"):
            with self._client.session_scope() as session:
                row = session.get(ExpenseRow, expense_id)
                if row is None:
                    removed = False
                else:
                    session.delete(row)
                    removed = True

        self._logger.info("expense_deleted", expense_id=expense_id, removed=removed)
        return removed
