"""Tests specific to the SQLite backend: persisted layout and failures."""

import datetime as dt
from decimal import Decimal

import pytest
from sqlalchemy import create_engine, inspect, text

from expense_ledger.exceptions import StorageUnavailableError
from expense_ledger.services.storage import SQLiteClient, SQLiteExpenseStorage


class TestPersistence:

    @pytest.mark.asyncio
    async def test_records_survive_reopening(self, database_url):
        first_client = SQLiteClient(database_url)
        first = SQLiteExpenseStorage(first_client)
        await first.initialize()
        expense_id = await first.create_expense("9.99", "Food", "snack")
        first_client.dispose()

        second_client = SQLiteClient(database_url)
        second = SQLiteExpenseStorage(second_client)
        await second.initialize()
        [record] = await second.list_expenses()
        second_client.dispose()

        assert record.id == expense_id
        assert record.amount == Decimal("9.99")
        assert record.note == "snack"

    @pytest.mark.asyncio
    async def test_row_layout(self, sqlite_store, database_url):
        await sqlite_store.initialize()
        await sqlite_store.create_expense(
            "0.10", "Food", expense_date=dt.date(2024, 1, 5)
        )

        engine = create_engine(database_url)
        try:
            columns = {c["name"] for c in inspect(engine).get_columns("expenses")}
            with engine.connect() as conn:
                row = conn.execute(
                    text("SELECT amount, category, note, date FROM expenses")
                ).one()
        finally:
            engine.dispose()

        assert columns == {"id", "amount", "category", "note", "date"}
        # Exact decimal text, no float round trip
        assert row.amount == "0.10"
        assert row.note is None
        assert row.date == "2024-01-05"

    @pytest.mark.asyncio
    async def test_many_small_amounts_round_trip_exactly(self, sqlite_store):
        await sqlite_store.initialize()
        for _ in range(100):
            await sqlite_store.create_expense("0.10", "Coffee")

        records = await sqlite_store.list_expenses()
        assert sum((r.amount for r in records), Decimal("0")) == Decimal("10.00")

    @pytest.mark.asyncio
    async def test_in_memory_url_shares_one_database(self):
        client = SQLiteClient("sqlite+pysqlite:///:memory:")
        store = SQLiteExpenseStorage(client)
        await store.initialize()
        await store.create_expense(1, "A")
        assert len(await store.list_expenses()) == 1
        client.dispose()


class TestFailures:

    @pytest.mark.asyncio
    async def test_unopenable_path_raises_storage_unavailable(self, tmp_path):
        url = f"sqlite+pysqlite:///{tmp_path / 'missing' / 'dir' / 'ledger.db'}"
        store = SQLiteExpenseStorage(SQLiteClient(url))

        with pytest.raises(StorageUnavailableError) as exc_info:
            await store.initialize()
        assert exc_info.value.__cause__ is not None

    @pytest.mark.asyncio
    async def test_dropped_table_surfaces_as_storage_unavailable(
        self, sqlite_store, database_url
    ):
        await sqlite_store.initialize()

        engine = create_engine(database_url)
        with engine.begin() as conn:
            conn.execute(text("DROP TABLE expenses"))
        engine.dispose()

        with pytest.raises(StorageUnavailableError):
            await sqlite_store.list_expenses()

    @pytest.mark.asyncio
    async def test_corrupt_amount_surfaces_as_storage_unavailable(
        self, sqlite_store, database_url
    ):
        await sqlite_store.initialize()
        await sqlite_store.create_expense("5", "Food")

        engine = create_engine(database_url)
        with engine.begin() as conn:
            conn.execute(text("UPDATE expenses SET amount = 'five dollars'"))
        engine.dispose()

        with pytest.raises(StorageUnavailableError) as exc_info:
            await sqlite_store.list_expenses()
        assert exc_info.value.__cause__ is not None

    @pytest.mark.asyncio
    async def test_invalid_stored_row_surfaces_as_storage_unavailable(
        self, sqlite_store, database_url
    ):
        await sqlite_store.initialize()
        expense_id = await sqlite_store.create_expense("5", "Food")

        engine = create_engine(database_url)
        with engine.begin() as conn:
            conn.execute(text("UPDATE expenses SET amount = '-5'"))
        engine.dispose()

        with pytest.raises(StorageUnavailableError):
            await sqlite_store.get_expense(expense_id)

    def test_client_uses_settings_url_by_default(self, monkeypatch, tmp_path):
        monkeypatch.setenv("EXPENSE_LEDGER_DATABASE_PATH", str(tmp_path / "env.db"))
        client = SQLiteClient()
        assert client.url.endswith("env.db")
