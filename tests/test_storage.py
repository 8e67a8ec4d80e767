"""
Contract tests for expense storage.

Every test runs once per backend through the parametrized `store` fixture.
"""

import datetime as dt
from decimal import Decimal

import pytest

from expense_ledger.exceptions import (
    NotFoundError,
    StorageUnavailableError,
    ValidationError,
)


class TestInitialize:

    @pytest.mark.asyncio
    async def test_initialize_twice_is_noop(self, store):
        await store.initialize()
        expense_id = await store.create_expense("10", "Food")
        await store.initialize()

        records = await store.list_expenses()
        assert [r.id for r in records] == [expense_id]

    @pytest.mark.asyncio
    async def test_operations_before_initialize_fail(self, store):
        with pytest.raises(StorageUnavailableError):
            await store.create_expense("10", "Food")
        with pytest.raises(StorageUnavailableError):
            await store.list_expenses()

    @pytest.mark.asyncio
    async def test_invalid_input_is_rejected_before_initialize_check(self, store):
        """Validation runs before any storage access."""
        with pytest.raises(ValidationError):
            await store.create_expense("-1", "Food")


class TestCreate:

    @pytest.mark.asyncio
    async def test_create_then_list_returns_normalized_fields(self, store):
        await store.initialize()
        expense_id = await store.create_expense(
            "12.50", "  Food ", "   ", expense_date=dt.date(2024, 3, 5)
        )

        [record] = await store.list_expenses()
        assert record.id == expense_id
        assert record.amount == Decimal("12.50")
        assert record.category == "Food"
        assert record.note is None
        assert record.date == dt.date(2024, 3, 5)

    @pytest.mark.asyncio
    async def test_note_is_kept_trimmed(self, store):
        await store.initialize()
        await store.create_expense(3, "Books", "  used copy ")
        [record] = await store.list_expenses()
        assert record.note == "used copy"

    @pytest.mark.asyncio
    async def test_date_defaults_to_today(self, store):
        await store.initialize()
        await store.create_expense(3, "Books")
        [record] = await store.list_expenses()
        assert record.date == dt.date.today()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [-5, 0, "0.00", "abc", None, float("nan")])
    async def test_invalid_amount_never_commits(self, store, amount):
        await store.initialize()
        with pytest.raises(ValidationError):
            await store.create_expense(amount, "Food")
        assert await store.list_expenses() == []

    @pytest.mark.asyncio
    async def test_blank_category_never_commits(self, store):
        await store.initialize()
        with pytest.raises(ValidationError):
            await store.create_expense("5", "   ")
        assert await store.list_expenses() == []

    @pytest.mark.asyncio
    async def test_categories_are_case_sensitive(self, store):
        await store.initialize()
        await store.create_expense(1, "Food")
        await store.create_expense(1, "food")
        categories = {r.category for r in await store.list_expenses()}
        assert categories == {"Food", "food"}


class TestList:

    @pytest.mark.asyncio
    async def test_newest_id_first(self, store):
        await store.initialize()
        first = await store.create_expense(1, "A")
        second = await store.create_expense(2, "B")
        third = await store.create_expense(3, "C")

        records = await store.list_expenses()
        assert [r.id for r in records] == [third, second, first]

    @pytest.mark.asyncio
    async def test_list_returns_a_copy(self, store):
        await store.initialize()
        await store.create_expense(1, "A")

        snapshot = await store.list_expenses()
        snapshot.clear()

        assert len(await store.list_expenses()) == 1


class TestUpdate:

    @pytest.mark.asyncio
    async def test_update_changes_only_mutable_fields(self, store):
        await store.initialize()
        expense_id = await store.create_expense(
            "10", "Food", "lunch", expense_date=dt.date(2024, 1, 1)
        )

        updated = await store.update_expense(expense_id, "15.25", " Books ", "")

        assert updated.id == expense_id
        assert updated.date == dt.date(2024, 1, 1)
        assert updated.amount == Decimal("15.25")
        assert updated.category == "Books"
        assert updated.note is None
        assert await store.get_expense(expense_id) == updated

    @pytest.mark.asyncio
    async def test_update_missing_id_raises_not_found(self, store):
        await store.initialize()
        with pytest.raises(NotFoundError):
            await store.update_expense(42, "1", "Food")

    @pytest.mark.asyncio
    async def test_invalid_update_leaves_record_untouched(self, store):
        await store.initialize()
        expense_id = await store.create_expense("10", "Food")

        with pytest.raises(ValidationError):
            await store.update_expense(expense_id, "-3", "Food")

        record = await store.get_expense(expense_id)
        assert record.amount == Decimal("10")


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_removes_record(self, store):
        await store.initialize()
        keep = await store.create_expense(1, "A")
        drop = await store.create_expense(2, "B")

        assert await store.delete_expense(drop) is True
        assert [r.id for r in await store.list_expenses()] == [keep]

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, store):
        await store.initialize()
        expense_id = await store.create_expense(1, "A")

        assert await store.delete_expense(expense_id) is True
        assert await store.delete_expense(expense_id) is False
        assert await store.delete_expense(999) is False

    @pytest.mark.asyncio
    async def test_ids_are_not_reused(self, store):
        await store.initialize()
        await store.create_expense(1, "A")
        newest = await store.create_expense(2, "B")
        await store.delete_expense(newest)

        replacement = await store.create_expense(3, "C")
        assert replacement > newest

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, store):
        await store.initialize()
        assert await store.get_expense(7) is None
