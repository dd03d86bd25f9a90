"""Tests covering history persistence and recent-query helpers."""

from __future__ import annotations

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from shopfinder.db.models import SearchHistory
from shopfinder.services.exceptions import PersistenceError
from shopfinder.services.history import SqlHistoryStore, distinct_recent, remember_query


@pytest.mark.asyncio
async def test_append_persists_record(database, session):
    store = SqlHistoryStore(database)

    record = await store.append("user-1", "desk lamp", "UK")

    assert record.owner_id == "user-1"
    assert record.query_text == "desk lamp"
    assert record.country_code == "UK"
    stored = (await session.execute(select(SearchHistory))).scalar_one()
    assert stored.user_id == "user-1"
    assert stored.search_query == "desk lamp"
    assert stored.country == "UK"
    assert stored.search_date is not None


@pytest.mark.asyncio
async def test_list_recent_is_newest_first_and_scoped_to_owner(database):
    store = SqlHistoryStore(database)
    for query in ("first", "second", "third"):
        await store.append("user-1", query, "UK")
    await store.append("user-2", "someone else", "UK")

    assert await store.list_recent("user-1", 10) == ["third", "second", "first"]
    assert await store.list_recent("user-1", 2) == ["third", "second"]
    assert await store.list_recent("nobody", 10) == []


@pytest.mark.asyncio
async def test_store_errors_become_persistence_errors():
    class BrokenDatabase:
        def session(self):
            raise OperationalError("INSERT", {}, Exception("database is locked"))

    store = SqlHistoryStore(BrokenDatabase())

    with pytest.raises(PersistenceError) as excinfo:
        await store.append("user-1", "lamp", "UK")
    assert excinfo.value.store == "search_history"

    with pytest.raises(PersistenceError):
        await store.list_recent("user-1", 10)


def test_remember_query_moves_existing_to_front():
    assert remember_query(["b", "a", "c"], "a", 10) == ["a", "b", "c"]


def test_remember_query_caps_length():
    queries = [f"q{i}" for i in range(10)]

    updated = remember_query(queries, "new", 10)

    assert len(updated) == 10
    assert updated[0] == "new"
    assert "q9" not in updated


def test_remember_query_is_case_sensitive():
    assert remember_query(["Lamp"], "lamp", 10) == ["lamp", "Lamp"]


def test_distinct_recent_keeps_first_seen():
    assert distinct_recent(["a", "b", "a", "c", "b"], 10) == ["a", "b", "c"]
    assert distinct_recent(["a", "b", "c"], 2) == ["a", "b"]
