"""Per-user search history persistence."""

from __future__ import annotations

from typing import Protocol, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from shopfinder.db.models import SearchHistory
from shopfinder.db.session import Database
from shopfinder.domain.models import HistoryRecord
from shopfinder.services.exceptions import PersistenceError
from shopfinder.utils.datetime import utc_now


class HistoryStore(Protocol):
    async def append(self, owner_id: str, query_text: str, country_code: str) -> HistoryRecord:
        """Persist one query. Raises ``PersistenceError`` on failure."""

    async def list_recent(self, owner_id: str, limit: int) -> Sequence[str]:
        """Return stored query texts, newest first. Raises ``PersistenceError`` on failure."""


class SqlHistoryStore:
    """Append-only history table access."""

    store_name = "search_history"

    def __init__(self, database: Database) -> None:
        self._database = database

    async def append(self, owner_id: str, query_text: str, country_code: str) -> HistoryRecord:
        entry = SearchHistory(
            user_id=owner_id,
            search_query=query_text,
            country=country_code,
            search_date=utc_now(),
        )
        try:
            async with self._database.session() as session:
                session.add(entry)
                await session.flush()
                await session.commit()
        except SQLAlchemyError as exc:
            raise PersistenceError(self.store_name, str(exc)) from exc

        return HistoryRecord(
            owner_id=owner_id,
            query_text=query_text,
            country_code=country_code,
            timestamp=entry.search_date,
        )

    async def list_recent(self, owner_id: str, limit: int) -> list[str]:
        stmt = (
            select(SearchHistory.search_query)
            .where(SearchHistory.user_id == owner_id)
            .order_by(SearchHistory.search_date.desc(), SearchHistory.id.desc())
            .limit(limit)
        )
        try:
            async with self._database.session() as session:
                result = await session.execute(stmt)
                return list(result.scalars().all())
        except SQLAlchemyError as exc:
            raise PersistenceError(self.store_name, str(exc)) from exc


def remember_query(queries: Sequence[str], query: str, limit: int) -> list[str]:
    """Move ``query`` to the front, dropping any earlier copy, and cap the list."""

    return [query, *(item for item in queries if item != query)][:limit]


def distinct_recent(queries: Sequence[str], limit: int) -> list[str]:
    """Deduplicate stored queries by exact text, keeping the first (newest) occurrence."""

    seen: set[str] = set()
    unique: list[str] = []
    for item in queries:
        if item in seen:
            continue
        seen.add(item)
        unique.append(item)
    return unique[:limit]


__all__ = ["HistoryStore", "SqlHistoryStore", "distinct_recent", "remember_query"]
