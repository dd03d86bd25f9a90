"""In-memory state of one search session and its observers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from shopfinder.domain.models import Product
from shopfinder.logging import logger
from shopfinder.services.history import distinct_recent, remember_query

RECENT_QUERY_LIMIT = 10


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    current_query: str
    in_flight: bool
    recent_queries: tuple[str, ...]
    results: tuple[Product, ...]
    degraded: bool = False


SessionListener = Callable[[SessionSnapshot], None]


class SearchSession:
    """State owned by a single ``SearchOrchestrator``.

    Readers get immutable snapshots; only the orchestrator calls the mutators. ``results`` is
    replaced wholesale at commit time together with ``in_flight`` and ``degraded``.
    """

    def __init__(self, recent_limit: int = RECENT_QUERY_LIMIT) -> None:
        self.recent_limit = recent_limit
        self._current_query = ""
        self._in_flight = False
        self._recent_queries: tuple[str, ...] = ()
        self._results: tuple[Product, ...] = ()
        self._degraded = False
        self._listeners: list[SessionListener] = []
        self._closed = False

    @property
    def current_query(self) -> str:
        return self._current_query

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def recent_queries(self) -> tuple[str, ...]:
        return self._recent_queries

    @property
    def results(self) -> tuple[Product, ...]:
        return self._results

    @property
    def degraded(self) -> bool:
        return self._degraded

    @property
    def closed(self) -> bool:
        return self._closed

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            current_query=self._current_query,
            in_flight=self._in_flight,
            recent_queries=self._recent_queries,
            results=self._results,
            degraded=self._degraded,
        )

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def begin(self, query: str) -> None:
        self._current_query = query
        self._in_flight = True
        self._notify()

    def commit(self, results: Sequence[Product], *, degraded: bool = False) -> None:
        self._results = tuple(results)
        self._degraded = degraded
        self._in_flight = False
        self._notify()

    def abort(self) -> None:
        """End an unfinished search, keeping the last committed results."""

        if not self._in_flight:
            return
        self._in_flight = False
        self._notify()

    def clear(self) -> None:
        self._current_query = ""
        self._results = ()
        self._degraded = False
        self._notify()

    def remember_query(self, query: str) -> None:
        self._recent_queries = tuple(
            remember_query(self._recent_queries, query, self.recent_limit)
        )
        self._notify()

    def replace_recent(self, queries: Sequence[str]) -> None:
        self._recent_queries = tuple(distinct_recent(queries, self.recent_limit))
        self._notify()

    def clear_recent(self) -> None:
        if not self._recent_queries:
            return
        self._recent_queries = ()
        self._notify()

    def close(self) -> None:
        self._listeners.clear()
        self._closed = True

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("session_listener_failed", listener=repr(listener))


__all__ = ["RECENT_QUERY_LIMIT", "SearchSession", "SessionListener", "SessionSnapshot"]
