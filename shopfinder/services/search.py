"""Search orchestration: history, provider fetch, mapping, fallback and caching."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Callable, TypeVar

from shopfinder.config import HistorySettings, ResultCacheSettings
from shopfinder.domain.models import Identity, Product
from shopfinder.logging import logger
from shopfinder.services.exceptions import PersistenceError, ProviderError
from shopfinder.services.fallback import build_fallback_products
from shopfinder.services.history import HistoryStore
from shopfinder.services.identity import IdentityProvider, Unsubscribe
from shopfinder.services.mapper import map_shopping_results
from shopfinder.services.provider import ShoppingProviderClient
from shopfinder.services.result_cache import ResultCache
from shopfinder.services.session import SearchSession
from shopfinder.utils.datetime import utc_now

T = TypeVar("T")


@dataclass(slots=True)
class StepOutcome:
    """Result of a best-effort side effect. Callers decide whether to look at it."""

    step: str
    ok: bool
    value: Any = None
    error: Exception | None = None


@dataclass(slots=True)
class ProviderOutcome:
    products: list[Product]
    degraded: bool
    error: Exception | None = None


class SearchOrchestrator:
    """Runs one search at a time against a single ``SearchSession``.

    ``perform_search`` only propagates cancellation: provider failures turn into fallback
    products and store failures are logged and ignored. Callers serialize calls by checking
    ``session.in_flight``.
    """

    def __init__(
        self,
        provider: ShoppingProviderClient,
        identity: IdentityProvider,
        *,
        history: HistoryStore | None = None,
        result_cache: ResultCache | None = None,
        history_settings: HistorySettings | None = None,
        cache_settings: ResultCacheSettings | None = None,
        session: SearchSession | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._provider = provider
        self._identity = identity
        self._history = history
        self._result_cache = result_cache
        self._history_settings = history_settings or HistorySettings()
        self._cache_settings = cache_settings or ResultCacheSettings()
        self._clock = clock
        self.session = session or SearchSession(recent_limit=self._history_settings.recent_limit)
        self._unsubscribe_identity: Unsubscribe | None = None
        self._history_owner: str | None = None

    async def __aenter__(self) -> "SearchOrchestrator":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

    async def open(self) -> None:
        if self._unsubscribe_identity is None:
            self._unsubscribe_identity = self._identity.subscribe(self.handle_identity_change)
        user = self._identity.current_user()
        if user is not None:
            await self.load_history(user)

    def close(self) -> None:
        if self._unsubscribe_identity is not None:
            self._unsubscribe_identity()
            self._unsubscribe_identity = None
        self.session.close()

    async def perform_search(self, query: str) -> None:
        trimmed = (query or "").strip()
        if not trimmed:
            return

        if self.session.in_flight:
            logger.warning(
                "search_started_while_in_flight",
                query=trimmed,
                previous_query=self.session.current_query,
            )
        self.session.begin(trimmed)
        logger.info("search_started", query=trimmed)
        try:
            outcome = await self._run_pipeline(trimmed)
        finally:
            if self.session.in_flight:
                # Interrupted before commit: keep the previous results.
                self.session.abort()
                logger.warning("search_aborted", query=trimmed)

        logger.info(
            "search_completed",
            query=trimmed,
            result_count=len(outcome.products),
            degraded=outcome.degraded,
        )

    async def _run_pipeline(self, trimmed: str) -> ProviderOutcome:
        user = self._identity.current_user()
        if user is not None and self._history is not None:
            recorded = await self._best_effort(
                "history_append",
                lambda: self._history.append(
                    user.id, trimmed, self._history_settings.country_code
                ),
                query=trimmed,
                owner_id=user.id,
            )
            if recorded.ok:
                self.session.remember_query(trimmed)

        outcome = await self._fetch_products(trimmed)

        if outcome.products and self._result_cache is not None and self._cache_settings.enabled:
            # Outcome ignored: cache writes never change what the user sees.
            await self._best_effort(
                "result_cache_store",
                lambda: self._result_cache.store_batch(
                    outcome.products, self._cache_settings.region
                ),
                query=trimmed,
                count=len(outcome.products),
            )

        self.session.commit(outcome.products, degraded=outcome.degraded)
        return outcome

    def clear_search(self) -> None:
        self.session.clear()

    async def handle_identity_change(self, user: Identity | None) -> None:
        if user is None:
            self._history_owner = None
            self.session.clear_recent()
            return
        await self.load_history(user)

    async def load_history(self, user: Identity) -> None:
        if self._history_owner != user.id:
            self.session.clear_recent()
            self._history_owner = user.id
        if self._history is None:
            return
        limit = self._history_settings.recent_limit
        loaded = await self._best_effort(
            "history_load",
            lambda: self._history.list_recent(user.id, limit),
            owner_id=user.id,
        )
        if loaded.ok:
            self.session.replace_recent(loaded.value or [])

    async def _fetch_products(self, query: str) -> ProviderOutcome:
        try:
            payload = await self._provider.fetch(query)
            products = map_shopping_results(payload, created_at=self._clock())
        except ProviderError as exc:
            logger.warning(
                "provider_failed_using_fallback",
                query=query,
                error=str(exc),
                error_type=exc.__class__.__name__,
                status_code=exc.status_code,
            )
            return self._fallback(query, exc)
        except Exception as exc:
            logger.exception("provider_path_crashed_using_fallback", query=query)
            return self._fallback(query, exc)
        return ProviderOutcome(products=products, degraded=False)

    def _fallback(self, query: str, error: Exception) -> ProviderOutcome:
        products = build_fallback_products(query, created_at=self._clock())
        return ProviderOutcome(products=products, degraded=True, error=error)

    async def _best_effort(
        self,
        step: str,
        operation: Callable[[], Awaitable[T]],
        **context: Any,
    ) -> StepOutcome:
        try:
            value = await operation()
        except PersistenceError as exc:
            logger.warning(f"{step}_failed", store=exc.store, error=exc.message, **context)
            return StepOutcome(step=step, ok=False, error=exc)
        except Exception as exc:
            logger.exception(f"{step}_crashed", **context)
            return StepOutcome(step=step, ok=False, error=exc)
        return StepOutcome(step=step, ok=True, value=value)


__all__ = ["ProviderOutcome", "SearchOrchestrator", "StepOutcome"]
