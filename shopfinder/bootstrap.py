"""Assemble a search orchestrator from settings."""

from __future__ import annotations

import httpx

from shopfinder.config import ShopFinderSettings, get_settings
from shopfinder.db.session import Database
from shopfinder.logging import logger
from shopfinder.services.history import SqlHistoryStore
from shopfinder.services.identity import IdentityProvider
from shopfinder.services.provider import ShoppingProviderClient
from shopfinder.services.result_cache import SqlResultCache
from shopfinder.services.search import SearchOrchestrator


def build_search_orchestrator(
    http_client: httpx.AsyncClient,
    identity: IdentityProvider,
    *,
    settings: ShopFinderSettings | None = None,
    database: Database | None = None,
) -> SearchOrchestrator:
    """Wire the provider client and SQL-backed stores into a new orchestrator.

    Without a ``database`` the orchestrator runs with no history and no result cache, which
    keeps searches working for anonymous, storage-less deployments.
    """

    settings = settings or get_settings()
    provider = ShoppingProviderClient(http_client, settings=settings.provider)
    history = SqlHistoryStore(database) if database is not None else None
    result_cache = (
        SqlResultCache(database)
        if database is not None and settings.result_cache.enabled
        else None
    )
    logger.info(
        "search_orchestrator_built",
        environment=settings.environment,
        history_enabled=history is not None,
        result_cache_enabled=result_cache is not None,
        provider_configured=settings.provider.api_key is not None,
    )
    return SearchOrchestrator(
        provider,
        identity,
        history=history,
        result_cache=result_cache,
        history_settings=settings.history,
        cache_settings=settings.result_cache,
    )


__all__ = ["build_search_orchestrator"]
