"""Client for the external shopping-search endpoint."""

from __future__ import annotations

from typing import Any

import httpx

from shopfinder.config import ProviderSettings
from shopfinder.logging import logger
from shopfinder.services.exceptions import ConfigurationError, ProviderError


class ShoppingProviderClient:
    """Single-attempt GET against the shopping-search API.

    Returns the decoded JSON body untouched. Timeouts and retries belong to the caller and the
    underlying ``httpx.AsyncClient``; this class never retries.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: ProviderSettings | None = None,
    ) -> None:
        self._client = http_client
        self._settings = settings or ProviderSettings()

    @staticmethod
    def _read_secret(secret: Any) -> str | None:
        if not secret:
            return None
        try:
            return secret.get_secret_value()
        except AttributeError:
            return str(secret)

    def build_params(self, query: str, api_key: str) -> dict[str, str]:
        settings = self._settings
        return {
            "engine": settings.engine,
            "q": query,
            "api_key": api_key,
            "location": settings.location,
            "hl": settings.language,
            "gl": settings.region,
            "num": str(settings.result_count),
        }

    async def fetch(self, query: str) -> Any:
        api_key = self._read_secret(self._settings.api_key)
        if not api_key:
            raise ConfigurationError("Shopping provider API key is not configured.")

        params = self.build_params(query, api_key)
        try:
            response = await self._client.get(
                str(self._settings.base_url),
                params=params,
                timeout=self._settings.request_timeout_seconds,
            )
        except httpx.TimeoutException as exc:
            raise ProviderError(f"Shopping provider timed out: {exc}") from exc
        except httpx.RequestError as exc:
            raise ProviderError(f"Shopping provider request failed: {exc}") from exc

        if not response.is_success:
            raise ProviderError(
                response.reason_phrase or "Shopping provider request failed",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderError(
                "Shopping provider returned a non-JSON body",
                status_code=response.status_code,
            ) from exc

        if isinstance(data, dict) and data.get("error"):
            raise ProviderError(
                f"Shopping provider error: {data['error']}",
                status_code=response.status_code,
            )

        entries = data.get("shopping_results") if isinstance(data, dict) else None
        logger.debug(
            "provider_payload_received",
            query=query,
            status_code=response.status_code,
            entries=len(entries) if isinstance(entries, list) else 0,
        )
        return data


__all__ = ["ShoppingProviderClient"]
