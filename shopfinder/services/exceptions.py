"""Domain-specific exceptions."""

from __future__ import annotations


class SearchServiceError(Exception):
    pass


class ProviderError(SearchServiceError):
    """The shopping-search provider could not produce a payload."""

    def __init__(self, reason: str, *, status_code: int | None = None) -> None:
        message = f"{reason} ({status_code})" if status_code is not None else reason
        super().__init__(message)
        self.reason = reason
        self.status_code = status_code


class ConfigurationError(ProviderError):
    """Raised before any network I/O when a required credential is missing."""


class PersistenceError(SearchServiceError):
    def __init__(self, store: str, message: str) -> None:
        super().__init__(f"{store}: {message}")
        self.store = store
        self.message = message


__all__ = [
    "ConfigurationError",
    "PersistenceError",
    "ProviderError",
    "SearchServiceError",
]
