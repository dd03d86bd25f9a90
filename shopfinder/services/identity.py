"""Identity collaborator contract and an in-process implementation."""

from __future__ import annotations

from typing import Awaitable, Callable, Protocol

from shopfinder.domain.models import Identity
from shopfinder.logging import logger

IdentityListener = Callable[[Identity | None], Awaitable[None]]
Unsubscribe = Callable[[], None]


class IdentityProvider(Protocol):
    def current_user(self) -> Identity | None:
        """Return the signed-in identity, if any."""

    def subscribe(self, listener: IdentityListener) -> Unsubscribe:
        """Register a listener awaited on every sign-in/sign-out transition."""


class LocalIdentityProvider:
    """Holds the active identity in memory and notifies listeners on change.

    Credential checks live with the real identity service; this object only tracks who is
    signed in for the current process.
    """

    def __init__(self, user: Identity | None = None) -> None:
        self._user = user
        self._listeners: list[IdentityListener] = []

    def current_user(self) -> Identity | None:
        return self._user

    def subscribe(self, listener: IdentityListener) -> Unsubscribe:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def sign_in(self, user: Identity) -> None:
        if self._user == user:
            return
        self._user = user
        logger.info("identity_signed_in", owner_id=user.id)
        await self._notify()

    async def sign_out(self) -> None:
        if self._user is None:
            return
        owner_id = self._user.id
        self._user = None
        logger.info("identity_signed_out", owner_id=owner_id)
        await self._notify()

    async def _notify(self) -> None:
        for listener in list(self._listeners):
            await listener(self._user)


__all__ = ["IdentityListener", "IdentityProvider", "LocalIdentityProvider", "Unsubscribe"]
