"""Tests for the in-process identity provider."""

from __future__ import annotations

import pytest

from shopfinder.domain.models import Identity
from shopfinder.services.identity import LocalIdentityProvider


@pytest.mark.asyncio
async def test_sign_in_and_out_notify_listeners():
    provider = LocalIdentityProvider()
    events: list[Identity | None] = []

    async def listener(user):
        events.append(user)

    provider.subscribe(listener)
    user = Identity(id="u-1", email="a@example.com")

    await provider.sign_in(user)
    assert provider.current_user() == user
    await provider.sign_out()
    assert provider.current_user() is None

    assert events == [user, None]


@pytest.mark.asyncio
async def test_repeated_transitions_are_ignored():
    provider = LocalIdentityProvider()
    events: list[Identity | None] = []

    async def listener(user):
        events.append(user)

    provider.subscribe(listener)
    user = Identity(id="u-1")

    await provider.sign_out()
    await provider.sign_in(user)
    await provider.sign_in(user)

    assert events == [user]


@pytest.mark.asyncio
async def test_unsubscribed_listener_is_not_called():
    provider = LocalIdentityProvider()
    events: list[Identity | None] = []

    async def listener(user):
        events.append(user)

    unsubscribe = provider.subscribe(listener)
    unsubscribe()
    await provider.sign_in(Identity(id="u-1"))

    assert events == []
