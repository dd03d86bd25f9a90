"""Pure mapping from raw shopping-search payloads to normalized products."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from shopfinder.domain.models import (
    DEFAULT_SOURCE,
    MISSING_BUY_LINK,
    PLACEHOLDER_IMAGE_URL,
    PRICE_NOT_AVAILABLE,
    UNKNOWN_PRODUCT_NAME,
    Product,
    ShoppingResultEntry,
)
from shopfinder.utils.datetime import utc_now

RESULTS_FIELD = "shopping_results"


def decode_entry(raw: Any) -> ShoppingResultEntry:
    """Decode one raw entry; anything that is not an object decodes as an empty entry."""

    if not isinstance(raw, dict):
        return ShoppingResultEntry()
    return ShoppingResultEntry.model_validate(raw)


def to_product(entry: ShoppingResultEntry, *, position: int, created_at: datetime) -> Product:
    return Product(
        id=position,
        name=entry.title or UNKNOWN_PRODUCT_NAME,
        price=entry.price or PRICE_NOT_AVAILABLE,
        image_url=entry.thumbnail or PLACEHOLDER_IMAGE_URL,
        buy_link=entry.link or MISSING_BUY_LINK,
        source=entry.source or DEFAULT_SOURCE,
        rating=entry.rating,
        review_count=entry.reviews,
        delivery_info=entry.delivery,
        merchant=entry.merchant,
        external_product_id=entry.product_id,
        created_at=created_at,
    )


def map_shopping_results(payload: Any, *, created_at: datetime | None = None) -> list[Product]:
    """Map a provider payload to products in provider order.

    A payload without a ``shopping_results`` list is a zero-result answer, not an error.
    Passing ``created_at`` makes the function fully deterministic; otherwise the current UTC
    time is stamped on every product of the batch.
    """

    if not isinstance(payload, dict):
        return []
    entries = payload.get(RESULTS_FIELD)
    if not isinstance(entries, list):
        return []

    stamp = created_at or utc_now()
    return [
        to_product(decode_entry(raw), position=index, created_at=stamp)
        for index, raw in enumerate(entries, start=1)
    ]


__all__ = ["RESULTS_FIELD", "decode_entry", "map_shopping_results", "to_product"]
