"""Pydantic models shared across service layers."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

PLACEHOLDER_IMAGE_URL = "https://images.pexels.com/photos/1464625/pexels-photo-1464625.jpeg"
UNKNOWN_PRODUCT_NAME = "Unknown Product"
PRICE_NOT_AVAILABLE = "Price not available"
MISSING_BUY_LINK = "#"
DEFAULT_SOURCE = "Google Shopping"


class Identity(BaseModel):
    """Authenticated user as reported by the identity provider."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str | None = None
    name: str | None = None


class HistoryRecord(BaseModel):
    owner_id: str
    query_text: str
    country_code: str | None = None
    timestamp: datetime


class Product(BaseModel):
    """Normalized offer shown to the user. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    price: str
    image_url: str
    buy_link: str
    source: str
    rating: float | None = None
    review_count: int | None = None
    delivery_info: str | None = None
    merchant: str | None = None
    external_product_id: str | None = None
    created_at: datetime


def _text_or_none(value: Any) -> str | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return str(value) if value else None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return None


def _float_or_none(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
    elif not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return number or None


def _int_or_none(value: Any) -> int | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        try:
            value = int(value.strip().replace(",", ""))
        except ValueError:
            return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int):
        return value or None
    return None


class ShoppingResultEntry(BaseModel):
    """Decoded form of one ``shopping_results`` entry.

    Every field is optional. Empty, zero and wrongly typed values decode to ``None`` so the
    mapper can apply its substitutions in one place.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    title: str | None = None
    price: str | None = None
    thumbnail: str | None = None
    link: str | None = None
    source: str | None = None
    rating: float | None = None
    reviews: int | None = None
    delivery: str | None = None
    merchant: str | None = None
    product_id: str | None = None

    @field_validator(
        "title",
        "price",
        "thumbnail",
        "link",
        "source",
        "delivery",
        "merchant",
        "product_id",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        return _text_or_none(value)

    @field_validator("rating", mode="before")
    @classmethod
    def _coerce_rating(cls, value: Any) -> float | None:
        return _float_or_none(value)

    @field_validator("reviews", mode="before")
    @classmethod
    def _coerce_reviews(cls, value: Any) -> int | None:
        return _int_or_none(value)


__all__ = [
    "DEFAULT_SOURCE",
    "HistoryRecord",
    "Identity",
    "MISSING_BUY_LINK",
    "PLACEHOLDER_IMAGE_URL",
    "PRICE_NOT_AVAILABLE",
    "Product",
    "ShoppingResultEntry",
    "UNKNOWN_PRODUCT_NAME",
]
