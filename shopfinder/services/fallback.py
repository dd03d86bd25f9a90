"""Deterministic placeholder products used when the provider path fails."""

from __future__ import annotations

from datetime import datetime

from shopfinder.domain.models import MISSING_BUY_LINK, Product
from shopfinder.utils.datetime import utc_now

SIMULATED_SOURCE = "Google Shopping (Mock)"

# (name suffix, price, image, rating, review count)
FALLBACK_TEMPLATES: tuple[tuple[str, str, str, float, int], ...] = (
    (
        "Premium Quality",
        "£29.99",
        "https://images.pexels.com/photos/1464625/pexels-photo-1464625.jpeg",
        4.5,
        128,
    ),
    (
        "Best Seller",
        "£45.99",
        "https://images.pexels.com/photos/1598505/pexels-photo-1598505.jpeg",
        4.2,
        89,
    ),
    (
        "Top Rated",
        "£19.99",
        "https://images.pexels.com/photos/1598508/pexels-photo-1598508.jpeg",
        4.8,
        256,
    ),
)


def build_fallback_products(query: str, *, created_at: datetime | None = None) -> list[Product]:
    stamp = created_at or utc_now()
    return [
        Product(
            id=position,
            name=f"{query} - {suffix}",
            price=price,
            image_url=image_url,
            buy_link=MISSING_BUY_LINK,
            source=SIMULATED_SOURCE,
            rating=rating,
            review_count=reviews,
            created_at=stamp,
        )
        for position, (suffix, price, image_url, rating, reviews) in enumerate(
            FALLBACK_TEMPLATES, start=1
        )
    ]


def is_simulated(product: Product) -> bool:
    return product.source == SIMULATED_SOURCE


__all__ = ["FALLBACK_TEMPLATES", "SIMULATED_SOURCE", "build_fallback_products", "is_simulated"]
