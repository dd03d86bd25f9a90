"""Best-effort storage of normalized offers for later analytics."""

from __future__ import annotations

from typing import Protocol, Sequence

from sqlalchemy.exc import SQLAlchemyError

from shopfinder.db.models import CachedProduct
from shopfinder.db.session import Database
from shopfinder.domain.models import Product
from shopfinder.services.exceptions import PersistenceError


class ResultCache(Protocol):
    async def store_batch(self, products: Sequence[Product], region: str) -> int:
        """Insert the batch and return the stored row count. Raises ``PersistenceError``."""


class SqlResultCache:
    store_name = "products"

    def __init__(self, database: Database) -> None:
        self._database = database

    async def store_batch(self, products: Sequence[Product], region: str) -> int:
        if not products:
            return 0
        rows = [
            CachedProduct(
                product_name=product.name,
                price=product.price,
                image_url=product.image_url,
                buy_link=product.buy_link,
                source=product.source,
                region=region,
            )
            for product in products
        ]
        try:
            async with self._database.session() as session:
                session.add_all(rows)
                await session.flush()
                await session.commit()
        except SQLAlchemyError as exc:
            raise PersistenceError(self.store_name, str(exc)) from exc
        return len(rows)


__all__ = ["ResultCache", "SqlResultCache"]
