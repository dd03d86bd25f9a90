"""SQLAlchemy models for search history and cached provider offers."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from shopfinder.db.base import Base
from shopfinder.utils.datetime import utc_now


class SearchHistory(Base):
    __tablename__ = "search_history"
    __table_args__ = (Index("ix_search_history_user_date", "user_id", "search_date"),)

    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    search_query: Mapped[str] = mapped_column(String(512), nullable=False)
    country: Mapped[str | None] = mapped_column(String(8))
    search_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)


class CachedProduct(Base):
    __tablename__ = "products"

    product_name: Mapped[str] = mapped_column(String(512), nullable=False)
    price: Mapped[str | None] = mapped_column(String(64))
    image_url: Mapped[str | None] = mapped_column(Text)
    buy_link: Mapped[str | None] = mapped_column(Text)
    source: Mapped[str | None] = mapped_column(String(128))
    region: Mapped[str | None] = mapped_column(String(8))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)


__all__ = ["SearchHistory", "CachedProduct"]
