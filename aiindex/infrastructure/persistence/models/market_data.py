"""Market data ORM models: prices, base_prices, stock_profiles."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Double, Index, Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from aiindex.infrastructure.database import Base


class PriceObservation(Base):
    """One polled quote or backfilled daily close.

    Append-only; market_cap is the figure known when the row was written.
    """

    __tablename__ = "prices"
    __table_args__ = (Index("ix_prices_symbol_observed_at", "symbol", "observed_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    symbol: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[float] = mapped_column(Double, nullable=False)
    change: Mapped[Optional[float]] = mapped_column(Double, nullable=True)
    change_pct: Mapped[Optional[float]] = mapped_column(Double, nullable=True)
    market_cap: Mapped[Optional[float]] = mapped_column(Double, nullable=True)
    observed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class BasePrice(Base):
    """Write-once inception price, one row per symbol."""

    __tablename__ = "base_prices"

    symbol: Mapped[str] = mapped_column(Text, primary_key=True)
    price: Mapped[float] = mapped_column(Double, nullable=False)
    recorded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class CompanyProfile(Base):
    __tablename__ = "stock_profiles"

    symbol: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    exchange: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    industry: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    weburl: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    logo: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    country: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    market_cap: Mapped[Optional[float]] = mapped_column(Double, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
