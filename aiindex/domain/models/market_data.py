"""Market data domain models.

PriceObservation — one polled quote or backfilled daily close for a symbol.
BasePrice        — a symbol's write-once inception price.
LatestPrice      — the most recent observation with its market cap resolved.
HistoricalPrice  — the price carried forward to a given day.
Quote / DailyClose / CompanyProfile — provider payloads.

All are immutable value objects.  A market_cap of None means "unknown",
never zero.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _normalize_symbol(value: str) -> str:
    return value.strip().upper()


class PriceObservation(BaseModel):
    """A single price observation for one symbol.

    change / change_pct are relative to the previous close; None when the
    provider did not report them or on a symbol's first backfilled day.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str = Field(min_length=1)
    price: float = Field(gt=0.0)
    change: float | None = None
    change_pct: float | None = None
    market_cap: float | None = Field(default=None, ge=0.0)
    observed_at: datetime

    @field_validator("symbol")
    @classmethod
    def _upper_symbol(cls, value: str) -> str:
        return _normalize_symbol(value)


class BasePrice(BaseModel):
    """The first price ever stored for a symbol; denominator of its return."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    price: float = Field(gt=0.0)
    recorded_at: datetime


class LatestPrice(BaseModel):
    """Latest observation for a symbol.

    market_cap is resolved at read time: the profile's market cap when known,
    otherwise the figure carried on the observation itself.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    price: float
    change: float | None = None
    change_pct: float | None = None
    market_cap: float | None = None
    timestamp: datetime


class HistoricalPrice(BaseModel):
    """The most recent price at or before some day, with its carried market cap."""

    model_config = ConfigDict(frozen=True)

    price: float
    market_cap: float | None = None
    observed_at: datetime


class Quote(BaseModel):
    """Current quote as reported by the market-data provider."""

    model_config = ConfigDict(frozen=True)

    price: float
    change: float | None = None
    change_pct: float | None = None


class DailyClose(BaseModel):
    """One daily close from a historical candle series."""

    model_config = ConfigDict(frozen=True)

    close: float
    timestamp: datetime


class CompanyProfile(BaseModel):
    """Company metadata; market_cap is refreshed on the profile interval."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    name: str | None = None
    exchange: str | None = None
    industry: str | None = None
    weburl: str | None = None
    logo: str | None = None
    country: str | None = None
    market_cap: float | None = Field(default=None, ge=0.0)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("symbol")
    @classmethod
    def _upper_symbol(cls, value: str) -> str:
        return _normalize_symbol(value)
