"""Read models for display: per-stock details, sector summaries, config info."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class StockDetail(BaseModel):
    """Latest price of one symbol with its sector, weight and profile fields.

    weight is None for benchmark symbols, which carry no index weight.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    sector: str
    sector_label: str
    price: float
    change: float | None = None
    change_pct: float | None = None
    market_cap: float | None = None
    weight: float | None = None
    timestamp: datetime
    name: str | None = None
    exchange: str | None = None
    industry: str | None = None
    weburl: str | None = None
    logo: str | None = None
    country: str | None = None


class SectorSummary(BaseModel):
    """Aggregate weight and average daily move of one sector."""

    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    symbols: list[str]
    total_weight: float
    avg_change_pct: float


class ConfigInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_value: float
    market_cap_weight_pct: int
    index_stock_count: int
    benchmark_symbols: list[str]
