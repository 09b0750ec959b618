"""Finnhub market-data provider over httpx.

Endpoints used:
    /quote              current price (c), change (d), change percent (dp)
    /stock/profile2     company metadata; marketCapitalization in millions USD
    /stock/candle       daily candles; s == "ok" when data is present

Every failure for a symbol (transport, HTTP status, malformed or empty
payload) is raised as MarketDataError so callers can skip that symbol.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from aiindex.domain.errors import MarketDataError
from aiindex.domain.models.market_data import CompanyProfile, DailyClose, Quote
from aiindex.domain.providers import MarketDataProvider

from .rate_limiter import FinnhubRateLimiter

logger = logging.getLogger(__name__)


class _QuotePayload(BaseModel):
    c: float
    d: float | None = None
    dp: float | None = None


class _ProfilePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    exchange: str | None = None
    industry: str | None = Field(default=None, alias="finnhubIndustry")
    weburl: str | None = None
    logo: str | None = None
    country: str | None = None
    market_cap: float | None = Field(default=None, alias="marketCapitalization")


class _CandlePayload(BaseModel):
    s: str
    c: list[float] | None = None
    t: list[int] | None = None


class FinnhubProvider(MarketDataProvider):
    """MarketDataProvider backed by the Finnhub REST API."""

    BASE_URL = "https://finnhub.io/api/v1"

    def __init__(
        self,
        api_key: str,
        client: httpx.AsyncClient | None = None,
        rate_limiter: FinnhubRateLimiter | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._api_key = api_key
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=self.BASE_URL, timeout=timeout)
        self._rate_limiter = rate_limiter or FinnhubRateLimiter()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> FinnhubProvider:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _get(self, symbol: str, path: str, params: dict[str, Any]) -> Any:
        await self._rate_limiter.wait_if_needed()
        try:
            response = await self._client.get(path, params={**params, "token": self._api_key})
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            raise MarketDataError(symbol, f"HTTP {exc.response.status_code} from {path}") from exc
        except httpx.HTTPError as exc:
            raise MarketDataError(symbol, f"request to {path} failed: {exc}") from exc
        except ValueError as exc:
            raise MarketDataError(symbol, f"invalid JSON from {path}") from exc

    async def get_quote(self, symbol: str) -> Quote:
        data = await self._get(symbol, "/quote", {"symbol": symbol})
        try:
            payload = _QuotePayload.model_validate(data)
        except ValidationError as exc:
            raise MarketDataError(symbol, "malformed quote payload") from exc
        return Quote(price=payload.c, change=payload.d, change_pct=payload.dp)

    async def get_profile(self, symbol: str) -> CompanyProfile:
        data = await self._get(symbol, "/stock/profile2", {"symbol": symbol})
        try:
            payload = _ProfilePayload.model_validate(data)
        except ValidationError as exc:
            raise MarketDataError(symbol, "malformed profile payload") from exc
        market_cap = payload.market_cap
        if market_cap is not None and market_cap < 0:
            logger.warning("%s: negative market cap %s ignored", symbol, market_cap)
            market_cap = None
        return CompanyProfile(
            symbol=symbol,
            name=payload.name,
            exchange=payload.exchange,
            industry=payload.industry,
            weburl=payload.weburl,
            logo=payload.logo,
            country=payload.country,
            market_cap=market_cap,
        )

    async def get_daily_closes(
        self, symbol: str, start: datetime, end: datetime
    ) -> list[DailyClose]:
        params = {
            "symbol": symbol,
            "resolution": "D",
            "from": int(start.timestamp()),
            "to": int(end.timestamp()),
        }
        data = await self._get(symbol, "/stock/candle", params)
        try:
            payload = _CandlePayload.model_validate(data)
        except ValidationError as exc:
            raise MarketDataError(symbol, "malformed candle payload") from exc

        if payload.s != "ok" or not payload.c or not payload.t:
            raise MarketDataError(symbol, f"no candle data (status={payload.s})")
        if len(payload.c) != len(payload.t):
            raise MarketDataError(symbol, "candle close and timestamp arrays differ in length")

        closes = [
            DailyClose(close=close, timestamp=datetime.fromtimestamp(ts, tz=timezone.utc))
            for close, ts in zip(payload.c, payload.t)
        ]
        return sorted(closes, key=lambda c: c.timestamp)
