"""Live ingestion: polled quotes and periodic profile refreshes.

Quotes become append-only price observations tagged with the symbol's latest
known market cap; the first stored quote for a symbol also establishes its
base price.  Profiles are upserted and carry the freshest market cap, which
the price store joins onto the latest price at read time.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from aiindex.domain.errors import MarketDataError, StoreUnavailableError
from aiindex.domain.models.basket import Basket
from aiindex.domain.models.market_data import PriceObservation, Quote
from aiindex.domain.models.reports import RefreshReport
from aiindex.domain.providers import MarketDataProvider
from aiindex.domain.repositories import StoreScope

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class QuoteIngestionService:
    """Fetches quotes and profiles for every configured symbol."""

    def __init__(
        self,
        scope: StoreScope,
        provider: MarketDataProvider,
        basket: Basket,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._scope = scope
        self._provider = provider
        self._basket = basket
        self._clock = clock

    async def refresh_quotes(self) -> RefreshReport:
        """Fetch and store the current quote of every symbol (benchmarks included)."""
        symbols = self._basket.all_symbols
        now = self._clock()
        report = RefreshReport()
        logger.info("Fetching quotes for %d symbols", len(symbols))

        for symbol in symbols:
            report.add_attempt(symbol)
            try:
                quote = await self._provider.get_quote(symbol)
            except MarketDataError as exc:
                logger.error("%s: quote fetch failed: %s", symbol, exc.reason)
                report.add_failure(symbol, exc.reason)
            else:
                await self._store_quote(symbol, quote, now, report)

        logger.info(
            "Quote fetch cycle complete: %d stored, %d failed",
            report.success_count,
            report.failure_count,
        )
        return report

    async def _store_quote(
        self,
        symbol: str,
        quote: Quote,
        now: datetime,
        report: RefreshReport,
    ) -> None:
        if quote.price <= 0.0:
            logger.warning("%s: price is zero, skipping", symbol)
            report.add_skip(symbol, "non-positive price")
            return

        try:
            async with self._scope() as stores:
                market_cap = await stores.prices.latest_known_market_cap(symbol)
                await stores.prices.append_price_observation(
                    PriceObservation(
                        symbol=symbol,
                        price=quote.price,
                        change=quote.change,
                        change_pct=quote.change_pct,
                        market_cap=market_cap,
                        observed_at=now,
                    )
                )
                await stores.prices.set_base_price_if_absent(symbol, quote.price, now)
        except StoreUnavailableError as exc:
            logger.error("%s: failed to insert price: %s", symbol, exc)
            report.add_failure(symbol, str(exc))
            return
        report.add_success(symbol)

    async def refresh_profiles(self) -> RefreshReport:
        """Fetch and upsert the company profile of every symbol."""
        symbols = self._basket.all_symbols
        report = RefreshReport()
        logger.info("Fetching profiles for %d symbols", len(symbols))

        for symbol in symbols:
            report.add_attempt(symbol)
            try:
                profile = await self._provider.get_profile(symbol)
                async with self._scope() as stores:
                    await stores.profiles.upsert_profile(profile)
            except MarketDataError as exc:
                logger.error("%s: profile fetch failed: %s", symbol, exc.reason)
                report.add_failure(symbol, exc.reason)
            except StoreUnavailableError as exc:
                logger.error("%s: failed to store profile: %s", symbol, exc)
                report.add_failure(symbol, str(exc))
            else:
                report.add_success(symbol)

        logger.info("Profile fetch cycle complete: %d stored", report.success_count)
        return report
