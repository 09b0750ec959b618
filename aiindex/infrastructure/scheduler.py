"""Process runner: wires the services together and drives the background loops.

    quote loop    bootstrap (profiles → backfill), then every
                  quote_interval_seconds: refresh quotes → compute_live(force)
    profile loop  every profile_interval_seconds: refresh profiles

Both loops log and survive a failed cycle.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta

from aiindex.domain.models.basket import Basket
from aiindex.domain.models.index import IndexSnapshot
from aiindex.domain.models.reports import BackfillReport
from aiindex.domain.providers import MarketDataProvider
from aiindex.domain.repositories import StoreScope
from aiindex.domain.services import (
    HistoricalReconstructor,
    IndexService,
    QuoteIngestionService,
    SnapshotRecorder,
)
from aiindex.infrastructure import database
from aiindex.infrastructure.config import Settings, StocksConfig, load_stocks_config
from aiindex.infrastructure.persistence import session_scope
from aiindex.infrastructure.providers import FinnhubProvider, FinnhubRateLimiter

logger = logging.getLogger(__name__)


@dataclass
class Application:
    """Every long-lived service of one process, sharing one snapshot writer."""

    settings: Settings
    basket: Basket
    index: IndexService
    ingestion: QuoteIngestionService
    reconstructor: HistoricalReconstructor


def build_application(
    settings: Settings,
    stocks: StocksConfig,
    scope: StoreScope,
    provider: MarketDataProvider,
) -> Application:
    basket = stocks.to_basket()
    index_settings = stocks.index_settings(
        timedelta(seconds=settings.min_recompute_interval_seconds)
    )
    recorder = SnapshotRecorder(scope)
    return Application(
        settings=settings,
        basket=basket,
        index=IndexService(scope, basket, index_settings, recorder),
        ingestion=QuoteIngestionService(scope, provider, basket),
        reconstructor=HistoricalReconstructor(
            scope,
            provider,
            basket,
            index_settings,
            recorder,
            settings.backfill_settings(),
        ),
    )


async def bootstrap(app: Application) -> BackfillReport:
    """Profiles first, so backfilled observations carry a market cap."""
    await app.ingestion.refresh_profiles()
    return await app.reconstructor.run_backfill()


async def quote_cycle(app: Application) -> IndexSnapshot | None:
    await app.ingestion.refresh_quotes()
    return await app.index.compute_live(force=True)


async def run_periodically(
    name: str,
    interval_seconds: float,
    job: Callable[[], Awaitable[object]],
) -> None:
    while True:
        try:
            await job()
        except Exception:
            logger.exception("%s cycle failed", name)
        await asyncio.sleep(interval_seconds)


async def quote_loop(app: Application) -> None:
    try:
        await bootstrap(app)
    except Exception:
        logger.exception("Bootstrap failed; continuing with live quotes")
    await run_periodically(
        "quote", app.settings.quote_interval_seconds, lambda: quote_cycle(app)
    )


async def profile_loop(app: Application) -> None:
    await asyncio.sleep(app.settings.profile_interval_seconds)
    await run_periodically(
        "profile", app.settings.profile_interval_seconds, app.ingestion.refresh_profiles
    )


async def run(settings: Settings | None = None) -> None:
    settings = settings or database.settings
    stocks = load_stocks_config(settings.stocks_path)
    basket = stocks.to_basket()
    logger.info(
        "Loaded %d index symbols, %d total",
        len(basket.index_symbols),
        len(basket.all_symbols),
    )

    if not settings.finnhub_api_key:
        logger.warning("FINNHUB_API_KEY not set; background fetcher disabled")
        return

    await database.init_models(database.engine)
    scope = session_scope(database.AsyncSessionLocal)
    limiter = FinnhubRateLimiter(min_interval=settings.call_spacing_seconds)
    try:
        async with FinnhubProvider(settings.finnhub_api_key, rate_limiter=limiter) as provider:
            app = build_application(settings, stocks, scope, provider)
            await asyncio.gather(quote_loop(app), profile_loop(app))
    finally:
        await database.engine.dispose()


def main() -> None:
    logging.basicConfig(
        level=database.settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(run())


if __name__ == "__main__":
    main()
