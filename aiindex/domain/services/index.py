"""Index service: the live computation path and display read models.

compute_live() is the single recompute entry point for both the scheduled
tick and on-demand reads.  Unless forced, it returns the latest stored
snapshot when that snapshot is younger than the minimum recompute interval,
so a read arriving next to a tick does not append a near-duplicate point.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from aiindex.domain.errors import EmptyBasketError, StoreUnavailableError
from aiindex.domain.models.basket import Basket
from aiindex.domain.models.index import IndexSettings, IndexSnapshot
from aiindex.domain.models.market_data import LatestPrice
from aiindex.domain.models.views import ConfigInfo, SectorSummary, StockDetail
from aiindex.domain.repositories import StoreScope, Stores

from .quotes import gather_quotes
from .snapshots import SnapshotRecorder
from .valuation import value
from .weights import blend

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IndexService:
    """Computes, records and reports the blended index."""

    def __init__(
        self,
        scope: StoreScope,
        basket: Basket,
        settings: IndexSettings,
        recorder: SnapshotRecorder,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._scope = scope
        self._basket = basket
        self._settings = settings
        self._recorder = recorder
        self._clock = clock

    # ------------------------------------------------------------------ #
    # Live index                                                          #
    # ------------------------------------------------------------------ #

    async def compute_live(self, force: bool = False) -> IndexSnapshot | None:
        """Recompute the index from the latest prices and record it.

        Returns None ("no data yet") when the basket is empty, no symbol has
        both a positive current and base price, or the store could not be
        read.  When the snapshot cannot be persisted the computed snapshot is
        still returned.
        """
        symbols = self._basket.index_symbols
        if not symbols:
            logger.warning("No index symbols configured; index not computed")
            return None

        now = self._clock()
        try:
            async with self._scope() as stores:
                if not force:
                    latest = await stores.snapshots.latest_snapshot()
                    if latest is not None and self._is_fresh(latest, now):
                        return latest
                quotes = await gather_quotes(stores.prices, symbols)
        except StoreUnavailableError as exc:
            logger.error("Index computation aborted: %s", exc)
            return None

        index_value = value(quotes, self._settings.mcap_fraction, self._settings.base_value)
        if index_value is None:
            logger.info("No eligible quotes yet; index not computed")
            return None

        outcome = await self._recorder.record_latest(index_value, now)
        return outcome.snapshot

    def _is_fresh(self, snapshot: IndexSnapshot, now: datetime) -> bool:
        age = now - snapshot.timestamp
        return timedelta(0) <= age < self._settings.min_recompute_interval

    async def list_history(self, limit: int = 100) -> list[IndexSnapshot]:
        """Return up to limit snapshots, most recent first."""
        if limit <= 0:
            return []
        async with self._scope() as stores:
            return await stores.snapshots.list_recent(limit)

    # ------------------------------------------------------------------ #
    # Display reads                                                       #
    # ------------------------------------------------------------------ #

    async def current_weights(self) -> dict[str, float]:
        """Blended weights over every index symbol, using latest known caps.

        Empty when no index symbols are configured.
        """
        async with self._scope() as stores:
            return await self._weights(stores)

    async def _weights(self, stores: Stores) -> dict[str, float]:
        caps = {
            symbol: await stores.prices.latest_known_market_cap(symbol)
            for symbol in self._basket.index_symbols
        }
        try:
            return blend(caps, self._settings.mcap_fraction)
        except EmptyBasketError:
            return {}

    async def stock_details(self) -> list[StockDetail]:
        """Latest details for every configured symbol with at least one price."""
        details: list[StockDetail] = []
        async with self._scope() as stores:
            weights = await self._weights(stores)
            for symbol in self._basket.all_symbols:
                detail = await self._stock_detail(stores, symbol, weights)
                if detail is not None:
                    details.append(detail)
        return details

    async def stock_detail(self, symbol: str) -> StockDetail | None:
        """Latest details for one symbol, or None when it has no price yet."""
        async with self._scope() as stores:
            weights = await self._weights(stores)
            return await self._stock_detail(stores, symbol.strip().upper(), weights)

    async def _stock_detail(
        self,
        stores: Stores,
        symbol: str,
        weights: dict[str, float],
    ) -> StockDetail | None:
        latest = await stores.prices.latest_price(symbol)
        if latest is None:
            return None
        profile = await stores.profiles.get_profile(symbol)
        sector = self._basket.sector_of(symbol)
        return StockDetail(
            symbol=symbol,
            sector=sector.key,
            sector_label=sector.label,
            price=latest.price,
            change=latest.change,
            change_pct=latest.change_pct,
            market_cap=latest.market_cap,
            weight=weights.get(symbol),
            timestamp=latest.timestamp,
            name=profile.name if profile else None,
            exchange=profile.exchange if profile else None,
            industry=profile.industry if profile else None,
            weburl=profile.weburl if profile else None,
            logo=profile.logo if profile else None,
            country=profile.country if profile else None,
        )

    async def sector_summaries(self) -> list[SectorSummary]:
        """Total weight and mean latest change_pct per sector.

        avg_change_pct is 0.0 for a sector with no reported changes.
        """
        summaries: list[SectorSummary] = []
        async with self._scope() as stores:
            weights = await self._weights(stores)
            for sector in self._basket.sectors:
                changes: list[float] = []
                for symbol in sector.symbols:
                    latest: LatestPrice | None = await stores.prices.latest_price(symbol)
                    if latest is not None and latest.change_pct is not None:
                        changes.append(latest.change_pct)
                summaries.append(
                    SectorSummary(
                        key=sector.key,
                        label=sector.label,
                        symbols=list(sector.symbols),
                        total_weight=sum(weights.get(s, 0.0) for s in sector.symbols),
                        avg_change_pct=sum(changes) / len(changes) if changes else 0.0,
                    )
                )
        return summaries

    def config_info(self) -> ConfigInfo:
        return ConfigInfo(
            base_value=self._settings.base_value,
            market_cap_weight_pct=round(self._settings.mcap_fraction * 100),
            index_stock_count=len(self._basket.index_symbols),
            benchmark_symbols=list(self._basket.benchmark_symbols),
        )
