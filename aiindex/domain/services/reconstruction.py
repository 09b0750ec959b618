"""Historical Reconstructor: one-time backfill and replay of the index series.

Pipeline:
    run_backfill
        → _skip_reason          (completion marker / row-count threshold)
        → _backfill_symbol      (daily closes → observations + base price)
        → reconstruct           (one valuation + snapshot per distinct day)
        → mark_backfill_completed

The replay feeds the same gather_quotes → value → SnapshotRecorder path as
the live computation; only the price lookup is "as of day d" instead of
"latest".  A symbol whose history cannot be fetched or stored is skipped and
simply shrinks the eligible set; a day whose reads fail is skipped without
aborting the remaining days.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import date, datetime, time, timedelta, timezone

import pandas as pd

from aiindex.domain.errors import MarketDataError, StoreUnavailableError
from aiindex.domain.models.basket import Basket
from aiindex.domain.models.index import BackfillSettings, IndexSettings, IndexSnapshot
from aiindex.domain.models.market_data import DailyClose, PriceObservation
from aiindex.domain.models.reports import BackfillReport
from aiindex.domain.providers import MarketDataProvider
from aiindex.domain.repositories import StoreScope

from .quotes import gather_quotes
from .snapshots import SnapshotRecorder
from .valuation import value

logger = logging.getLogger(__name__)

# Synthetic end-of-day time stamped on reconstructed snapshots.
END_OF_DAY = time(16, 0, tzinfo=timezone.utc)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, END_OF_DAY)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _optional(value: float) -> float | None:
    return None if pd.isna(value) else float(value)


def first_difference_observations(
    symbol: str,
    closes: Sequence[DailyClose],
    market_cap: float | None,
) -> list[PriceObservation]:
    """Turn a daily close series into observations with day-over-day change.

        change_t     = close_t − close_{t−1}
        change_pct_t = change_t / close_{t−1} · 100

    Both are None on the first day and whenever the prior close is not
    positive.  Non-positive closes themselves are dropped.  Every observation
    is tagged with the same carried market cap.
    """
    if not closes:
        return []

    frame = pd.DataFrame(
        {"close": [float(c.close) for c in closes]},
        index=pd.DatetimeIndex([c.timestamp for c in closes]),
    ).sort_index()
    frame = frame[~frame.index.duplicated(keep="last")]

    prev = frame["close"].shift(1)
    frame["change"] = (frame["close"] - prev).where(prev > 0)
    frame["change_pct"] = frame["change"] / prev * 100.0
    frame = frame[frame["close"] > 0]

    return [
        PriceObservation(
            symbol=symbol,
            price=float(row.close),
            change=_optional(row.change),
            change_pct=_optional(row.change_pct),
            market_cap=market_cap,
            observed_at=ts.to_pydatetime(),
        )
        for ts, row in zip(frame.index, frame.itertuples(index=False))
    ]


class HistoricalReconstructor:
    """Backfills daily closes and replays the index pipeline over them."""

    def __init__(
        self,
        scope: StoreScope,
        provider: MarketDataProvider,
        basket: Basket,
        index_settings: IndexSettings,
        recorder: SnapshotRecorder,
        settings: BackfillSettings | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._scope = scope
        self._provider = provider
        self._basket = basket
        self._index_settings = index_settings
        self._recorder = recorder
        self._settings = settings or BackfillSettings()
        self._clock = clock

    async def run_backfill(self) -> BackfillReport:
        """Backfill history and reconstruct snapshots unless already done."""
        reason = await self._skip_reason()
        if reason is not None:
            logger.info("Skipping backfill: %s", reason)
            return BackfillReport(skipped=True, skip_reason=reason)

        logger.info("Backfilling historical data...")
        report = BackfillReport()
        end = self._clock()
        start = end - timedelta(days=self._settings.lookback_days)

        for symbol in self._basket.all_symbols:
            await self._backfill_symbol(symbol, start, end, report)

        await self.reconstruct(report)

        if report.symbols_backfilled or report.snapshots_written:
            await self._mark_completed()
        else:
            logger.warning("Backfill stored no history; it will be retried on next start")

        logger.info(
            "Backfill complete: %d trading days, %d snapshots, %d symbol failures",
            report.days_processed,
            report.snapshots_written,
            len(report.failures),
        )
        return report

    async def _mark_completed(self) -> None:
        try:
            async with self._scope() as stores:
                await stores.snapshots.mark_backfill_completed(self._clock())
        except StoreUnavailableError as exc:
            logger.error("Failed to persist backfill completion marker: %s", exc)

    async def _skip_reason(self) -> str | None:
        try:
            async with self._scope() as stores:
                completed_at = await stores.snapshots.backfill_completed_at()
                count = await stores.prices.count_price_rows()
        except StoreUnavailableError as exc:
            logger.error("Cannot check backfill state: %s", exc)
            return f"store unavailable: {exc}"

        if completed_at is not None:
            return f"backfill already completed at {completed_at.isoformat()}"
        if count > self._settings.row_threshold:
            return f"database has {count} price rows"
        return None

    async def _backfill_symbol(
        self,
        symbol: str,
        start: datetime,
        end: datetime,
        report: BackfillReport,
    ) -> None:
        try:
            closes = await self._provider.get_daily_closes(symbol, start, end)
        except MarketDataError as exc:
            logger.error("%s: candle fetch failed: %s", symbol, exc.reason)
            report.add_failure(symbol, exc.reason)
            return

        if not closes:
            logger.warning("%s: no candle data", symbol)
            report.add_failure(symbol, "no candle data")
            return

        try:
            async with self._scope() as stores:
                market_cap = await stores.prices.latest_known_market_cap(symbol)
                observations = first_difference_observations(symbol, closes, market_cap)
                if observations:
                    first = observations[0]
                    await stores.prices.set_base_price_if_absent(
                        symbol, first.price, first.observed_at
                    )
                for observation in observations:
                    await stores.prices.append_price_observation(observation)
        except StoreUnavailableError as exc:
            logger.error("%s: failed to store backfilled candles: %s", symbol, exc)
            report.add_failure(symbol, str(exc))
            return

        report.add_candles(symbol, len(observations))
        logger.info("%s: backfilled %d daily candles", symbol, len(observations))

    async def reconstruct(self, report: BackfillReport | None = None) -> BackfillReport:
        """Replay valuation + recording once per stored day, oldest first.

        Each day runs in its own transaction, so an interrupted sweep leaves
        every already-written day intact and a re-run skips them.  The current
        UTC day is left to the live computation: its end-of-day stamp would
        lie ahead of the live snapshots.
        """
        report = report if report is not None else BackfillReport()
        symbols = self._basket.index_symbols
        if not symbols:
            logger.warning("No index symbols configured; nothing to reconstruct")
            return report

        try:
            async with self._scope() as stores:
                today = self._clock().astimezone(timezone.utc).date()
                days = [d for d in await stores.prices.observation_days() if d < today]
                previous: IndexSnapshot | None = (
                    await stores.snapshots.snapshot_before(days[0]) if days else None
                )
        except StoreUnavailableError as exc:
            logger.error("Cannot list historical days: %s", exc)
            return report

        logger.info("Computing historical index snapshots over %d days", len(days))
        for day in days:
            try:
                async with self._scope() as stores:
                    quotes = await gather_quotes(stores.prices, symbols, as_of=day)
            except StoreUnavailableError as exc:
                logger.error("%s: historical read failed: %s", day.isoformat(), exc)
                report.failed_days.append(day.isoformat())
                continue

            report.days_processed += 1
            index_value = value(
                quotes,
                self._index_settings.mcap_fraction,
                self._index_settings.base_value,
            )
            if index_value is None:
                continue

            outcome = await self._recorder.record(index_value, previous, end_of_day(day))
            previous = outcome.snapshot
            if outcome.persisted:
                report.snapshots_written += 1

        return report
