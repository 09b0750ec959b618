"""Shared fixtures: an in-memory store behind a StoreScope and a scripted provider.

The in-memory repositories follow the same contracts as the SQL ones
(write-once base prices, monotonic snapshot appends, read-time market-cap
join) so the services can be tested without a database.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from aiindex.domain.errors import MarketDataError, StoreUnavailableError
from aiindex.domain.models.index import IndexSnapshot
from aiindex.domain.models.market_data import (
    BasePrice,
    CompanyProfile,
    DailyClose,
    HistoricalPrice,
    LatestPrice,
    PriceObservation,
    Quote,
)
from aiindex.domain.providers import MarketDataProvider
from aiindex.domain.repositories import (
    PriceRepository,
    ProfileRepository,
    SnapshotRepository,
)


class InMemoryPrices(PriceRepository):
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def _rows(self, symbol: str) -> list[PriceObservation]:
        # Stable sort keeps insertion order for equal timestamps.
        return sorted(
            (o for o in self._store.observations if o.symbol == symbol),
            key=lambda o: o.observed_at,
        )

    async def latest_price(self, symbol: str) -> LatestPrice | None:
        rows = self._rows(symbol)
        if not rows:
            return None
        row = rows[-1]
        profile = self._store.profiles.get(symbol)
        profile_cap = profile.market_cap if profile is not None else None
        return LatestPrice(
            symbol=row.symbol,
            price=row.price,
            change=row.change,
            change_pct=row.change_pct,
            market_cap=profile_cap if profile_cap is not None else row.market_cap,
            timestamp=row.observed_at,
        )

    async def base_price(self, symbol: str) -> float | None:
        base = self._store.base_prices.get(symbol)
        return base.price if base is not None else None

    async def set_base_price_if_absent(self, symbol: str, price: float, at: datetime) -> bool:
        if symbol in self._store.base_prices:
            return False
        self._store.base_prices[symbol] = BasePrice(symbol=symbol, price=price, recorded_at=at)
        return True

    async def append_price_observation(self, observation: PriceObservation) -> None:
        self._store.observations.append(observation)

    async def price_as_of_or_before(self, symbol: str, day: date) -> HistoricalPrice | None:
        rows = [o for o in self._rows(symbol) if o.observed_at.date() <= day]
        if not rows:
            return None
        row = rows[-1]
        return HistoricalPrice(price=row.price, market_cap=row.market_cap, observed_at=row.observed_at)

    async def latest_known_market_cap(self, symbol: str) -> float | None:
        profile = self._store.profiles.get(symbol)
        if profile is not None and profile.market_cap is not None:
            return profile.market_cap
        caps = [o.market_cap for o in self._rows(symbol) if o.market_cap is not None]
        return caps[-1] if caps else None

    async def observation_days(self) -> list[date]:
        return sorted({o.observed_at.date() for o in self._store.observations})

    async def count_price_rows(self) -> int:
        return len(self._store.observations)


class InMemorySnapshots(SnapshotRepository):
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def latest_snapshot(self) -> IndexSnapshot | None:
        return self._store.snapshots[-1] if self._store.snapshots else None

    async def snapshot_before(self, day: date) -> IndexSnapshot | None:
        before = [s for s in self._store.snapshots if s.timestamp.date() < day]
        return before[-1] if before else None

    async def append_snapshot(self, snapshot: IndexSnapshot) -> bool:
        if any(s.timestamp >= snapshot.timestamp for s in self._store.snapshots):
            return False
        self._store.snapshots.append(snapshot)
        return True

    async def list_recent(self, limit: int = 100) -> list[IndexSnapshot]:
        return list(reversed(self._store.snapshots))[:limit]

    async def backfill_completed_at(self) -> datetime | None:
        return self._store.backfill_completed_at

    async def mark_backfill_completed(self, at: datetime) -> None:
        self._store.backfill_completed_at = at


class InMemoryProfiles(ProfileRepository):
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def get_profile(self, symbol: str) -> CompanyProfile | None:
        return self._store.profiles.get(symbol)

    async def upsert_profile(self, profile: CompanyProfile) -> None:
        self._store.profiles[profile.symbol] = profile


class InMemoryStore:
    """Durable state of the fakes plus a StoreScope over it.

    Set ``fail`` to make every scope raise StoreUnavailableError on entry.
    """

    def __init__(self) -> None:
        self.observations: list[PriceObservation] = []
        self.base_prices: dict[str, BasePrice] = {}
        self.snapshots: list[IndexSnapshot] = []
        self.profiles: dict[str, CompanyProfile] = {}
        self.backfill_completed_at: datetime | None = None
        self.fail = False
        self.scopes_opened = 0

    @asynccontextmanager
    async def scope(self):
        self.scopes_opened += 1
        if self.fail:
            raise StoreUnavailableError("store offline")
        yield SimpleNamespace(
            prices=InMemoryPrices(self),
            snapshots=InMemorySnapshots(self),
            profiles=InMemoryProfiles(self),
        )

    def add_price(
        self,
        symbol: str,
        price: float,
        at: datetime,
        market_cap: float | None = None,
        change_pct: float | None = None,
    ) -> None:
        self.observations.append(
            PriceObservation(
                symbol=symbol,
                price=price,
                change_pct=change_pct,
                market_cap=market_cap,
                observed_at=at,
            )
        )

    def set_base(self, symbol: str, price: float, at: datetime | None = None) -> None:
        self.base_prices[symbol] = BasePrice(
            symbol=symbol,
            price=price,
            recorded_at=at or datetime(2024, 1, 2, tzinfo=timezone.utc),
        )


class ScriptedProvider(MarketDataProvider):
    """MarketDataProvider answering from dictionaries; listed symbols fail."""

    def __init__(self) -> None:
        self.quotes: dict[str, Quote] = {}
        self.profiles: dict[str, CompanyProfile] = {}
        self.closes: dict[str, list[DailyClose]] = {}
        self.failing: set[str] = set()
        self.calls: list[tuple[str, str]] = []

    def _check(self, kind: str, symbol: str) -> None:
        self.calls.append((kind, symbol))
        if symbol in self.failing:
            raise MarketDataError(symbol, "HTTP 500 from provider")

    async def get_quote(self, symbol: str) -> Quote:
        self._check("quote", symbol)
        if symbol not in self.quotes:
            raise MarketDataError(symbol, "no quote")
        return self.quotes[symbol]

    async def get_profile(self, symbol: str) -> CompanyProfile:
        self._check("profile", symbol)
        return self.profiles.get(symbol, CompanyProfile(symbol=symbol))

    async def get_daily_closes(
        self, symbol: str, start: datetime, end: datetime
    ) -> list[DailyClose]:
        self._check("candles", symbol)
        return list(self.closes.get(symbol, []))


def daily_closes(start: date, prices: list[float | None]) -> list[DailyClose]:
    """Closes at 21:00 UTC on consecutive days; a None entry leaves a gap."""
    return [
        DailyClose(
            close=price,
            timestamp=datetime.combine(start + timedelta(days=i), datetime.min.time(), timezone.utc)
            + timedelta(hours=21),
        )
        for i, price in enumerate(prices)
        if price is not None
    ]


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def provider() -> ScriptedProvider:
    return ScriptedProvider()


@pytest.fixture
def make_closes():
    return daily_closes
