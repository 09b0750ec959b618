"""Unit tests for QuoteIngestionService."""

from datetime import datetime, timedelta, timezone

import pytest

from aiindex.domain.models.basket import Basket, Sector
from aiindex.domain.models.market_data import CompanyProfile, Quote
from aiindex.domain.services.ingestion import QuoteIngestionService

NOW = datetime(2025, 3, 3, 15, 0, tzinfo=timezone.utc)


@pytest.fixture
def basket() -> Basket:
    return Basket(
        sectors=(Sector(key="ai", label="AI", symbols=("NVDA", "AMD")),),
        benchmark_symbols=("SPY",),
    )


@pytest.fixture
def service(store, provider, basket) -> QuoteIngestionService:
    return QuoteIngestionService(store.scope, provider, basket, clock=lambda: NOW)


# --- refresh_quotes ---

async def test_quotes_stored_for_every_symbol(service, store, provider):
    provider.quotes = {
        "NVDA": Quote(price=120.0, change=2.0, change_pct=1.7),
        "AMD": Quote(price=150.0),
        "SPY": Quote(price=560.0),
    }
    report = await service.refresh_quotes()
    assert report.succeeded == ["NVDA", "AMD", "SPY"]
    assert {o.symbol for o in store.observations} == {"NVDA", "AMD", "SPY"}
    assert all(o.observed_at == NOW for o in store.observations)


async def test_first_quote_sets_base_price_once(service, store, provider):
    provider.quotes = {"NVDA": Quote(price=120.0)}
    await service.refresh_quotes()
    provider.quotes = {"NVDA": Quote(price=130.0)}
    await service.refresh_quotes()
    assert store.base_prices["NVDA"].price == 120.0
    assert [o.price for o in store.observations] == [120.0, 130.0]


async def test_quote_keeps_provider_change_fields(service, store, provider):
    provider.quotes = {"NVDA": Quote(price=120.0, change=2.0, change_pct=1.7)}
    await service.refresh_quotes()
    observation = store.observations[0]
    assert observation.change == 2.0
    assert observation.change_pct == 1.7


async def test_quote_tagged_with_latest_known_cap(service, store, provider):
    store.profiles["NVDA"] = CompanyProfile(symbol="NVDA", market_cap=3_000_000.0)
    provider.quotes = {"NVDA": Quote(price=120.0)}
    await service.refresh_quotes()
    assert store.observations[0].market_cap == 3_000_000.0


async def test_zero_price_is_skipped(service, store, provider):
    provider.quotes = {"NVDA": Quote(price=0.0), "AMD": Quote(price=150.0), "SPY": Quote(price=1.0)}
    report = await service.refresh_quotes()
    assert "NVDA" in report.skipped
    assert "NVDA" not in store.base_prices
    assert [o.symbol for o in store.observations] == ["AMD", "SPY"]


async def test_provider_failure_isolated_to_symbol(service, store, provider):
    provider.quotes = {"NVDA": Quote(price=120.0), "SPY": Quote(price=560.0)}
    provider.failing.add("NVDA")
    report = await service.refresh_quotes()
    assert set(report.failures) == {"NVDA", "AMD"}
    assert report.succeeded == ["SPY"]


async def test_store_failure_recorded_per_symbol(service, store, provider):
    provider.quotes = {"NVDA": Quote(price=120.0)}
    store.fail = True
    report = await service.refresh_quotes()
    assert "NVDA" in report.failures
    assert report.success_count == 0


async def test_one_timestamp_per_cycle(store, provider, basket):
    ticks = iter([NOW, NOW + timedelta(minutes=15)])
    service = QuoteIngestionService(store.scope, provider, basket, clock=lambda: next(ticks))
    provider.quotes = {s: Quote(price=10.0) for s in ("NVDA", "AMD", "SPY")}
    await service.refresh_quotes()
    assert {o.observed_at for o in store.observations} == {NOW}


# --- refresh_profiles ---

async def test_profiles_upserted(service, store, provider):
    provider.profiles["NVDA"] = CompanyProfile(symbol="NVDA", name="NVIDIA", market_cap=1.0)
    await service.refresh_profiles()
    provider.profiles["NVDA"] = CompanyProfile(symbol="NVDA", name="NVIDIA", market_cap=2.0)
    report = await service.refresh_profiles()
    assert store.profiles["NVDA"].market_cap == 2.0
    assert report.success_count == 3


async def test_profile_failure_isolated(service, store, provider):
    provider.failing.add("AMD")
    report = await service.refresh_profiles()
    assert list(report.failures) == ["AMD"]
    assert set(store.profiles) == {"NVDA", "SPY"}


async def test_profile_store_failure(service, store):
    store.fail = True
    report = await service.refresh_profiles()
    assert report.failure_count == 3
