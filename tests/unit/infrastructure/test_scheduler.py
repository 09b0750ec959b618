"""Tests for the process runner wiring and loop helpers."""

import asyncio

import pytest

from aiindex.domain.models.market_data import Quote
from aiindex.infrastructure.config import Settings, StocksConfig
from aiindex.infrastructure.scheduler import (
    Application,
    bootstrap,
    build_application,
    quote_cycle,
    run,
    run_periodically,
)


@pytest.fixture
def stocks() -> StocksConfig:
    return StocksConfig.model_validate(
        {
            "settings": {"base_value": 1000.0, "market_cap_weight_pct": 50},
            "sectors": {"ai": {"label": "AI", "symbols": ["NVDA", "AMD"]}},
            "benchmarks": {"symbols": ["SPY"]},
        }
    )


@pytest.fixture
def app(store, provider, stocks) -> Application:
    settings = Settings(_env_file=None, min_recompute_interval_seconds=0)
    return build_application(settings, stocks, store.scope, provider)


def test_build_application_uses_configured_basket(app):
    assert app.basket.index_symbols == ["NVDA", "AMD"]
    assert app.index.config_info().market_cap_weight_pct == 50


async def test_quote_cycle_stores_quotes_and_records_index(app, store, provider):
    provider.quotes = {s: Quote(price=10.0) for s in ("NVDA", "AMD", "SPY")}
    snapshot = await quote_cycle(app)
    assert snapshot.value == pytest.approx(1000.0)
    assert len(store.snapshots) == 1


async def test_bootstrap_fetches_profiles_before_backfill(app, provider, make_closes):
    from datetime import date

    provider.closes["NVDA"] = make_closes(date(2025, 1, 6), [100.0, 101.0])
    report = await bootstrap(app)
    kinds = [kind for kind, _ in provider.calls]
    assert kinds.index("candles") > max(i for i, k in enumerate(kinds) if k == "profile")
    assert report.candles == {"NVDA": 2}


async def test_run_periodically_survives_a_failed_cycle():
    calls = []

    async def job():
        calls.append(len(calls))
        if len(calls) == 1:
            raise RuntimeError("provider exploded")
        raise asyncio.CancelledError

    with pytest.raises(asyncio.CancelledError):
        await run_periodically("test", 0, job)
    assert calls == [0, 1]


async def test_run_without_api_key_returns(tmp_path, caplog):
    path = tmp_path / "stocks.toml"
    path.write_text(
        '[settings]\nbase_value = 1000.0\nmarket_cap_weight_pct = 50\n\n'
        '[sectors.ai]\nlabel = "AI"\nsymbols = ["NVDA"]\n\n[benchmarks]\nsymbols = []\n'
    )
    settings = Settings(_env_file=None, finnhub_api_key="", AIINDEX_STOCKS_PATH=str(path))
    await run(settings)
    assert "FINNHUB_API_KEY not set" in caplog.text
