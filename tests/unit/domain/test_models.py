"""Tests for aiindex/domain/models: validation and derived properties."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from aiindex.domain.models import (
    BackfillReport,
    Basket,
    CompanyProfile,
    ConstituentQuote,
    IndexSettings,
    IndexSnapshot,
    PriceObservation,
    RefreshReport,
    Sector,
)
from aiindex.domain.models.basket import UNKNOWN_SECTOR_KEY

TS = datetime(2025, 1, 2, 15, 0, tzinfo=timezone.utc)


def _basket() -> Basket:
    return Basket(
        sectors=(
            Sector(key="semis", label="Semiconductors", symbols=("nvda", " amd ")),
            Sector(key="cloud", label="Cloud", symbols=("MSFT",)),
        ),
        benchmark_symbols=("spy",),
    )


# --- Basket ---

def test_basket_upper_cases_symbols():
    assert _basket().index_symbols == ["NVDA", "AMD", "MSFT"]


def test_basket_all_symbols_appends_benchmarks():
    assert _basket().all_symbols == ["NVDA", "AMD", "MSFT", "SPY"]


def test_basket_sector_lookup():
    ref = _basket().sector_of("amd")
    assert (ref.key, ref.label) == ("semis", "Semiconductors")


def test_basket_benchmark_lookup():
    basket = _basket()
    assert basket.is_benchmark("SPY")
    assert basket.sector_of("SPY").key == "benchmarks"
    assert not basket.is_benchmark("NVDA")


def test_basket_unknown_symbol():
    assert _basket().sector_of("ZZZ").key == UNKNOWN_SECTOR_KEY


def test_basket_rejects_symbol_in_two_sectors():
    with pytest.raises(ValidationError, match="NVDA"):
        Basket(
            sectors=(
                Sector(key="a", label="A", symbols=("NVDA",)),
                Sector(key="b", label="B", symbols=("nvda",)),
            )
        )


def test_basket_rejects_benchmark_also_in_sector():
    with pytest.raises(ValidationError):
        Basket(sectors=(Sector(key="a", label="A", symbols=("SPY",)),), benchmark_symbols=("SPY",))


def test_basket_is_frozen():
    with pytest.raises(ValidationError):
        _basket().benchmark_symbols = ("QQQ",)


def test_empty_basket():
    basket = Basket()
    assert basket.index_symbols == []
    assert basket.all_symbols == []


# --- PriceObservation / CompanyProfile ---

def test_price_observation_upper_cases_symbol():
    assert PriceObservation(symbol=" nvda", price=1.0, observed_at=TS).symbol == "NVDA"


@pytest.mark.parametrize("price", [0.0, -1.0])
def test_price_observation_requires_positive_price(price):
    with pytest.raises(ValidationError):
        PriceObservation(symbol="NVDA", price=price, observed_at=TS)


def test_price_observation_rejects_negative_market_cap():
    with pytest.raises(ValidationError):
        PriceObservation(symbol="NVDA", price=1.0, market_cap=-1.0, observed_at=TS)


def test_company_profile_defaults_updated_at_to_utc_now():
    profile = CompanyProfile(symbol="nvda")
    assert profile.symbol == "NVDA"
    assert profile.updated_at.tzinfo is not None


# --- Index models ---

def test_index_settings_defaults():
    settings = IndexSettings()
    assert settings.base_value == 1000.0
    assert settings.mcap_fraction == 0.5


@pytest.mark.parametrize("fraction", [-0.1, 1.1])
def test_index_settings_fraction_bounds(fraction):
    with pytest.raises(ValidationError):
        IndexSettings(mcap_fraction=fraction)


def test_index_settings_base_value_positive():
    with pytest.raises(ValidationError):
        IndexSettings(base_value=0.0)


def test_snapshot_changes_must_be_set_together():
    with pytest.raises(ValidationError, match="both"):
        IndexSnapshot(value=1.0, daily_change=1.0, timestamp=TS)


def test_snapshot_without_changes():
    snapshot = IndexSnapshot(value=1000.0, timestamp=TS)
    assert snapshot.daily_change is None and snapshot.daily_change_pct is None


def test_constituent_quote_eligibility():
    assert ConstituentQuote(current_price=1.0, base_price=2.0).is_eligible
    assert not ConstituentQuote(current_price=0.0, base_price=2.0).is_eligible
    assert ConstituentQuote(current_price=3.0, base_price=2.0).relative_price == 1.5


# --- Reports ---

def test_refresh_report_counts():
    report = RefreshReport()
    report.add_attempt("A")
    report.add_success("A")
    report.add_failure("B", "HTTP 500")
    assert (report.success_count, report.failure_count) == (1, 1)


def test_backfill_report_defaults():
    report = BackfillReport()
    assert not report.skipped
    assert report.symbols_backfilled == 0
