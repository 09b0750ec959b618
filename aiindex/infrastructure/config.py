"""Process settings and basket configuration.

Settings is read from environment variables (or a .env file).  The basket
itself lives in a TOML file:

    [settings]
    base_value = 1000.0
    market_cap_weight_pct = 50

    [sectors.semis]
    label = "Semiconductors"
    symbols = ["NVDA", "AMD"]

    [benchmarks]
    symbols = ["SPY"]

Sectors keep the order in which they appear in the file.
"""

from __future__ import annotations

import tomllib
from datetime import timedelta
from pathlib import Path

from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from aiindex.domain.models.basket import Basket, Sector
from aiindex.domain.models.index import BackfillSettings, IndexSettings


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite+aiosqlite:///./aiindex.db"
    finnhub_api_key: str = ""
    stocks_path: Path = Field(
        default=Path("stocks.toml"),
        validation_alias=AliasChoices("AIINDEX_STOCKS_PATH", "stocks_path"),
    )
    quote_interval_seconds: float = Field(default=900.0, gt=0.0)
    profile_interval_seconds: float = Field(default=86400.0, gt=0.0)
    call_spacing_seconds: float = Field(default=0.05, ge=0.0)
    backfill_row_threshold: int = Field(default=100, ge=0)
    backfill_lookback_days: int = Field(default=365, gt=0)
    min_recompute_interval_seconds: float = Field(default=60.0, ge=0.0)
    log_level: str = "INFO"

    def backfill_settings(self) -> BackfillSettings:
        return BackfillSettings(
            row_threshold=self.backfill_row_threshold,
            lookback_days=self.backfill_lookback_days,
        )


class IndexSection(BaseModel):
    base_value: float = Field(gt=0.0)
    market_cap_weight_pct: int = Field(ge=0, le=100)


class SectorSection(BaseModel):
    label: str
    symbols: list[str] = Field(default_factory=list)


class BenchmarkSection(BaseModel):
    symbols: list[str] = Field(default_factory=list)


class StocksConfig(BaseModel):
    """Parsed contents of stocks.toml."""

    settings: IndexSection
    sectors: dict[str, SectorSection] = Field(default_factory=dict)
    benchmarks: BenchmarkSection = Field(default_factory=BenchmarkSection)

    @property
    def mcap_fraction(self) -> float:
        return self.settings.market_cap_weight_pct / 100.0

    def to_basket(self) -> Basket:
        """Build the immutable Basket; raises ValueError on a duplicated symbol."""
        return Basket(
            sectors=tuple(
                Sector(key=key, label=section.label, symbols=tuple(section.symbols))
                for key, section in self.sectors.items()
            ),
            benchmark_symbols=tuple(self.benchmarks.symbols),
        )

    def index_settings(
        self, min_recompute_interval: timedelta = timedelta(seconds=60)
    ) -> IndexSettings:
        return IndexSettings(
            base_value=self.settings.base_value,
            mcap_fraction=self.mcap_fraction,
            min_recompute_interval=min_recompute_interval,
        )


def load_stocks_config(path: Path) -> StocksConfig:
    """Read and validate a stocks TOML file."""
    with path.open("rb") as fh:
        data = tomllib.load(fh)
    return StocksConfig.model_validate(data)
