"""Basket membership models.

A Basket is built once at startup from configuration and never mutated.
Every symbol belongs to exactly one sector or to the benchmark set;
benchmarks are tracked for display but never enter the index value.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator

BENCHMARK_SECTOR_KEY = "benchmarks"
BENCHMARK_SECTOR_LABEL = "Benchmarks"
UNKNOWN_SECTOR_KEY = "unknown"
UNKNOWN_SECTOR_LABEL = "Unknown"


class Sector(BaseModel):
    """A named group of index symbols."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(min_length=1)
    label: str
    symbols: tuple[str, ...] = ()

    @field_validator("symbols")
    @classmethod
    def _upper_symbols(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(s.strip().upper() for s in value)


class SectorRef(BaseModel):
    """The sector key/label a symbol is displayed under."""

    model_config = ConfigDict(frozen=True)

    key: str
    label: str


class Basket(BaseModel):
    """Immutable index membership with a symbol -> sector lookup table."""

    model_config = ConfigDict(frozen=True)

    sectors: tuple[Sector, ...] = ()
    benchmark_symbols: tuple[str, ...] = ()

    _lookup: Mapping[str, SectorRef] = PrivateAttr(default_factory=dict)

    @field_validator("benchmark_symbols")
    @classmethod
    def _upper_benchmarks(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(s.strip().upper() for s in value)

    @model_validator(mode="after")
    def _symbols_assigned_once(self) -> Basket:
        seen: set[str] = set()
        for symbol in [s for sector in self.sectors for s in sector.symbols] + list(
            self.benchmark_symbols
        ):
            if symbol in seen:
                raise ValueError(f"Symbol {symbol} is assigned more than once")
            seen.add(symbol)
        return self

    def model_post_init(self, __context: object) -> None:
        lookup: dict[str, SectorRef] = {}
        for sector in self.sectors:
            ref = SectorRef(key=sector.key, label=sector.label)
            for symbol in sector.symbols:
                lookup[symbol] = ref
        bench = SectorRef(key=BENCHMARK_SECTOR_KEY, label=BENCHMARK_SECTOR_LABEL)
        for symbol in self.benchmark_symbols:
            lookup[symbol] = bench
        self._lookup = MappingProxyType(lookup)

    @property
    def index_symbols(self) -> list[str]:
        """All symbols that carry weight in the index (benchmarks excluded)."""
        return [s for sector in self.sectors for s in sector.symbols]

    @property
    def all_symbols(self) -> list[str]:
        return self.index_symbols + list(self.benchmark_symbols)

    def is_benchmark(self, symbol: str) -> bool:
        return symbol.upper() in self.benchmark_symbols

    def sector_of(self, symbol: str) -> SectorRef:
        return self._lookup.get(
            symbol.upper(),
            SectorRef(key=UNKNOWN_SECTOR_KEY, label=UNKNOWN_SECTOR_LABEL),
        )
