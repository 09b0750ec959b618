"""Price store interface.

PriceRepository is a specialised time-series interface: observations are
append-only and queried by symbol + time, base prices are write-once.  It
does not extend a generic CRUD base because neither entity has an update or
delete lifecycle.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime

from aiindex.domain.models.market_data import (
    HistoricalPrice,
    LatestPrice,
    PriceObservation,
)


class PriceRepository(ABC):
    """Read/write interface for price observations and base prices."""

    @abstractmethod
    async def latest_price(self, symbol: str) -> LatestPrice | None:
        """Return the most recent observation for the symbol, or None.

        market_cap is joined at read time from the symbol's profile when the
        profile carries one, otherwise taken from the observation row.
        """

    @abstractmethod
    async def base_price(self, symbol: str) -> float | None:
        """Return the symbol's base price, or None if never established."""

    @abstractmethod
    async def set_base_price_if_absent(
        self, symbol: str, price: float, at: datetime
    ) -> bool:
        """Establish the base price unless one exists.

        Returns True when this call wrote the row.  An existing base price is
        never overwritten.
        """

    @abstractmethod
    async def append_price_observation(self, observation: PriceObservation) -> None:
        """Append one observation.  Existing observations are never modified."""

    @abstractmethod
    async def price_as_of_or_before(
        self, symbol: str, day: date
    ) -> HistoricalPrice | None:
        """Return the latest observation on or before the given UTC day, or None."""

    @abstractmethod
    async def latest_known_market_cap(self, symbol: str) -> float | None:
        """Return the freshest non-null market cap known for the symbol, or None."""

    @abstractmethod
    async def observation_days(self) -> list[date]:
        """Return every distinct UTC calendar day with an observation, ascending."""

    @abstractmethod
    async def count_price_rows(self) -> int:
        """Return the total number of stored observations (all symbols)."""
