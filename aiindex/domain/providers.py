"""Market-data provider interface.

Implementations raise MarketDataError for any per-symbol failure (transport,
HTTP status, empty or malformed payload) so callers can isolate it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from aiindex.domain.models.market_data import CompanyProfile, DailyClose, Quote


class MarketDataProvider(ABC):
    """Abstract source of quotes, company profiles and daily closes."""

    @abstractmethod
    async def get_quote(self, symbol: str) -> Quote:
        """Fetch the current quote."""

    @abstractmethod
    async def get_profile(self, symbol: str) -> CompanyProfile:
        """Fetch company metadata including market capitalization."""

    @abstractmethod
    async def get_daily_closes(
        self, symbol: str, start: datetime, end: datetime
    ) -> list[DailyClose]:
        """Fetch daily closes between start and end, in ascending time order."""
