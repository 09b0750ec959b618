"""Company profile repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from aiindex.domain.models.market_data import CompanyProfile


class ProfileRepository(ABC):
    """One profile row per symbol, replaced on every profile refresh."""

    @abstractmethod
    async def get_profile(self, symbol: str) -> CompanyProfile | None:
        """Return the stored profile for the symbol, or None."""

    @abstractmethod
    async def upsert_profile(self, profile: CompanyProfile) -> None:
        """Insert the profile or overwrite the existing row for its symbol."""
