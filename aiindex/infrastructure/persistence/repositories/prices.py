"""SQLAlchemy implementation of PriceRepository."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from aiindex.domain.models.market_data import (
    HistoricalPrice,
    LatestPrice,
    PriceObservation as DomainPriceObservation,
)
from aiindex.domain.repositories.prices import PriceRepository
from aiindex.infrastructure.persistence.models.market_data import (
    BasePrice as OrmBasePrice,
    CompanyProfile as OrmCompanyProfile,
    PriceObservation as OrmPriceObservation,
)

from .dialect import as_utc, start_of_day, upsert_insert


class SqlPriceRepository(PriceRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @staticmethod
    def _to_latest(row: OrmPriceObservation, profile_cap: float | None) -> LatestPrice:
        return LatestPrice(
            symbol=row.symbol,
            price=row.price,
            change=row.change,
            change_pct=row.change_pct,
            market_cap=profile_cap if profile_cap is not None else row.market_cap,
            timestamp=as_utc(row.observed_at),
        )

    @staticmethod
    def _to_historical(row: OrmPriceObservation) -> HistoricalPrice:
        return HistoricalPrice(
            price=row.price,
            market_cap=row.market_cap,
            observed_at=as_utc(row.observed_at),
        )

    async def latest_price(self, symbol: str) -> LatestPrice | None:
        stmt = (
            select(OrmPriceObservation, OrmCompanyProfile.market_cap)
            .outerjoin(
                OrmCompanyProfile,
                OrmCompanyProfile.symbol == OrmPriceObservation.symbol,
            )
            .where(OrmPriceObservation.symbol == symbol)
            .order_by(
                OrmPriceObservation.observed_at.desc(),
                OrmPriceObservation.id.desc(),
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        row = result.first()
        if row is None:
            return None
        observation, profile_cap = row
        return self._to_latest(observation, profile_cap)

    async def base_price(self, symbol: str) -> float | None:
        stmt = select(OrmBasePrice.price).where(OrmBasePrice.symbol == symbol)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def set_base_price_if_absent(
        self, symbol: str, price: float, at: datetime
    ) -> bool:
        stmt = (
            upsert_insert(self._session, OrmBasePrice)
            .values(symbol=symbol, price=price, recorded_at=as_utc(at))
            .on_conflict_do_nothing(index_elements=["symbol"])
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def append_price_observation(self, observation: DomainPriceObservation) -> None:
        self._session.add(
            OrmPriceObservation(
                symbol=observation.symbol,
                price=observation.price,
                change=observation.change,
                change_pct=observation.change_pct,
                market_cap=observation.market_cap,
                observed_at=as_utc(observation.observed_at),
            )
        )

    async def price_as_of_or_before(
        self, symbol: str, day: date
    ) -> HistoricalPrice | None:
        stmt = (
            select(OrmPriceObservation)
            .where(
                OrmPriceObservation.symbol == symbol,
                OrmPriceObservation.observed_at < start_of_day(day + timedelta(days=1)),
            )
            .order_by(
                OrmPriceObservation.observed_at.desc(),
                OrmPriceObservation.id.desc(),
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()
        return self._to_historical(row) if row is not None else None

    async def latest_known_market_cap(self, symbol: str) -> float | None:
        profile_stmt = select(OrmCompanyProfile.market_cap).where(
            OrmCompanyProfile.symbol == symbol
        )
        result = await self._session.execute(profile_stmt)
        profile_cap = result.scalar_one_or_none()
        if profile_cap is not None:
            return profile_cap

        stmt = (
            select(OrmPriceObservation.market_cap)
            .where(
                OrmPriceObservation.symbol == symbol,
                OrmPriceObservation.market_cap.is_not(None),
            )
            .order_by(
                OrmPriceObservation.observed_at.desc(),
                OrmPriceObservation.id.desc(),
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def observation_days(self) -> list[date]:
        # Days are derived in Python so they are UTC days on every dialect.
        stmt = select(OrmPriceObservation.observed_at).distinct()
        result = await self._session.execute(stmt)
        return sorted({as_utc(ts).date() for ts in result.scalars()})

    async def count_price_rows(self) -> int:
        stmt = select(func.count()).select_from(OrmPriceObservation)
        result = await self._session.execute(stmt)
        return result.scalar_one()
