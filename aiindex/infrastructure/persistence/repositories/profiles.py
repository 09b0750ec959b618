"""SQLAlchemy implementation of ProfileRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from aiindex.domain.models.market_data import CompanyProfile as DomainCompanyProfile
from aiindex.domain.repositories.profiles import ProfileRepository
from aiindex.infrastructure.persistence.models.market_data import (
    CompanyProfile as OrmCompanyProfile,
)

from .dialect import as_utc, upsert_insert

_UPDATABLE = (
    "name",
    "exchange",
    "industry",
    "weburl",
    "logo",
    "country",
    "market_cap",
    "updated_at",
)


class SqlProfileRepository(ProfileRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @staticmethod
    def _to_domain(row: OrmCompanyProfile) -> DomainCompanyProfile:
        return DomainCompanyProfile(
            symbol=row.symbol,
            name=row.name,
            exchange=row.exchange,
            industry=row.industry,
            weburl=row.weburl,
            logo=row.logo,
            country=row.country,
            market_cap=row.market_cap,
            updated_at=as_utc(row.updated_at),
        )

    async def get_profile(self, symbol: str) -> DomainCompanyProfile | None:
        stmt = select(OrmCompanyProfile).where(OrmCompanyProfile.symbol == symbol)
        result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()
        return self._to_domain(row) if row is not None else None

    async def upsert_profile(self, profile: DomainCompanyProfile) -> None:
        stmt = upsert_insert(self._session, OrmCompanyProfile).values(
            symbol=profile.symbol,
            name=profile.name,
            exchange=profile.exchange,
            industry=profile.industry,
            weburl=profile.weburl,
            logo=profile.logo,
            country=profile.country,
            market_cap=profile.market_cap,
            updated_at=as_utc(profile.updated_at),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["symbol"],
            set_={col: stmt.excluded[col] for col in _UPDATABLE},
        )
        await self._session.execute(stmt)
