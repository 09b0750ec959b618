"""SQLAlchemy implementation of SnapshotRepository."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import DateTime, Double, exists, insert, literal, select
from sqlalchemy.ext.asyncio import AsyncSession

from aiindex.domain.models.index import IndexSnapshot as DomainIndexSnapshot
from aiindex.domain.repositories.snapshots import SnapshotRepository
from aiindex.infrastructure.persistence.models.index import (
    IndexSnapshot as OrmIndexSnapshot,
    MaintenanceMarker as OrmMaintenanceMarker,
)

from .dialect import as_utc, start_of_day

BACKFILL_MARKER = "historical_backfill"


class SqlSnapshotRepository(SnapshotRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @staticmethod
    def _to_domain(row: OrmIndexSnapshot) -> DomainIndexSnapshot:
        return DomainIndexSnapshot(
            value=row.value,
            daily_change=row.daily_change,
            daily_change_pct=row.daily_change_pct,
            timestamp=as_utc(row.taken_at),
        )

    async def latest_snapshot(self) -> DomainIndexSnapshot | None:
        stmt = select(OrmIndexSnapshot).order_by(OrmIndexSnapshot.taken_at.desc()).limit(1)
        result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()
        return self._to_domain(row) if row is not None else None

    async def snapshot_before(self, day: date) -> DomainIndexSnapshot | None:
        stmt = (
            select(OrmIndexSnapshot)
            .where(OrmIndexSnapshot.taken_at < start_of_day(day))
            .order_by(OrmIndexSnapshot.taken_at.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()
        return self._to_domain(row) if row is not None else None

    async def append_snapshot(self, snapshot: DomainIndexSnapshot) -> bool:
        """INSERT ... SELECT ... WHERE NOT EXISTS (taken_at >= :ts).

        The ordering check and the write are one statement, so a stale or
        duplicate timestamp can never land in the series.
        """
        taken_at = as_utc(snapshot.timestamp)
        not_newer = ~exists().where(OrmIndexSnapshot.taken_at >= taken_at).correlate(None)
        source = select(
            literal(snapshot.value, Double()),
            literal(snapshot.daily_change, Double()),
            literal(snapshot.daily_change_pct, Double()),
            literal(taken_at, DateTime(timezone=True)),
        ).where(not_newer)
        stmt = insert(OrmIndexSnapshot).from_select(
            ["value", "daily_change", "daily_change_pct", "taken_at"],
            source,
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def list_recent(self, limit: int = 100) -> list[DomainIndexSnapshot]:
        stmt = select(OrmIndexSnapshot).order_by(OrmIndexSnapshot.taken_at.desc()).limit(limit)
        result = await self._session.execute(stmt)
        return [self._to_domain(row) for row in result.scalars()]

    async def backfill_completed_at(self) -> datetime | None:
        stmt = select(OrmMaintenanceMarker.completed_at).where(
            OrmMaintenanceMarker.name == BACKFILL_MARKER
        )
        result = await self._session.execute(stmt)
        completed_at = result.scalar_one_or_none()
        return as_utc(completed_at) if completed_at is not None else None

    async def mark_backfill_completed(self, at: datetime) -> None:
        await self._session.merge(
            OrmMaintenanceMarker(name=BACKFILL_MARKER, completed_at=as_utc(at))
        )
