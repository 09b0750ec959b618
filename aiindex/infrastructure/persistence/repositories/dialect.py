"""Helpers shared by the SQL repositories.

SQLite (the default store) returns naive datetimes from DateTime(timezone=True)
columns, so every timestamp is normalised to UTC on the way in and out.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession


def upsert_insert(session: AsyncSession, model: type):
    """Return an INSERT supporting on_conflict_* for the session's dialect."""
    if session.get_bind().dialect.name == "postgresql":
        return pg_insert(model)
    return sqlite_insert(model)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)
