"""Index layer ORM models: index_snapshots, maintenance_markers."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Double, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from aiindex.infrastructure.database import Base


class IndexSnapshot(Base):
    """One point of the index series.

    taken_at is unique; the repository additionally refuses any row whose
    taken_at is not after the current maximum.
    """

    __tablename__ = "index_snapshots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    value: Mapped[float] = mapped_column(Double, nullable=False)
    daily_change: Mapped[Optional[float]] = mapped_column(Double, nullable=True)
    daily_change_pct: Mapped[Optional[float]] = mapped_column(Double, nullable=True)
    taken_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, unique=True, index=True
    )


class MaintenanceMarker(Base):
    """Named one-time maintenance jobs and when they completed."""

    __tablename__ = "maintenance_markers"

    name: Mapped[str] = mapped_column(Text, primary_key=True)  # e.g. historical_backfill
    completed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
