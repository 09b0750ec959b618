"""Index snapshot repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime

from aiindex.domain.models.index import IndexSnapshot


class SnapshotRepository(ABC):
    """Read/write interface for the index snapshot series.

    The series is append-only and strictly ordered by timestamp.
    append_snapshot() enforces the ordering itself: a snapshot whose
    timestamp is not after every stored snapshot is rejected, which also
    makes re-running a historical day a no-op.
    """

    @abstractmethod
    async def latest_snapshot(self) -> IndexSnapshot | None:
        """Return the most recent snapshot, or None for an empty series."""

    @abstractmethod
    async def snapshot_before(self, day: date) -> IndexSnapshot | None:
        """Return the latest snapshot strictly before the start of the UTC day."""

    @abstractmethod
    async def append_snapshot(self, snapshot: IndexSnapshot) -> bool:
        """Append the snapshot if its timestamp exceeds the stored maximum.

        Returns True when the row was written, False when it was rejected.
        """

    @abstractmethod
    async def list_recent(self, limit: int = 100) -> list[IndexSnapshot]:
        """Return up to limit snapshots, most recent first."""

    @abstractmethod
    async def backfill_completed_at(self) -> datetime | None:
        """Return when the historical backfill completed, or None if it never has."""

    @abstractmethod
    async def mark_backfill_completed(self, at: datetime) -> None:
        """Persist the backfill-completion marker."""
