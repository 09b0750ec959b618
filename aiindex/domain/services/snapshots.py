"""Snapshot Recorder: day-over-day change and ordered persistence.

Every producer of snapshots (scheduled tick, on-demand recompute, historical
backfill) goes through one SnapshotRecorder instance.  Its lock makes it the
single writer of the series; the repository's conditional append rejects any
timestamp that is not after the stored maximum.  Each append runs in its own
short transaction so readers never wait behind a whole backfill sweep.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from aiindex.domain.errors import StoreUnavailableError
from aiindex.domain.models.index import IndexSnapshot, RecordOutcome
from aiindex.domain.repositories import StoreScope

logger = logging.getLogger(__name__)


def compute_daily_change(
    new_value: float,
    previous: IndexSnapshot | None,
) -> tuple[float | None, float | None]:
    """Return (daily_change, daily_change_pct) relative to the previous snapshot.

    Both are None when there is no previous snapshot or its value is not
    strictly positive.
    """
    if previous is None or previous.value <= 0.0:
        return None, None
    change = new_value - previous.value
    return change, change / previous.value * 100.0


def build_snapshot(
    new_value: float,
    previous: IndexSnapshot | None,
    at: datetime,
) -> IndexSnapshot:
    change, change_pct = compute_daily_change(new_value, previous)
    return IndexSnapshot(
        value=new_value,
        daily_change=change,
        daily_change_pct=change_pct,
        timestamp=at,
    )


class SnapshotRecorder:
    """Serialised writer of the index snapshot series."""

    def __init__(self, scope: StoreScope) -> None:
        self._scope = scope
        self._lock = asyncio.Lock()

    async def record(
        self,
        new_value: float,
        previous: IndexSnapshot | None,
        at: datetime,
    ) -> RecordOutcome:
        """Record new_value against an explicitly supplied previous snapshot.

        Used by the historical replay, which carries the previous iteration's
        snapshot forward itself.
        """
        snapshot = build_snapshot(new_value, previous, at)
        async with self._lock:
            try:
                async with self._scope() as stores:
                    persisted = await stores.snapshots.append_snapshot(snapshot)
            except StoreUnavailableError as exc:
                logger.error("Failed to persist index snapshot at %s: %s", at.isoformat(), exc)
                return RecordOutcome(snapshot=snapshot, persisted=False)
        self._log_outcome(snapshot, persisted)
        return RecordOutcome(snapshot=snapshot, persisted=persisted)

    async def record_latest(self, new_value: float, at: datetime) -> RecordOutcome:
        """Record new_value against the latest stored snapshot.

        The read of the previous snapshot and the append share one transaction
        under the writer lock, so no other producer can interleave.
        """
        previous: IndexSnapshot | None = None
        async with self._lock:
            try:
                async with self._scope() as stores:
                    previous = await stores.snapshots.latest_snapshot()
                    snapshot = build_snapshot(new_value, previous, at)
                    persisted = await stores.snapshots.append_snapshot(snapshot)
            except StoreUnavailableError as exc:
                logger.error("Failed to persist index snapshot at %s: %s", at.isoformat(), exc)
                return RecordOutcome(
                    snapshot=build_snapshot(new_value, previous, at), persisted=False
                )
        self._log_outcome(snapshot, persisted)
        return RecordOutcome(snapshot=snapshot, persisted=persisted)

    @staticmethod
    def _log_outcome(snapshot: IndexSnapshot, persisted: bool) -> None:
        if persisted:
            logger.info(
                "Index recorded: %.2f at %s", snapshot.value, snapshot.timestamp.isoformat()
            )
        else:
            logger.warning(
                "Index snapshot at %s rejected: not after the latest stored snapshot",
                snapshot.timestamp.isoformat(),
            )
