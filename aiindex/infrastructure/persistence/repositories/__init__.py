"""Concrete SQLAlchemy repository implementations.

Exports all SqlRepository classes and the get_repositories() factory used by
the session scope to bind one transaction's repositories together.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from .prices import SqlPriceRepository
from .profiles import SqlProfileRepository
from .snapshots import SqlSnapshotRepository


@dataclass
class Repositories:
    """All repository instances bound to a single AsyncSession."""

    prices: SqlPriceRepository
    snapshots: SqlSnapshotRepository
    profiles: SqlProfileRepository


def get_repositories(session: AsyncSession) -> Repositories:
    """Construct all repositories bound to the given session."""
    return Repositories(
        prices=SqlPriceRepository(session),
        snapshots=SqlSnapshotRepository(session),
        profiles=SqlProfileRepository(session),
    )


__all__ = [
    "SqlPriceRepository",
    "SqlProfileRepository",
    "SqlSnapshotRepository",
    "Repositories",
    "get_repositories",
]
