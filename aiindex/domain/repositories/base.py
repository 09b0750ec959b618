"""Unit-of-work contract shared by the domain services.

Repositories are bound to a single transaction.  Services never hold one
across operations: every computation opens a StoreScope, re-reads what it
needs, and the scope commits on exit.  Concrete scopes live in
aiindex/infrastructure/persistence/ and translate storage failures into
StoreUnavailableError.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Protocol

from .prices import PriceRepository
from .profiles import ProfileRepository
from .snapshots import SnapshotRepository


class Stores(Protocol):
    """The repositories available inside one transaction."""

    prices: PriceRepository
    snapshots: SnapshotRepository
    profiles: ProfileRepository


StoreScope = Callable[[], AbstractAsyncContextManager[Stores]]
