"""Domain repository interfaces.

All abstractions are defined here with abc.ABC and @abstractmethod.
Concrete implementations live in aiindex/infrastructure/persistence/ and are
wired at the application boundary through a StoreScope.

Import from this package rather than individual modules to avoid coupling
services to specific repository module paths.
"""

from .base import StoreScope, Stores
from .prices import PriceRepository
from .profiles import ProfileRepository
from .snapshots import SnapshotRepository

__all__ = [
    "StoreScope",
    "Stores",
    "PriceRepository",
    "ProfileRepository",
    "SnapshotRepository",
]
