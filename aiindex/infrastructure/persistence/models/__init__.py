"""ORM model registry — imports all layer modules so every mapper class is
registered with Base.metadata before Alembic or SQLAlchemy runs.
"""

from aiindex.infrastructure.persistence.models.market_data import (
    BasePrice,
    CompanyProfile,
    PriceObservation,
)
from aiindex.infrastructure.persistence.models.index import (
    IndexSnapshot,
    MaintenanceMarker,
)

__all__ = [
    # Market data
    "BasePrice",
    "CompanyProfile",
    "PriceObservation",
    # Index
    "IndexSnapshot",
    "MaintenanceMarker",
]
