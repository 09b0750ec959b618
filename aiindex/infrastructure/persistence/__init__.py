"""Persistence package.

Importing this package registers every ORM mapper with Base.metadata
(required for Alembic autogenerate and SQLAlchemy mapper configuration)
and exports all repository implementations and the session scope.
"""

from aiindex.infrastructure.persistence.models import *  # noqa: F401, F403
from aiindex.infrastructure.persistence.models import __all__ as _orm_all
from aiindex.infrastructure.persistence.repositories import (
    Repositories,
    SqlPriceRepository,
    SqlProfileRepository,
    SqlSnapshotRepository,
    get_repositories,
)
from aiindex.infrastructure.persistence.scope import session_scope

__all__ = _orm_all + [
    "Repositories",
    "SqlPriceRepository",
    "SqlProfileRepository",
    "SqlSnapshotRepository",
    "get_repositories",
    "session_scope",
]
