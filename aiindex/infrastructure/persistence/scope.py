"""Transactional StoreScope over an async session factory."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from aiindex.domain.errors import StoreUnavailableError
from aiindex.domain.repositories import StoreScope

from .repositories import Repositories, get_repositories


def session_scope(factory: async_sessionmaker[AsyncSession]) -> StoreScope:
    """Return a StoreScope: one session, one transaction per ``async with``.

    The transaction commits when the block exits normally and rolls back on
    any exception.  SQLAlchemy errors, including those raised on commit,
    surface as StoreUnavailableError.
    """

    @asynccontextmanager
    async def scope() -> AsyncIterator[Repositories]:
        try:
            async with factory() as session:
                async with session.begin():
                    yield get_repositories(session)
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(str(exc)) from exc

    return scope
