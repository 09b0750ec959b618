"""Unit tests for aiindex/infrastructure/database.py.

No database connection is required.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from aiindex.infrastructure.database import (
    AsyncSessionLocal,
    Base,
    build_engine,
    build_session_factory,
    engine,
)


def test_base_is_declarative_base():
    assert issubclass(Base, DeclarativeBase)


def test_engine_is_async():
    assert isinstance(engine, AsyncEngine)


def test_session_factory_produces_async_sessions():
    assert isinstance(AsyncSessionLocal, async_sessionmaker)
    assert AsyncSessionLocal.class_ is AsyncSession


def test_session_factory_keeps_objects_after_commit():
    factory = build_session_factory(build_engine("sqlite+aiosqlite://"))
    assert factory.kw["expire_on_commit"] is False


def test_all_tables_registered():
    import aiindex.infrastructure.persistence  # noqa: F401

    assert {
        "prices",
        "base_prices",
        "stock_profiles",
        "index_snapshots",
        "maintenance_markers",
    } <= set(Base.metadata.tables)
