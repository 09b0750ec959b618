"""Async SQLAlchemy engine, session factory, and schema bootstrap."""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from aiindex.infrastructure.config import Settings


def build_engine(database_url: str) -> AsyncEngine:
    return create_async_engine(
        database_url,
        echo=False,
        pool_pre_ping=True,
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
    )


settings = Settings()

engine = build_engine(settings.database_url)

AsyncSessionLocal = build_session_factory(engine)


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""


async def init_models(bind: AsyncEngine) -> None:
    """Create any missing tables.

    Alembic owns schema changes for deployed databases; this covers fresh
    SQLite files and test databases.
    """
    import aiindex.infrastructure.persistence.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
