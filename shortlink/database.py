"""Database engine and session management for the shortlink service.

This module provides SQLAlchemy async engine setup, session factories, and
schema lifecycle operations. SQLite (through aiosqlite) is the default
backend; PostgreSQL through asyncpg works with the same code.

Flow Diagram — Database Lifecycle
=================================
::
    ┌─────────────┐
    │ lifespan()  │
    │ startup     │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ create_     │
    │ engine()    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ init_db()   │
    │ create_all  │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ UrlStore    │
    │ sessions    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ close_db()  │
    │ dispose     │
    └─────────────┘

Key Behaviours
===============
- The parent directory of a SQLite database file is created on demand.
- Tables and the slug index are created automatically on startup.
- Sessions do not expire attributes on commit, so returned records stay usable.

Classes:
    Base:  SQLAlchemy declarative base for all models.

Functions:
    create_engine():  Builds the async engine from a database URL.
    create_session_factory():  Builds the async session factory.
    init_db():  Creates all tables.
    close_db():  Disposes the engine.
"""

from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

__all__ = ["Base", "create_engine", "create_session_factory", "init_db", "close_db"]


class Base(DeclarativeBase):
    pass


def _ensure_sqlite_directory(database_url: str) -> None:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return
    if not url.database or url.database == ":memory:":
        return
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    _ensure_sqlite_directory(database_url)
    return create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    # Import registers the table on Base.metadata
    from shortlink import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db(engine: AsyncEngine) -> None:
    await engine.dispose()
