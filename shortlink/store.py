"""Durable slug → URL record store.

``UrlStore`` is the only component that talks to the database. Each public
method runs a single statement in its own short-lived session, so callers
never hold a transaction open and background workers can share the store
with request handlers.

Uniqueness
==========
The ``slug`` UNIQUE constraint is enforced by the database. ``insert`` turns
a violation of that constraint into ``SlugTakenError``; this is the signal the
allocator reacts to. No method checks for existence before inserting.

Error Mapping
=============
::
    IntegrityError (UNIQUE slug)  → SlugTakenError
    any other SQLAlchemyError     → StoreError
"""

import logging

from sqlalchemy import delete, select, text, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shortlink.errors import SlugTakenError, StoreError
from shortlink.models import UrlRecord

__all__ = ["UrlStore", "is_unique_violation"]

logger = logging.getLogger(__name__)

_PG_UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """Return True when ``exc`` was raised by a UNIQUE constraint.

    SQLite reports ``UNIQUE constraint failed: <table>.<column>``; PostgreSQL
    drivers expose SQLSTATE 23505.
    """
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate == _PG_UNIQUE_VIOLATION:
        return True
    return "UNIQUE constraint failed" in str(orig)


class UrlStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def insert(self, slug: str, original_url: str, expires_at: str | None = None) -> UrlRecord:
        async with self._session_factory() as session:
            record = UrlRecord(slug=slug, original_url=original_url, expires_at=expires_at)
            session.add(record)
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                if is_unique_violation(exc):
                    raise SlugTakenError(slug) from exc
                logger.error(f"Insert failed for slug {slug}: {exc}")
                raise StoreError() from exc
            except SQLAlchemyError as exc:
                await session.rollback()
                logger.error(f"Insert failed for slug {slug}: {exc}")
                raise StoreError() from exc
            try:
                await session.refresh(record)
            except SQLAlchemyError as exc:
                raise StoreError() from exc
            return record

    async def get_by_slug(self, slug: str) -> UrlRecord | None:
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(UrlRecord).where(UrlRecord.slug == slug))
                return result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            logger.error(f"Lookup failed for slug {slug}: {exc}")
            raise StoreError() from exc

    async def increment_clicks(self, slug: str) -> None:
        try:
            async with self._session_factory() as session:
                await session.execute(
                    update(UrlRecord).where(UrlRecord.slug == slug).values(clicks=UrlRecord.clicks + 1)
                )
                await session.commit()
        except SQLAlchemyError as exc:
            raise StoreError() from exc

    async def list_all(self) -> list[UrlRecord]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(UrlRecord).order_by(UrlRecord.created_at.desc(), UrlRecord.id.desc())
                )
                return list(result.scalars().all())
        except SQLAlchemyError as exc:
            logger.error(f"Listing urls failed: {exc}")
            raise StoreError() from exc

    async def delete(self, record_id: int) -> bool:
        try:
            async with self._session_factory() as session:
                result = await session.execute(delete(UrlRecord).where(UrlRecord.id == record_id))
                await session.commit()
                return result.rowcount > 0
        except SQLAlchemyError as exc:
            logger.error(f"Delete failed for id {record_id}: {exc}")
            raise StoreError() from exc

    async def update_expiry(self, record_id: int, expires_at: str | None) -> bool:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    update(UrlRecord).where(UrlRecord.id == record_id).values(expires_at=expires_at)
                )
                await session.commit()
                return result.rowcount > 0
        except SQLAlchemyError as exc:
            logger.error(f"Expiry update failed for id {record_id}: {exc}")
            raise StoreError() from exc

    async def ping(self) -> None:
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            raise StoreError() from exc
