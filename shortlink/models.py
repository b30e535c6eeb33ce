"""SQLAlchemy ORM models for the shortlink service.

Data Model Layout
=================
::
    urls table
    ├─ id (INTEGER PRIMARY KEY AUTOINCREMENT)
    ├─ slug (TEXT UNIQUE NOT NULL, INDEXED)
    ├─ original_url (TEXT NOT NULL)
    ├─ created_at (DATETIME, DEFAULT CURRENT_TIMESTAMP)
    ├─ clicks (INTEGER DEFAULT 0)
    └─ expires_at (TEXT, NULL)

Key Behaviours
===============
- The UNIQUE constraint on slug is the only uniqueness guard; allocation
  relies on the violation it raises.
- clicks is only ever changed by an atomic ``clicks = clicks + 1`` update.
- expires_at keeps the caller's timestamp string verbatim; expiry is judged
  when the slug is resolved, never on write.
- slug and original_url never change after insertion.

Classes:
    UrlRecord:  A shortened URL mapping with click tracking and expiry.
"""

import datetime

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from shortlink.database import Base

__all__ = ["UrlRecord"]


class UrlRecord(Base):
    __tablename__ = "urls"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    original_url: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    clicks: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    expires_at: Mapped[str | None] = mapped_column(String, nullable=True)

    def __repr__(self) -> str:
        return f"<UrlRecord(id={self.id}, slug='{self.slug}', clicks={self.clicks})>"
