"""Resolution of inbound slugs into redirect decisions.

State Machine — resolve()
=========================
::
    slug ──► contains "."? ──yes──► NOT_FOUND   (store untouched)
                 │ no
                 ▼
             get_by_slug ──None──► NOT_FOUND
                 │ record
                 ▼
             is_expired? ──yes──► EXPIRED       (no click, record kept)
                 │ no
                 ▼
             FOUND ──► click submitted to ClickRecorder (not awaited)

Key Behaviours
===============
- Expiry is judged at read time against one clock; expired records stay in
  the store.
- ``expires_at`` must be an RFC 3339 timestamp with a UTC offset.
  Anything that does not parse that way counts as "not expired".
- Store errors during lookup propagate as ``StoreError``; click failures
  never reach the caller.
"""

import datetime
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

from shortlink.clicks import ClickRecorder
from shortlink.enums import ResolutionState
from shortlink.metrics import RESOLUTIONS_TOTAL
from shortlink.models import UrlRecord
from shortlink.store import UrlStore

__all__ = ["Resolution", "Resolver", "is_expired", "parse_timestamp", "utc_now"]

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime.datetime]

RFC3339_PATTERN = re.compile(
    r"\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:[Zz]|[+-]\d{2}:\d{2})"
)


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def parse_timestamp(value: str) -> datetime.datetime | None:
    """Parse an RFC 3339 timestamp, or return None.

    ISO 8601 forms outside RFC 3339 (basic format, week or ordinal dates,
    missing offset) are rejected before reaching ``fromisoformat``.
    """
    if not isinstance(value, str) or not RFC3339_PATTERN.fullmatch(value):
        return None
    try:
        parsed = datetime.datetime.fromisoformat(value[:10] + "T" + value[11:].upper())
    except ValueError:
        return None
    return parsed


def is_expired(expires_at: str | None, now: datetime.datetime) -> bool:
    if not expires_at:
        return False
    deadline = parse_timestamp(expires_at)
    if deadline is None:
        logger.debug(f"Unparseable expires_at {expires_at!r}, treating as not expired")
        return False
    return deadline < now


@dataclass(frozen=True)
class Resolution:
    state: ResolutionState
    record: UrlRecord | None = None


class Resolver:
    def __init__(self, store: UrlStore, clicks: ClickRecorder, clock: Clock = utc_now) -> None:
        self._store = store
        self._clicks = clicks
        self._clock = clock

    async def resolve(self, slug: str) -> Resolution:
        if "." in slug:
            return self._finish(ResolutionState.NOT_FOUND)

        record = await self._store.get_by_slug(slug)
        if record is None:
            return self._finish(ResolutionState.NOT_FOUND)

        if is_expired(record.expires_at, self._clock()):
            logger.info(f"Slug '{slug}' expired at {record.expires_at}")
            return self._finish(ResolutionState.EXPIRED, record)

        self._clicks.submit(slug)
        return self._finish(ResolutionState.FOUND, record)

    def _finish(self, state: ResolutionState, record: UrlRecord | None = None) -> Resolution:
        RESOLUTIONS_TOTAL.labels(state=state).inc()
        return Resolution(state=state, record=record)
