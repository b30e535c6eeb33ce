"""Allocation of short slugs for incoming shorten requests.

Flow Diagram — allocate()
=========================
::
    ┌─────────────┐
    │  allocate() │
    └──────┬──────┘
           ▼
    ┌─────────────┐  empty
    │ url given?  ├────────► InvalidRequestError (400)
    └──────┬──────┘
           ▼
    ┌─────────────┐  yes    ┌──────────────┐  taken
    │ custom slug?├────────►│ insert once  ├───────► SlugConflictError (409)
    └──────┬──────┘         └──────────────┘
           │ no
           ▼
    ┌─────────────┐  taken, attempts left
    │ generate +  │◄──────────────┐
    │ insert      ├───────────────┘
    └──────┬──────┘
           │ taken on last attempt
           ▼
    AllocationExhaustedError (500)

Key Behaviours
===============
- The store's UNIQUE constraint is the only collision signal. There is no
  existence check before the insert; two concurrent allocations of the same
  slug are decided by the database.
- A custom slug is tried exactly once. A conflict is reported, never replaced
  with a different slug.
- Generated slugs are retried at most ``max_attempts`` times in total.
- Store failures other than a uniqueness violation are not retried.
"""

import logging
from dataclasses import dataclass

from shortlink.enums import AllocationOutcome
from shortlink.errors import (
    AllocationExhaustedError,
    InvalidRequestError,
    ShortlinkError,
    SlugConflictError,
    SlugTakenError,
)
from shortlink.metrics import ALLOCATIONS_TOTAL, SLUG_COLLISIONS_TOTAL
from shortlink.slug import SlugGenerator
from shortlink.store import UrlStore

__all__ = ["Allocation", "SlugAllocator", "DEFAULT_MAX_ATTEMPTS"]

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5


@dataclass(frozen=True)
class Allocation:
    slug: str
    original_url: str
    expires_at: str | None
    short_url: str


class SlugAllocator:
    """Turns a shorten request into exactly one persisted record.

    Args:
        store: Store whose insert enforces slug uniqueness.
        base_url: Prefix for the returned short URL, used verbatim.
        generator: Source of candidate slugs for requests without a custom slug.
        max_attempts: Total insert attempts for generated slugs.
    """

    def __init__(
        self,
        store: UrlStore,
        base_url: str,
        generator: SlugGenerator | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts!r}")
        self._store = store
        self._base_url = base_url
        self._generator = generator or SlugGenerator()
        self._max_attempts = max_attempts

    async def allocate(
        self,
        url: str,
        custom_slug: str | None = None,
        expires_at: str | None = None,
    ) -> Allocation:
        try:
            allocation = await self._allocate(url, custom_slug, expires_at)
        except InvalidRequestError:
            ALLOCATIONS_TOTAL.labels(outcome=AllocationOutcome.INVALID).inc()
            raise
        except SlugConflictError:
            ALLOCATIONS_TOTAL.labels(outcome=AllocationOutcome.CONFLICT).inc()
            raise
        except AllocationExhaustedError:
            ALLOCATIONS_TOTAL.labels(outcome=AllocationOutcome.EXHAUSTED).inc()
            raise
        except ShortlinkError:
            ALLOCATIONS_TOTAL.labels(outcome=AllocationOutcome.STORE_ERROR).inc()
            raise
        ALLOCATIONS_TOTAL.labels(outcome=AllocationOutcome.SUCCESS).inc()
        return allocation

    async def _allocate(self, url: str, custom_slug: str | None, expires_at: str | None) -> Allocation:
        # Whitespace-only URLs are rejected too, not just the empty string.
        if not url or not url.strip():
            raise InvalidRequestError()

        slug = custom_slug.strip() if custom_slug is not None else ""
        if slug:
            return await self._insert_custom(slug, url, expires_at)
        return await self._insert_generated(url, expires_at)

    async def _insert_custom(self, slug: str, url: str, expires_at: str | None) -> Allocation:
        if "." in slug:
            # Accepted, but GET /{slug} treats dotted paths as static assets.
            logger.warning(f"Custom slug '{slug}' contains '.' and will not be reachable by redirect")
        try:
            await self._store.insert(slug, url, expires_at)
        except SlugTakenError as exc:
            logger.info(f"Custom slug '{slug}' already taken")
            raise SlugConflictError() from exc
        logger.info(f"Allocated custom slug '{slug}'")
        return self._result(slug, url, expires_at)

    async def _insert_generated(self, url: str, expires_at: str | None) -> Allocation:
        for attempt in range(1, self._max_attempts + 1):
            slug = self._generator()
            try:
                await self._store.insert(slug, url, expires_at)
            except SlugTakenError:
                SLUG_COLLISIONS_TOTAL.inc()
                logger.warning(f"Generated slug '{slug}' collided (attempt {attempt}/{self._max_attempts})")
                continue
            logger.info(f"Allocated slug '{slug}' on attempt {attempt}")
            return self._result(slug, url, expires_at)

        logger.error(f"Could not allocate a unique slug after {self._max_attempts} attempts")
        raise AllocationExhaustedError()

    def _result(self, slug: str, url: str, expires_at: str | None) -> Allocation:
        return Allocation(
            slug=slug,
            original_url=url,
            expires_at=expires_at,
            short_url=f"{self._base_url}/{slug}",
        )
