"""Service wiring and FastAPI dependency functions.

``ServiceManager`` owns every long-lived resource (engine, store, click
workers, OAuth client). One instance is built per application in the
lifespan handler and stored on ``app.state.services``; request handlers reach
it through the dependency functions below.
"""

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncEngine

from shortlink.allocator import SlugAllocator
from shortlink.clicks import ClickRecorder
from shortlink.config import Settings
from shortlink.database import close_db, create_engine, create_session_factory, init_db
from shortlink.errors import UnauthorizedError
from shortlink.oauth import DiscordOAuth
from shortlink.resolver import Resolver
from shortlink.schemas import DiscordUser
from shortlink.session import SESSION_COOKIE, decode_session
from shortlink.slug import SlugGenerator
from shortlink.store import UrlStore

__all__ = [
    "ServiceManager",
    "RequestContext",
    "get_service_manager",
    "get_request_context",
    "get_store",
    "get_allocator",
    "get_resolver",
    "get_oauth",
    "get_current_user",
]

logger = logging.getLogger(__name__)


# ============================================================================
# SERVICE MANAGER
# ============================================================================


class ServiceManager:
    """Shared resources for one application instance.

    Args:
        settings: Configuration for the instance.
        slug_generator: Override for the slug source (tests inject a
            deterministic one).
        oauth: Override for the Discord client.
    """

    def __init__(
        self,
        settings: Settings,
        slug_generator: SlugGenerator | None = None,
        oauth: DiscordOAuth | None = None,
    ) -> None:
        self.settings = settings
        self._slug_generator = slug_generator
        self._oauth = oauth
        self._initialized = False
        self._init_lock = asyncio.Lock()

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """Create the engine and schema, then start the click workers.

        Concurrent first requests share one initialization.
        """
        if self._initialized:
            return
        async with self._init_lock:
            if not self._initialized:
                await self._build()

    async def _build(self) -> None:
        settings = self.settings
        self.engine: AsyncEngine = create_engine(
            settings.DATABASE_URL,
            echo=(settings.APP_ENV == "development"),
        )
        await init_db(self.engine)
        self.store = UrlStore(create_session_factory(self.engine))
        self.clicks = ClickRecorder(
            self.store,
            max_pending=settings.CLICK_QUEUE_SIZE,
            workers=settings.CLICK_WORKERS,
            drain_timeout=settings.CLICK_DRAIN_TIMEOUT_SECONDS,
        )
        self.clicks.start()
        self.allocator = SlugAllocator(
            self.store,
            base_url=settings.BASE_URL,
            generator=self._slug_generator or SlugGenerator(settings.SLUG_LENGTH),
            max_attempts=settings.SLUG_MAX_ATTEMPTS,
        )
        self.resolver = Resolver(self.store, self.clicks)
        self.oauth = self._oauth or DiscordOAuth(
            settings.DISCORD_CLIENT_ID,
            settings.DISCORD_CLIENT_SECRET,
            settings.DISCORD_REDIRECT_URI,
        )
        self._initialized = True
        logger.info(f"{settings.APP_NAME} services initialized")

    async def cleanup(self) -> None:
        """Drain click workers and dispose the engine."""
        if not self._initialized:
            return
        await self.clicks.stop()
        await close_db(self.engine)
        self._initialized = False


# ============================================================================
# REQUEST CONTEXT
# ============================================================================


@dataclass
class RequestContext:
    """Per-request tracking data used for logging.

    Attributes:
        request_id: Unique identifier for this request
        client_ip: Client IP address
        user_agent: Client user agent string
        start_time: Request start timestamp
    """

    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    client_ip: Optional[str] = None
    user_agent: Optional[str] = None
    start_time: float = field(default_factory=time.time)

    def get_duration(self) -> float:
        """Get request duration in milliseconds."""
        return (time.time() - self.start_time) * 1000


# ============================================================================
# DEPENDENCY FUNCTIONS
# ============================================================================


async def get_service_manager(request: Request) -> ServiceManager:
    manager: ServiceManager = request.app.state.services
    if not manager.initialized:
        await manager.initialize()
    return manager


def get_request_context(request: Request) -> RequestContext:
    return RequestContext(
        request_id=request.headers.get("x-request-id") or str(uuid.uuid4()),
        client_ip=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


def get_store(manager: ServiceManager = Depends(get_service_manager)) -> UrlStore:
    return manager.store


def get_allocator(manager: ServiceManager = Depends(get_service_manager)) -> SlugAllocator:
    return manager.allocator


def get_resolver(manager: ServiceManager = Depends(get_service_manager)) -> Resolver:
    return manager.resolver


def get_oauth(manager: ServiceManager = Depends(get_service_manager)) -> DiscordOAuth:
    return manager.oauth


def get_current_user(request: Request) -> DiscordUser:
    user = decode_session(request.cookies.get(SESSION_COOKIE))
    if user is None:
        raise UnauthorizedError()
    return user
