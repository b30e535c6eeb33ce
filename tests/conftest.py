"""Shared pytest fixtures for store, service and API tests."""

from collections.abc import AsyncGenerator, Callable
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from shortlink.config import Settings
from shortlink.database import close_db, create_engine, create_session_factory, init_db
from shortlink.dependencies import ServiceManager
from shortlink.main import app
from shortlink.schemas import DiscordUser
from shortlink.session import SESSION_COOKIE, encode_session
from shortlink.slug import SlugGenerator
from shortlink.store import UrlStore


def _fixed_bytes(*fills: int) -> Callable[[int], bytes]:
    """Random-byte provider that returns each fill repeated, one fill per call.

    With the 62-symbol alphabet, fill 0 yields "aaaaaa", fill 1 "bbbbbb", and
    so on. The last fill repeats once the sequence is exhausted.
    """
    calls = {"count": 0}

    def provider(size: int) -> bytes:
        index = min(calls["count"], len(fills) - 1)
        calls["count"] += 1
        return bytes([fills[index]] * size)

    return provider


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        APP_ENV="test",
        BASE_URL="http://short.test",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'urls.sqlite'}",
        STATIC_DIR=str(tmp_path / "dist"),
        CLICK_WORKERS=2,
        CLICK_QUEUE_SIZE=100,
    )


@pytest_asyncio.fixture
async def store(settings: Settings) -> AsyncGenerator[UrlStore, None]:
    engine = create_engine(settings.DATABASE_URL)
    await init_db(engine)
    yield UrlStore(create_session_factory(engine))
    await close_db(engine)


@pytest.fixture
def slug_generator() -> SlugGenerator | None:
    """Override in a test module to make generated slugs deterministic."""
    return None


@pytest_asyncio.fixture
async def manager(settings: Settings, slug_generator: SlugGenerator | None) -> AsyncGenerator[ServiceManager, None]:
    services = ServiceManager(settings, slug_generator=slug_generator)
    await services.initialize()
    yield services
    await services.cleanup()


@pytest_asyncio.fixture
async def client(manager: ServiceManager) -> AsyncGenerator[AsyncClient, None]:
    previous = app.state.services
    app.state.services = manager

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.state.services = previous


@pytest.fixture
def admin_user() -> DiscordUser:
    return DiscordUser(id="1234", username="admin", avatar=None)


@pytest.fixture
def admin_headers(admin_user: DiscordUser) -> dict[str, str]:
    return {"Cookie": f"{SESSION_COOKIE}={encode_session(admin_user)}"}


@pytest.fixture
def fixed_bytes() -> Callable[..., Callable[[int], bytes]]:
    return _fixed_bytes
