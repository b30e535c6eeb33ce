"""Unit tests for the slug allocator against a mocked store."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from shortlink.allocator import SlugAllocator
from shortlink.errors import (
    AllocationExhaustedError,
    InvalidRequestError,
    SlugConflictError,
    SlugTakenError,
    StoreError,
)
from shortlink.models import UrlRecord
from shortlink.slug import SlugGenerator
from shortlink.store import UrlStore

# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def mock_store() -> AsyncMock:
    store = AsyncMock(spec=UrlStore)
    store.insert = AsyncMock(
        side_effect=lambda slug, url, expires_at=None: UrlRecord(
            id=1, slug=slug, original_url=url, clicks=0, expires_at=expires_at
        )
    )
    return store


@pytest.fixture
def generator() -> MagicMock:
    candidates = iter(["aaaaaa", "bbbbbb", "cccccc", "dddddd", "eeeeee", "ffffff"])
    mock = MagicMock(spec=SlugGenerator)
    mock.side_effect = lambda: next(candidates)
    return mock


@pytest.fixture
def allocator(mock_store: AsyncMock, generator: MagicMock) -> SlugAllocator:
    return SlugAllocator(mock_store, base_url="https://sho.rt", generator=generator)


# ============================================================================
# GENERATED SLUGS
# ============================================================================


@pytest.mark.asyncio
async def test_allocate_generated_slug(allocator: SlugAllocator, mock_store: AsyncMock) -> None:
    result = await allocator.allocate("https://example.com")

    assert result.slug == "aaaaaa"
    assert result.short_url == "https://sho.rt/aaaaaa"
    assert result.original_url == "https://example.com"
    assert result.expires_at is None
    mock_store.insert.assert_awaited_once_with("aaaaaa", "https://example.com", None)


@pytest.mark.asyncio
async def test_allocate_retries_after_collision(allocator: SlugAllocator, mock_store: AsyncMock) -> None:
    mock_store.insert.side_effect = [SlugTakenError("aaaaaa"), SlugTakenError("bbbbbb"), None]

    result = await allocator.allocate("https://example.com", expires_at="2030-01-01T00:00:00Z")

    assert result.slug == "cccccc"
    assert result.expires_at == "2030-01-01T00:00:00Z"
    assert mock_store.insert.await_count == 3


@pytest.mark.asyncio
async def test_allocate_gives_up_after_five_attempts(
    allocator: SlugAllocator, mock_store: AsyncMock, generator: MagicMock
) -> None:
    mock_store.insert.side_effect = SlugTakenError("taken")

    with pytest.raises(AllocationExhaustedError):
        await allocator.allocate("https://example.com")

    assert mock_store.insert.await_count == 5
    assert generator.call_count == 5


@pytest.mark.asyncio
async def test_allocate_respects_configured_attempts(mock_store: AsyncMock, generator: MagicMock) -> None:
    allocator = SlugAllocator(mock_store, base_url="https://sho.rt", generator=generator, max_attempts=2)
    mock_store.insert.side_effect = SlugTakenError("taken")

    with pytest.raises(AllocationExhaustedError):
        await allocator.allocate("https://example.com")
    assert mock_store.insert.await_count == 2


@pytest.mark.asyncio
async def test_allocate_store_error_is_not_retried(allocator: SlugAllocator, mock_store: AsyncMock) -> None:
    mock_store.insert.side_effect = StoreError()

    with pytest.raises(StoreError):
        await allocator.allocate("https://example.com")
    assert mock_store.insert.await_count == 1


@pytest.mark.asyncio
async def test_allocate_never_checks_existence_first(allocator: SlugAllocator, mock_store: AsyncMock) -> None:
    await allocator.allocate("https://example.com")
    mock_store.get_by_slug.assert_not_called()


def test_allocator_rejects_zero_attempts(mock_store: AsyncMock) -> None:
    with pytest.raises(ValueError):
        SlugAllocator(mock_store, base_url="https://sho.rt", max_attempts=0)


# ============================================================================
# CUSTOM SLUGS
# ============================================================================


@pytest.mark.asyncio
async def test_allocate_custom_slug_trimmed(
    allocator: SlugAllocator, mock_store: AsyncMock, generator: MagicMock
) -> None:
    result = await allocator.allocate("https://example.com", custom_slug="  promo ")

    assert result.slug == "promo"
    assert result.short_url == "https://sho.rt/promo"
    mock_store.insert.assert_awaited_once_with("promo", "https://example.com", None)
    generator.assert_not_called()


@pytest.mark.asyncio
async def test_allocate_custom_slug_conflict_not_retried(
    allocator: SlugAllocator, mock_store: AsyncMock, generator: MagicMock
) -> None:
    mock_store.insert.side_effect = SlugTakenError("promo")

    with pytest.raises(SlugConflictError):
        await allocator.allocate("https://example.com", custom_slug="promo")

    assert mock_store.insert.await_count == 1
    generator.assert_not_called()


@pytest.mark.asyncio
async def test_allocate_blank_custom_slug_falls_back_to_generated(
    allocator: SlugAllocator, mock_store: AsyncMock
) -> None:
    result = await allocator.allocate("https://example.com", custom_slug="   ")
    assert result.slug == "aaaaaa"


# ============================================================================
# VALIDATION
# ============================================================================


@pytest.mark.asyncio
@pytest.mark.parametrize("url", ["", "   "])
async def test_allocate_rejects_empty_url(allocator: SlugAllocator, mock_store: AsyncMock, url: str) -> None:
    with pytest.raises(InvalidRequestError):
        await allocator.allocate(url)
    mock_store.insert.assert_not_called()


@pytest.mark.asyncio
async def test_allocate_keeps_url_opaque(allocator: SlugAllocator) -> None:
    result = await allocator.allocate("javascript:alert(1)")
    assert result.original_url == "javascript:alert(1)"
