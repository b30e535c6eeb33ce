"""Shorten endpoint behavior tests."""

import pytest
from httpx import AsyncClient

from shortlink.dependencies import ServiceManager
from shortlink.slug import SLUG_ALPHABET


@pytest.mark.asyncio
async def test_shorten_valid_url(client: AsyncClient) -> None:
    response = await client.post("/shorten", json={"url": "https://www.google.com"})
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["original_url"] == "https://www.google.com"
    assert len(data["slug"]) == 6
    assert all(c in SLUG_ALPHABET for c in data["slug"])
    assert data["short_url"] == f"http://short.test/{data['slug']}"
    assert data["expires_at"] is None


@pytest.mark.asyncio
async def test_shorten_accepts_any_non_empty_url(client: AsyncClient) -> None:
    response = await client.post("/shorten", json={"url": "not-a-url"})
    assert response.status_code == 200
    assert response.json()["original_url"] == "not-a-url"


@pytest.mark.asyncio
async def test_shorten_empty_url(client: AsyncClient) -> None:
    response = await client.post("/shorten", json={"url": ""})
    assert response.status_code == 400
    assert response.json() == {"error": "URL is required"}


@pytest.mark.asyncio
async def test_shorten_whitespace_url(client: AsyncClient) -> None:
    response = await client.post("/shorten", json={"url": "  \t "})
    assert response.status_code == 400
    assert response.json() == {"error": "URL is required"}


@pytest.mark.asyncio
async def test_shorten_missing_url(client: AsyncClient) -> None:
    response = await client.post("/shorten", json={})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_shorten_with_custom_slug(client: AsyncClient, manager: ServiceManager) -> None:
    response = await client.post(
        "/shorten",
        json={"url": "https://www.github.com", "customSlug": "  mycode  "},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["slug"] == "mycode"
    assert data["short_url"] == "http://short.test/mycode"

    record = await manager.store.get_by_slug("mycode")
    assert record is not None
    assert record.original_url == "https://www.github.com"


@pytest.mark.asyncio
async def test_shorten_blank_custom_slug_generates_one(client: AsyncClient) -> None:
    response = await client.post("/shorten", json={"url": "https://www.github.com", "customSlug": "   "})
    assert response.status_code == 200
    assert len(response.json()["slug"]) == 6


@pytest.mark.asyncio
async def test_shorten_duplicate_custom_slug(client: AsyncClient, manager: ServiceManager) -> None:
    first = await client.post("/shorten", json={"url": "https://www.github.com", "customSlug": "taken1"})
    assert first.status_code == 200

    response = await client.post("/shorten", json={"url": "https://www.example.com", "customSlug": "taken1"})
    assert response.status_code == 409
    assert response.json() == {"error": "Slug already exists"}

    record = await manager.store.get_by_slug("taken1")
    assert record.original_url == "https://www.github.com"


@pytest.mark.asyncio
async def test_shorten_echoes_expiry(client: AsyncClient) -> None:
    response = await client.post(
        "/shorten",
        json={"url": "https://www.python.org", "expiresAt": "2030-01-01T00:00:00.000Z"},
    )
    assert response.status_code == 200
    assert response.json()["expires_at"] == "2030-01-01T00:00:00.000Z"


@pytest.mark.asyncio
async def test_shorten_multiple_urls(client: AsyncClient) -> None:
    urls = [
        "https://www.google.com",
        "https://www.github.com",
        "https://www.python.org",
    ]
    slugs = set()
    for url in urls:
        response = await client.post("/shorten", json={"url": url})
        assert response.status_code == 200
        slugs.add(response.json()["slug"])
    assert len(slugs) == 3
