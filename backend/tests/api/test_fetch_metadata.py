"""Tests for the metadata preview endpoint."""
from unittest.mock import AsyncMock, patch

from httpx import AsyncClient

from services.url_scraper import ResolvedMetadata


async def test_fetch_metadata_returns_resolved_fields(client: AsyncClient) -> None:
    resolved = ResolvedMetadata(
        title="Never Gonna Give You Up",
        description="Official video",
        preview_image_url="https://i.ytimg.com/vi/dQw4w9WgXcQ/hq.jpg",
        icon_url="https://www.youtube.com/favicon.ico",
        media_type="youtube",
        media_embed_id="dQw4w9WgXcQ",
    )
    with patch(
        "api.routers.metadata.resolve_metadata",
        new_callable=AsyncMock,
        return_value=resolved,
    ) as mock_resolve:
        response = await client.post(
            "/fetch-metadata",
            json={"url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ"},
        )

    assert response.status_code == 200
    assert response.json() == {
        "title": "Never Gonna Give You Up",
        "description": "Official video",
        "og_image_url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hq.jpg",
        "favicon_url": "https://www.youtube.com/favicon.ico",
        "media_type": "youtube",
        "media_embed_id": "dQw4w9WgXcQ",
    }
    mock_resolve.assert_awaited_once_with(
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ", timeout=10.0,
    )


async def test_fetch_metadata_unresolvable_url_returns_empty_fields(client: AsyncClient) -> None:
    """Invalid URLs are not an error; every field comes back empty."""
    response = await client.post("/fetch-metadata", json={"url": "not a url"})

    assert response.status_code == 200
    assert response.json() == {
        "title": "",
        "description": "",
        "og_image_url": None,
        "favicon_url": None,
        "media_type": "default",
        "media_embed_id": "",
    }


async def test_fetch_metadata_does_not_store_anything(client: AsyncClient) -> None:
    with patch(
        "api.routers.metadata.resolve_metadata",
        new_callable=AsyncMock,
        return_value=ResolvedMetadata(title="Preview only"),
    ):
        await client.post("/fetch-metadata", json={"url": "https://example.com"})

    response = await client.get("/bookmarks")
    assert response.json() == []


async def test_fetch_metadata_missing_url_returns_422(client: AsyncClient) -> None:
    response = await client.post("/fetch-metadata", json={})
    assert response.status_code == 422
