"""Tests for Media API endpoints.

Tests the /api/v1/media endpoints:
- Registering external files and listing with MIME filters
- Multipart uploads to object storage (mocked)
- Empty, oversized and unconfigured-storage uploads
- Deletion removing the stored object and clearing references
"""

import logging
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import AsyncClient

from fastpress.core.config import get_settings
from fastpress.integrations.storage import StorageClient, get_storage


async def _register(
    client: AsyncClient, headers: dict[str, str], **overrides: Any
) -> dict[str, Any]:
    payload = {
        "filename": "photo.jpg",
        "url": "https://old.example.com/photo.jpg",
        "mime_type": "image/jpeg",
        **overrides,
    }
    response = await client.post("/api/v1/media", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestRegisterAndList:
    """Tests for registering and listing media."""

    @pytest.mark.asyncio
    async def test_register(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        data = await _register(async_client, editor_headers)

        assert data["is_image"] is True
        assert data["storage_key"] is None

    @pytest.mark.asyncio
    async def test_register_logs_filename(
        self,
        async_client: AsyncClient,
        editor_headers: dict[str, str],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.INFO, logger="fastpress.services.media"):
            data = await _register(async_client, editor_headers, filename="logo.png")

        (record,) = [r for r in caplog.records if r.getMessage() == "Media registered"]
        assert record.media_id == data["id"]
        assert record.media_filename == "logo.png"

    @pytest.mark.asyncio
    async def test_relative_url_accepted(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        data = await _register(async_client, editor_headers, url="/uploads/a.jpg")

        assert data["url"] == "/uploads/a.jpg"

    @pytest.mark.asyncio
    async def test_invalid_url_is_422(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        response = await async_client.post(
            "/api/v1/media",
            json={"filename": "a.jpg", "url": "ftp://x/a.jpg"},
            headers=editor_headers,
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_list_with_mime_filter(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        await _register(async_client, editor_headers)
        await _register(
            async_client,
            editor_headers,
            filename="doc.pdf",
            url="https://old.example.com/doc.pdf",
            mime_type="application/pdf",
        )

        response = await async_client.get("/api/v1/media", params={"mime_prefix": "image/"})

        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["filename"] == "photo.jpg"
        assert data["has_more"] is False

    @pytest.mark.asyncio
    async def test_subscriber_cannot_register(
        self, async_client: AsyncClient, subscriber_headers: dict[str, str]
    ) -> None:
        response = await async_client.post(
            "/api/v1/media",
            json={"filename": "a.jpg", "url": "https://x/a.jpg"},
            headers=subscriber_headers,
        )

        assert response.status_code == 403


class TestUpload:
    """Tests for POST /api/v1/media/upload."""

    @pytest.mark.asyncio
    async def test_upload(
        self,
        async_client: AsyncClient,
        editor_headers: dict[str, str],
        mock_storage: Any,
    ) -> None:
        response = await async_client.post(
            "/api/v1/media/upload",
            files={"file": ("my photo.png", b"\x89PNG data", "image/png")},
            data={"alt": "Logo"},
            headers=editor_headers,
        )

        assert response.status_code == 201, response.text
        data = response.json()
        key = data["storage_key"]
        assert key.startswith("media/")
        assert key.endswith("/my-photo.png")
        assert data["url"] == f"https://cdn.test/{key}"
        assert data["filename"] == "my-photo.png"
        assert data["filesize"] == 10
        assert data["alt"] == "Logo"
        assert mock_storage.upload_calls == [(key, "image/png")]

    @pytest.mark.asyncio
    async def test_empty_file(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        response = await async_client.post(
            "/api/v1/media/upload",
            files={"file": ("empty.txt", b"", "text/plain")},
            headers=editor_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Uploaded file is empty"

    @pytest.mark.asyncio
    async def test_oversized_file(
        self,
        async_client: AsyncClient,
        editor_headers: dict[str, str],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        small = get_settings().model_copy(update={"media_max_bytes": 4})
        monkeypatch.setattr("fastpress.api.v1.media.get_settings", lambda: small)

        response = await async_client.post(
            "/api/v1/media/upload",
            files={"file": ("big.bin", b"12345", "application/octet-stream")},
            headers=editor_headers,
        )

        assert response.status_code == 413

    @pytest.mark.asyncio
    async def test_storage_not_configured(
        self, app: FastAPI, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        unconfigured = StorageClient(bucket="", access_key="", secret_key="")
        app.dependency_overrides[get_storage] = lambda: unconfigured

        response = await async_client.post(
            "/api/v1/media/upload",
            files={"file": ("a.txt", b"hello", "text/plain")},
            headers=editor_headers,
        )

        assert response.status_code == 503
        assert response.json()["detail"] == "Media storage is not configured"


class TestUpdateAndDelete:
    """Tests for PATCH and DELETE /api/v1/media/{id}."""

    @pytest.mark.asyncio
    async def test_update_focal_point(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        media = await _register(async_client, editor_headers)

        response = await async_client.patch(
            f"/api/v1/media/{media['id']}",
            json={"alt": "New alt", "focal_x": 25, "focal_y": 75},
            headers=editor_headers,
        )

        data = response.json()
        assert data["alt"] == "New alt"
        assert (data["focal_x"], data["focal_y"]) == (25, 75)

    @pytest.mark.asyncio
    async def test_focal_point_out_of_range(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        media = await _register(async_client, editor_headers)

        response = await async_client.patch(
            f"/api/v1/media/{media['id']}", json={"focal_x": 101}, headers=editor_headers
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_delete_removes_object(
        self,
        async_client: AsyncClient,
        editor_headers: dict[str, str],
        mock_storage: Any,
    ) -> None:
        upload = await async_client.post(
            "/api/v1/media/upload",
            files={"file": ("a.txt", b"hello", "text/plain")},
            headers=editor_headers,
        )
        media = upload.json()

        response = await async_client.delete(
            f"/api/v1/media/{media['id']}", headers=editor_headers
        )

        assert response.status_code == 204
        assert mock_storage.delete_calls == [media["storage_key"]]
        assert mock_storage.objects == {}
        assert (await async_client.get(f"/api/v1/media/{media['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_tolerates_missing_object(
        self,
        async_client: AsyncClient,
        editor_headers: dict[str, str],
        mock_storage: Any,
    ) -> None:
        upload = await async_client.post(
            "/api/v1/media/upload",
            files={"file": ("a.txt", b"hello", "text/plain")},
            headers=editor_headers,
        )
        mock_storage.objects.clear()

        response = await async_client.delete(
            f"/api/v1/media/{upload.json()['id']}", headers=editor_headers
        )

        assert response.status_code == 204

    @pytest.mark.asyncio
    async def test_delete_clears_featured_media(
        self, async_client: AsyncClient, editor_headers: dict[str, str]
    ) -> None:
        media = await _register(async_client, editor_headers)
        post = await async_client.post(
            "/api/v1/posts",
            json={"title": "With image", "featured_media_id": media["id"]},
            headers=editor_headers,
        )
        assert post.json()["featured_media_id"] == media["id"]

        await async_client.delete(f"/api/v1/media/{media['id']}", headers=editor_headers)

        refreshed = await async_client.get(
            f"/api/v1/posts/{post.json()['id']}", headers=editor_headers
        )
        assert refreshed.json()["featured_media_id"] is None
