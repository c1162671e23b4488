"""
Pytest configuration and fixtures for Blob Gateway tests.

Tests run against an in-process FastAPI app wired to FakeBlobStore, a
recording BlobStore that never touches the network.
"""
from __future__ import annotations

from typing import Any, Generator

import pytest
from fastapi.testclient import TestClient

from blob_gateway.config import Settings
from blob_gateway.main import create_app
from blob_gateway.storage.base import BlobContent, BlobMetadata, BlobStore, ListBlobsResult

TEST_TOKEN = "vercel_blob_rw_test_token"


class FakeBlobStore(BlobStore):
    """In-memory BlobStore that records every call.

    Set put_error/list_error/delete_error to make the next calls fail.
    """

    name = "fake"

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.uploaded: dict[str, bytes] = {}
        self.put_response: dict[str, Any] | None = None
        self.list_response: ListBlobsResult = ListBlobsResult()
        self.delete_response: Any = None
        self.put_error: Exception | None = None
        self.list_error: Exception | None = None
        self.delete_error: Exception | None = None
        self.closed = False

    async def put(
        self,
        pathname: str,
        content: BlobContent,
        *,
        access: str = "public",
        content_type: str | None = None,
        token: str | None = None,
    ) -> BlobMetadata:
        if isinstance(content, bytes):
            data = content
        else:
            data = b"".join([chunk async for chunk in content])
        self.calls.append(
            ("put", {"pathname": pathname, "access": access, "token": token, "data": data})
        )
        if self.put_error:
            raise self.put_error
        self.uploaded[pathname] = data
        payload = self.put_response or {
            "url": f"https://store.public.blob.vercel-storage.com/{pathname}",
            "downloadUrl": f"https://store.public.blob.vercel-storage.com/{pathname}?download=1",
            "pathname": pathname,
            "contentType": "application/octet-stream",
            "contentDisposition": f'inline; filename="{pathname}"',
        }
        return BlobMetadata.model_validate(payload)

    async def list(self, *, token: str | None = None) -> ListBlobsResult:
        self.calls.append(("list", {"token": token}))
        if self.list_error:
            raise self.list_error
        return self.list_response

    async def delete(self, target: str, *, token: str | None = None) -> Any:
        self.calls.append(("delete", {"target": target, "token": token}))
        if self.delete_error:
            raise self.delete_error
        return self.delete_response

    async def close(self) -> None:
        self.closed = True

    def calls_to(self, method: str) -> list[dict[str, Any]]:
        """Arguments of every recorded call to method."""
        return [args for name, args in self.calls if name == method]


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings with a token and an empty static directory."""
    static_dir = tmp_path / "public"
    static_dir.mkdir()
    (static_dir / "index.html").write_text("<h1>Blob Gateway</h1>", encoding="utf-8")
    return Settings(
        BLOB_READ_WRITE_TOKEN=TEST_TOKEN,
        STATIC_DIR=str(static_dir),
        MAX_BODY_BYTES=1024,
    )


@pytest.fixture
def fake_store() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture
def client(test_settings: Settings, fake_store: FakeBlobStore) -> Generator[TestClient, None, None]:
    """Test client for an app wired to the fake store."""
    app = create_app(settings=test_settings, store=fake_store)
    with TestClient(app) as test_client:
        yield test_client


# ============================================
# Pytest Configuration
# ============================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "fast: Fast unit tests (no external API calls)"
    )
