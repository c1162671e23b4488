"""Blob store factory."""

from __future__ import annotations

from blob_gateway.config import BlobBackend, Settings
from blob_gateway.storage.base import BlobStore
from blob_gateway.storage.local import LocalBlobStore
from blob_gateway.storage.vercel import VercelBlobStore


def create_blob_store(settings: Settings) -> BlobStore:
    """Create the blob store selected by settings.BLOB_BACKEND."""
    if settings.BLOB_BACKEND == BlobBackend.LOCAL:
        return LocalBlobStore(
            root=settings.LOCAL_BLOB_ROOT,
            public_base_url=settings.PUBLIC_BASE_URL,
        )
    return VercelBlobStore(
        token=settings.BLOB_READ_WRITE_TOKEN,
        base_url=settings.VERCEL_BLOB_API_URL,
        api_version=settings.BLOB_API_VERSION,
        timeout=settings.BLOB_TIMEOUT,
    )
