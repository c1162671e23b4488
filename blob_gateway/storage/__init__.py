"""Blob store package for the Blob Gateway.

Provides the BlobStore abstraction, its Vercel Blob and local filesystem
implementations, and the error types they raise.

Examples:
    >>> from blob_gateway.storage import create_blob_store
    >>> store = create_blob_store(settings)
    >>> blob = await store.put("hello.txt", b"hello")
"""

from blob_gateway.storage.base import BlobMetadata, BlobStore, ListBlobsResult
from blob_gateway.storage.errors import (
    BlobCredentialError,
    BlobNotFoundError,
    BlobRateLimitError,
    BlobStoreError,
    ErrorKind,
)
from blob_gateway.storage.factory import create_blob_store
from blob_gateway.storage.local import LocalBlobStore
from blob_gateway.storage.vercel import VercelBlobStore

__all__ = [
    "BlobCredentialError",
    "BlobMetadata",
    "BlobNotFoundError",
    "BlobRateLimitError",
    "BlobStore",
    "BlobStoreError",
    "ErrorKind",
    "ListBlobsResult",
    "LocalBlobStore",
    "VercelBlobStore",
    "create_blob_store",
]
