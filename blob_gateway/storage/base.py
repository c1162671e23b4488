"""Abstract base class and value types for blob stores."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterable
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

# Upload bodies are streamed; plain bytes are accepted for convenience.
BlobContent = Union[bytes, AsyncIterable[bytes]]

# Whatever the store answered for a delete call (None for an empty body).
DeleteResult = Any


class BlobMetadata(BaseModel):
    """Metadata of a stored blob, as returned by the store.

    Field names follow the store's wire format (camelCase aliases) and any
    field the store adds is kept, so to_wire() hands back exactly what the
    store sent.

    Attributes:
        url: Public URL of the blob
        pathname: Pathname of the blob inside the store
        download_url: URL forcing a download (if provided)
        size: Size in bytes (if provided)
        content_type: MIME type (if provided)
        content_disposition: Content-Disposition header value (if provided)
        uploaded_at: Upload timestamp as sent by the store (if provided)
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    url: str
    pathname: str
    download_url: str | None = Field(default=None, alias="downloadUrl")
    size: int | None = None
    content_type: str | None = Field(default=None, alias="contentType")
    content_disposition: str | None = Field(default=None, alias="contentDisposition")
    uploaded_at: str | None = Field(default=None, alias="uploadedAt")

    def to_wire(self) -> dict[str, Any]:
        """Serialize with the store's field names and only the fields it sent."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class ListBlobsResult(BaseModel):
    """One page of a blob listing."""

    model_config = ConfigDict(populate_by_name=True)

    blobs: list[BlobMetadata] = Field(default_factory=list)
    cursor: str | None = None
    has_more: bool = Field(default=False, alias="hasMore")


class BlobStore(ABC):
    """Abstract blob store offering put, list and delete.

    Implementations raise BlobStoreError (see blob_gateway.storage.errors)
    for every upstream fault.
    """

    name: str = "blob"

    @abstractmethod
    async def put(
        self,
        pathname: str,
        content: BlobContent,
        *,
        access: str = "public",
        content_type: str | None = None,
        token: str | None = None,
    ) -> BlobMetadata:
        """Upload content under pathname.

        Args:
            pathname: Target pathname.
            content: Raw bytes or an async byte stream.
            access: Access level; only "public" is supported.
            content_type: MIME type to record (optional).
            token: Bearer token overriding the store default (optional).

        Returns:
            Metadata of the stored blob.
        """

    @abstractmethod
    async def list(self, *, token: str | None = None) -> ListBlobsResult:
        """List blobs in a single unfiltered call.

        Args:
            token: Bearer token overriding the store default (optional).
        """

    @abstractmethod
    async def delete(self, target: str, *, token: str | None = None) -> DeleteResult:
        """Delete a blob by URL or pathname.

        Args:
            target: Blob URL or pathname.
            token: Bearer token overriding the store default (optional).

        Returns:
            The store's answer, or None if it sent no body.
        """

    async def close(self) -> None:
        """Release any held resources."""
