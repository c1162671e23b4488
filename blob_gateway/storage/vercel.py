"""Vercel Blob store implementation.

Talks to the Vercel Blob REST API with httpx, authenticating every call
with a bearer token.

Examples:
    >>> from blob_gateway.storage.vercel import VercelBlobStore
    >>> store = VercelBlobStore(token="vercel_blob_rw_...")
    >>> blob = await store.put("report.pdf", b"%PDF-1.7 ...")
    >>> blob.url
    'https://....public.blob.vercel-storage.com/report.pdf'

Tests:
    - tests/unit/test_storage/test_vercel.py::TestPut
    - tests/unit/test_storage/test_vercel.py::TestList
    - tests/unit/test_storage/test_vercel.py::TestDelete
    - tests/unit/test_storage/test_vercel.py::TestErrorMapping
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from blob_gateway.config import DEFAULT_BLOB_API_URL
from blob_gateway.storage.base import (
    BlobContent,
    BlobMetadata,
    BlobStore,
    DeleteResult,
    ListBlobsResult,
)
from blob_gateway.storage.errors import (
    BlobCredentialError,
    BlobNotFoundError,
    BlobRateLimitError,
    BlobStoreError,
)

logger = logging.getLogger(__name__)

NO_TOKEN_MESSAGE = (
    "No token found. Either configure the `BLOB_READ_WRITE_TOKEN` "
    "environment variable, or pass a `token` option to your calls."
)


class VercelBlobStore(BlobStore):
    """Blob store backed by the Vercel Blob API.

    Attributes:
        token: Default bearer token, used when a call passes none
        base_url: API base URL
        api_version: Value sent in the x-api-version header
        timeout: Request timeout in seconds
    """

    name = "vercel"

    def __init__(
        self,
        token: str | None = None,
        base_url: str = DEFAULT_BLOB_API_URL,
        api_version: str = "7",
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            token: Default bearer token.
            base_url: API base URL.
            api_version: API version header value.
            timeout: Request timeout in seconds.
            transport: Custom httpx transport (tests).
        """
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get httpx async client (lazy initialization)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                headers={"x-api-version": self.api_version},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def _auth_headers(self, token: str | None) -> dict[str, str]:
        token = token or self.token
        if not token:
            raise BlobCredentialError(NO_TOKEN_MESSAGE)
        return {"authorization": f"Bearer {token}"}

    def _handle_error(self, response: httpx.Response) -> None:
        """Convert HTTP errors to blob store errors.

        Args:
            response: The HTTP response.

        Raises:
            BlobCredentialError: For 401 and 403 errors.
            BlobNotFoundError: For 404 errors.
            BlobRateLimitError: For 429 errors.
            BlobStoreError: For other errors.
        """
        try:
            error_data = response.json()
            message = error_data.get("error", {}).get("message") or response.text
        except Exception:
            message = response.text
        message = message or f"Blob store returned HTTP {response.status_code}"

        if response.status_code in (401, 403):
            raise BlobCredentialError(
                f"Access denied, please provide a valid token for this resource: {message}",
                status_code=response.status_code,
            )
        elif response.status_code == 404:
            raise BlobNotFoundError(message)
        elif response.status_code == 429:
            retry_after = response.headers.get("retry-after")
            raise BlobRateLimitError(
                message,
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
            )
        raise BlobStoreError(message, status_code=response.status_code)

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"[BLOB] {method} {url} failed: {e}")
            raise BlobStoreError(f"Request to blob store failed: {e}") from e

        if not response.is_success:
            self._handle_error(response)
        return response

    async def put(
        self,
        pathname: str,
        content: BlobContent,
        *,
        access: str = "public",
        content_type: str | None = None,
        token: str | None = None,
    ) -> BlobMetadata:
        """Upload content to Vercel Blob.

        Raises:
            BlobStoreError: If the pathname is empty, access is not public,
                or the API call fails.
        """
        if not pathname:
            raise BlobStoreError("pathname is required")
        if access != "public":
            raise BlobStoreError('access must be "public"')

        headers = self._auth_headers(token)
        headers["x-vercel-blob-access"] = access
        if content_type:
            headers["x-content-type"] = content_type

        logger.info(f"[BLOB] Uploading {pathname}")
        response = await self._request(
            "PUT",
            "/",
            params={"pathname": pathname},
            headers=headers,
            content=content,
        )
        return BlobMetadata.model_validate(response.json())

    async def list(self, *, token: str | None = None) -> ListBlobsResult:
        """List blobs (first page only)."""
        response = await self._request("GET", "/", headers=self._auth_headers(token))
        return ListBlobsResult.model_validate(response.json())

    async def delete(self, target: str, *, token: str | None = None) -> DeleteResult:
        """Delete a blob by URL or pathname."""
        logger.info(f"[BLOB] Deleting {target}")
        response = await self._request(
            "POST",
            "/delete",
            headers=self._auth_headers(token),
            json={"urls": [target]},
        )
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text
