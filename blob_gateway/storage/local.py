"""Local filesystem blob store using pathlib.

Stands in for Vercel Blob during development. Blobs are written under a
root directory and addressed by URLs under PUBLIC_BASE_URL/blobs, which
the application serves when this backend is active.
"""

from __future__ import annotations

import logging
import mimetypes
from datetime import datetime, timezone
from pathlib import Path

from blob_gateway.storage.base import (
    BlobContent,
    BlobMetadata,
    BlobStore,
    DeleteResult,
    ListBlobsResult,
)
from blob_gateway.storage.errors import BlobStoreError

logger = logging.getLogger(__name__)

LOCAL_BLOB_MOUNT = "/blobs"


class LocalBlobStore(BlobStore):
    """Pathlib-based local filesystem blob store."""

    name = "local"

    def __init__(self, root: str, public_base_url: str = "http://localhost:3000") -> None:
        self.root = Path(root)
        self.url_prefix = f"{public_base_url.rstrip('/')}{LOCAL_BLOB_MOUNT}/"

    def _resolve(self, pathname: str) -> Path:
        """Map a pathname to a file under root, refusing escapes."""
        root = self.root.resolve()
        path = (root / pathname.lstrip("/")).resolve()
        if path == root or root not in path.parents:
            raise BlobStoreError(f"Invalid pathname: {pathname}")
        return path

    def _metadata(self, path: Path) -> BlobMetadata:
        pathname = path.relative_to(self.root.resolve()).as_posix()
        stat = path.stat()
        uploaded_at = datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)
        return BlobMetadata(
            url=f"{self.url_prefix}{pathname}",
            downloadUrl=f"{self.url_prefix}{pathname}?download=1",
            pathname=pathname,
            size=stat.st_size,
            contentType=mimetypes.guess_type(pathname)[0] or "application/octet-stream",
            uploadedAt=uploaded_at.isoformat().replace("+00:00", "Z"),
        )

    async def put(
        self,
        pathname: str,
        content: BlobContent,
        *,
        access: str = "public",
        content_type: str | None = None,
        token: str | None = None,
    ) -> BlobMetadata:
        """Write content to a local file, overwriting any previous blob."""
        if not pathname:
            raise BlobStoreError("pathname is required")
        if access != "public":
            raise BlobStoreError('access must be "public"')

        path = self._resolve(pathname)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as f:
            if isinstance(content, bytes):
                f.write(content)
            else:
                async for chunk in content:
                    f.write(chunk)

        logger.info(f"Blob written: {path}")
        return self._metadata(path)

    async def list(self, *, token: str | None = None) -> ListBlobsResult:
        """List every file under root, ordered by pathname."""
        if not self.root.exists():
            return ListBlobsResult()
        blobs = [self._metadata(p.resolve()) for p in self.root.rglob("*") if p.is_file()]
        return ListBlobsResult(blobs=sorted(blobs, key=lambda b: b.pathname))

    async def delete(self, target: str, *, token: str | None = None) -> DeleteResult:
        """Delete a local file by URL or pathname. Missing files are ignored."""
        pathname = target
        if target.startswith(self.url_prefix):
            pathname = target[len(self.url_prefix):].split("?", 1)[0]

        path = self._resolve(pathname)
        if path.is_file():
            path.unlink()
            logger.info(f"Blob deleted: {path}")
        return None
