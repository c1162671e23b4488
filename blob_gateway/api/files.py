"""File API endpoints.

Upload, list and delete files on the configured blob store.

Endpoints:
    POST /api/upload - Upload the raw request body (name in x-vercel-filename)
    GET /api/files - List stored blobs
    POST /api/delete - Delete by JSON/form body field (url or pathname)
    DELETE /api/delete - Delete by query parameter (pathname, path or url)

Examples:
    >>> # Upload a file
    >>> curl -X POST -H "x-vercel-filename: photo.png" \\
    ...      --data-binary @photo.png http://localhost:3000/api/upload
    >>>
    >>> # Delete it again
    >>> curl -X DELETE "http://localhost:3000/api/delete?pathname=photo.png"

Tests:
    - tests/unit/test_api_files.py::TestUploadEndpoint
    - tests/unit/test_api_files.py::TestListEndpoint
    - tests/unit/test_api_delete.py::TestBodyDelete
    - tests/unit/test_api_delete.py::TestQueryDelete
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse

from blob_gateway.config import Settings
from blob_gateway.storage.base import BlobStore
from blob_gateway.storage.errors import ErrorKind

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["files"])

FILENAME_HEADER = "x-vercel-filename"

MISSING_FILENAME_MESSAGE = (
    "O nome do arquivo é obrigatório no cabeçalho x-vercel-filename."
)
UPLOAD_FAILED_MESSAGE = "Erro ao fazer upload do arquivo."
LIST_FAILED_MESSAGE = "Erro ao buscar a lista de arquivos."
MISSING_BODY_TARGET_MESSAGE = "Informe pathname ou url"
MISSING_QUERY_TARGET_MESSAGE = 'Query "pathname" obrigatória.'
DELETED_MESSAGE = "Excluído com sucesso"
DELETE_FAILED_MESSAGE = "Erro ao excluir o arquivo."
CREDENTIALS_HINT_MESSAGE = (
    "Erro ao excluir. Verifique se a variável de ambiente BLOB_READ_WRITE_TOKEN "
    "está configurada com permissões de escrita."
)


class DeleteEnvelope(str, Enum):
    """Response shape of a delete call.

    - BODY: {success, result} / {success: false, error}
    - QUERY: {message, result} / {message, error}
    """

    BODY = "body"
    QUERY = "query"


# Dependencies


def get_blob_store(request: Request) -> BlobStore:
    """Blob store attached to the application at startup."""
    return request.app.state.blob_store


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


# Helper Functions


def is_credential_error(exc: Exception) -> bool:
    """Check whether a store failure is a token/permission problem.

    Uses the structured error kind when the store provides one; errors
    without it are matched on "token" in their message.
    """
    if getattr(exc, "kind", None) == ErrorKind.CREDENTIALS:
        return True
    return "token" in str(exc)


def _error_body(message: str, exc: Exception) -> dict[str, Any]:
    return {"message": message, "error": str(exc)}


async def _read_delete_body(request: Request) -> dict[str, Any]:
    """Parse a JSON or form body; anything else counts as empty."""
    content_type = request.headers.get("content-type", "").lower()

    if content_type.startswith(
        ("application/x-www-form-urlencoded", "multipart/form-data")
    ):
        form = await request.form()
        return {k: v for k, v in form.items() if isinstance(v, str)}

    if "json" in content_type:
        raw = await request.body()
        try:
            data = json.loads(raw) if raw else {}
        except ValueError:
            logger.warning("Ignoring malformed JSON body on delete")
            return {}
        return data if isinstance(data, dict) else {}

    return {}


def _first_present(*values: Any) -> str | None:
    """Return the first non-empty string value."""
    for value in values:
        if isinstance(value, str) and value:
            return value
    return None


async def _delete_blob(
    store: BlobStore,
    target: str,
    token: str | None,
    envelope: DeleteEnvelope,
) -> JSONResponse:
    """Delete target and shape the response for the calling entry point."""
    try:
        result = await store.delete(target, token=token)
    except Exception as e:
        logger.error(f"Delete failed for {target} ({envelope.value}): {e}", exc_info=True)
        if envelope == DeleteEnvelope.BODY:
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"success": False, "error": str(e)},
            )
        message = (
            CREDENTIALS_HINT_MESSAGE if is_credential_error(e) else DELETE_FAILED_MESSAGE
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(message, e),
        )

    if envelope == DeleteEnvelope.BODY:
        return JSONResponse(content={"success": True, "result": result})
    return JSONResponse(content={"message": DELETED_MESSAGE, "result": result})


# Endpoints


@router.post("/upload")
async def upload_file(
    request: Request,
    store: BlobStore = Depends(get_blob_store),
) -> JSONResponse:
    """Upload the raw request body as a public blob.

    The body is streamed to the store as it arrives; nothing is buffered
    or validated here.

    Returns:
        The blob metadata exactly as returned by the store.
    """
    filename = request.headers.get(FILENAME_HEADER)
    if not filename:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": MISSING_FILENAME_MESSAGE},
        )

    try:
        blob = await store.put(filename, request.stream(), access="public")
    except Exception as e:
        logger.error(f"Upload failed for {filename}: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(UPLOAD_FAILED_MESSAGE, e),
        )

    logger.info(f"Uploaded {filename} -> {blob.url}")
    return JSONResponse(content=blob.to_wire())


@router.get("/files")
async def list_files(store: BlobStore = Depends(get_blob_store)) -> JSONResponse:
    """List stored blobs as a bare JSON array."""
    try:
        result = await store.list()
    except Exception as e:
        logger.error(f"Listing blobs failed: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(LIST_FAILED_MESSAGE, e),
        )

    return JSONResponse(content=[blob.to_wire() for blob in result.blobs])


@router.post("/delete")
async def delete_file_by_body(
    request: Request,
    store: BlobStore = Depends(get_blob_store),
    settings: Settings = Depends(get_app_settings),
) -> JSONResponse:
    """Delete a blob named in the request body.

    Accepts JSON or urlencoded/multipart form bodies with `url` and/or
    `pathname`; `url` wins when both are given.
    """
    body = await _read_delete_body(request)
    target = _first_present(body.get("url"), body.get("pathname"))
    if target is None:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": MISSING_BODY_TARGET_MESSAGE},
        )

    return await _delete_blob(
        store, target, settings.BLOB_READ_WRITE_TOKEN, DeleteEnvelope.BODY
    )


@router.delete("/delete")
async def delete_file_by_query(
    pathname: str | None = Query(default=None, description="Blob pathname"),
    path: str | None = Query(default=None, description="Alias of pathname"),
    url: str | None = Query(default=None, description="Blob URL"),
    store: BlobStore = Depends(get_blob_store),
    settings: Settings = Depends(get_app_settings),
) -> JSONResponse:
    """Delete a blob named in the query string.

    The first non-empty of `pathname`, `path` and `url` is used.
    """
    target = _first_present(pathname, path, url)
    if target is None:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": MISSING_QUERY_TARGET_MESSAGE},
        )

    return await _delete_blob(
        store, target, settings.BLOB_READ_WRITE_TOKEN, DeleteEnvelope.QUERY
    )
