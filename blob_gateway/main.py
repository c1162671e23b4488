"""FastAPI application for the Blob Gateway.

This module provides the application factory with the file API, health
endpoint, static asset mount and lifecycle management.

Run with:
    blob-gateway serve
    uvicorn blob_gateway.main:app --port 3000

Examples:
    >>> # Health check
    >>> curl http://localhost:3000/health

    >>> # List files
    >>> curl http://localhost:3000/api/files

Tests:
    - tests/unit/test_main.py::TestHealthEndpoint
    - tests/unit/test_main.py::TestStaticFiles
    - tests/unit/test_main.py::TestErrorHandling
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from blob_gateway import __version__
from blob_gateway.api import router as api_router
from blob_gateway.config import BlobBackend, Settings, get_settings
from blob_gateway.middleware import RequestSizeLimitMiddleware
from blob_gateway.storage import BlobStore, create_blob_store
from blob_gateway.storage.local import LOCAL_BLOB_MOUNT

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Upload bodies are streamed to the store and bypass the body size limit.
STREAMED_PATHS = ("/api/upload",)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    backend: str
    token_configured: bool


def create_app(settings: Settings | None = None, store: BlobStore | None = None) -> FastAPI:
    """Create the Blob Gateway application.

    Args:
        settings: Application settings (defaults to get_settings()).
        store: Blob store to use (defaults to the one selected by settings).

    Returns:
        Configured FastAPI application.
    """
    settings = settings or get_settings()
    store = store or create_blob_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager.

        Logs startup and closes the blob store on shutdown.
        """
        logger.info(
            f"Starting Blob Gateway v{__version__} "
            f"(backend={store.name}, token={'set' if settings.has_token else 'missing'})"
        )
        yield
        logger.info("Shutting down Blob Gateway")
        await store.close()

    app = FastAPI(
        title="Blob Gateway",
        description="Upload, list and delete files on Vercel Blob",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )
    app.state.settings = settings
    app.state.blob_store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        RequestSizeLimitMiddleware,
        max_bytes=settings.MAX_BODY_BYTES,
        exempt_paths=STREAMED_PATHS,
    )

    app.include_router(api_router)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request, exc: StarletteHTTPException):
        """Handle HTTP exceptions with the API's message format."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.exception(f"Unexpected error: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "message": "Internal server error",
                "error": str(exc) if settings.DEBUG else None,
            },
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Report application status without contacting the store."""
        return HealthResponse(
            status="healthy",
            version=__version__,
            backend=store.name,
            token_configured=settings.has_token,
        )

    # Mounts go last so API routes take precedence over "/".
    if settings.BLOB_BACKEND == BlobBackend.LOCAL:
        blob_root = Path(settings.LOCAL_BLOB_ROOT)
        blob_root.mkdir(parents=True, exist_ok=True)
        app.mount(LOCAL_BLOB_MOUNT, StaticFiles(directory=blob_root), name="blobs")

    static_dir = Path(settings.STATIC_DIR)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
    else:
        logger.warning(f"Static directory {static_dir} not found, not serving assets")

    return app


app = create_app()


# Entry point for development
if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "blob_gateway.main:app",
        host=_settings.HOST,
        port=_settings.PORT,
        reload=_settings.DEBUG,
    )
