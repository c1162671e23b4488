"""Unit tests for the request size limit middleware.

Tests for blob_gateway/middleware.py.

Run with:
    pytest tests/unit/test_middleware.py -v
"""

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from blob_gateway.middleware import RequestSizeLimitMiddleware


@pytest.fixture
def echo_client():
    app = FastAPI()

    @app.post("/echo")
    async def echo(request: Request):
        return {"size": len(await request.body())}

    @app.post("/stream")
    async def stream(request: Request):
        total = 0
        async for chunk in request.stream():
            total += len(chunk)
        return {"size": total}

    app.add_middleware(RequestSizeLimitMiddleware, max_bytes=16, exempt_paths=("/stream",))
    return TestClient(app)


def _chunks(data: bytes, size: int = 4):
    for i in range(0, len(data), size):
        yield data[i:i + size]


@pytest.mark.fast
class TestRequestSizeLimit:
    """Tests for RequestSizeLimitMiddleware."""

    def test_small_body_passes(self, echo_client):
        response = echo_client.post("/echo", content=b"x" * 16)
        assert response.status_code == 200
        assert response.json() == {"size": 16}

    def test_large_body_rejected(self, echo_client):
        response = echo_client.post("/echo", content=b"x" * 17)
        assert response.status_code == 413
        data = response.json()
        assert data["error"] == "PAYLOAD_TOO_LARGE"
        assert data["details"] == {"max_bytes": 16, "content_length": 17}

    def test_chunked_body_counted(self, echo_client):
        """Test bodies without Content-Length are counted as they arrive."""
        response = echo_client.post("/echo", content=_chunks(b"x" * 32))
        assert response.status_code == 413

    def test_small_chunked_body_replayed(self, echo_client):
        """Test a buffered chunked body still reaches the handler intact."""
        response = echo_client.post("/echo", content=_chunks(b"x" * 10))
        assert response.status_code == 200
        assert response.json() == {"size": 10}

    def test_exempt_path_not_limited(self, echo_client):
        response = echo_client.post("/stream", content=b"x" * 1000)
        assert response.status_code == 200
        assert response.json() == {"size": 1000}

    def test_get_requests_untouched(self, echo_client):
        response = echo_client.get("/echo")
        assert response.status_code == 405
