"""Request body size limit middleware.

Rejects parsed request bodies (JSON, urlencoded) larger than the configured
maximum. Streamed upload paths are exempt and reach the store untouched.
Checks Content-Length up front and counts bytes for chunked bodies.
Raw ASGI so streaming responses and uploads are not buffered.

Tests:
    - tests/unit/test_middleware.py
"""

import json
from typing import Any, Callable

BODY_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


def _get_header(scope: dict, name: str) -> str | None:
    """Return first header value for name (case-insensitive)."""
    want = name.lower().encode()
    for k, v in scope.get("headers", []):
        if k.lower() == want:
            return v.decode("latin-1")
    return None


async def _send_413(send: Callable, max_bytes: int, actual: int) -> None:
    """Send 413 Payload Too Large response."""
    body = json.dumps(
        {
            "message": f"O corpo da requisição deve ter no máximo {max_bytes} bytes.",
            "error": "PAYLOAD_TOO_LARGE",
            "details": {"max_bytes": max_bytes, "content_length": actual},
        }
    ).encode()
    await send({
        "type": "http.response.start",
        "status": 413,
        "headers": [(b"content-type", b"application/json")],
    })
    await send({"type": "http.response.body", "body": body, "more_body": False})


class RequestSizeLimitMiddleware:
    """Reject bodies over max_bytes on every path except exempt ones."""

    def __init__(
        self,
        app: Callable,
        max_bytes: int,
        exempt_paths: tuple[str, ...] = (),
    ) -> None:
        self.app = app
        self.max_bytes = max_bytes
        self.exempt_paths = exempt_paths

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if (
            scope["type"] != "http"
            or scope["method"] not in BODY_METHODS
            or scope["path"] in self.exempt_paths
        ):
            await self.app(scope, receive, send)
            return

        content_length = _get_header(scope, "content-length")
        if content_length and content_length.isdigit():
            length = int(content_length)
            if length > self.max_bytes:
                await _send_413(send, self.max_bytes, length)
                return
            await self.app(scope, receive, send)
            return

        # No usable Content-Length: buffer and count.
        chunks: list[bytes] = []
        total = 0
        while True:
            message = await receive()
            if message["type"] != "http.request":
                await self.app(scope, receive, send)
                return
            body = message.get("body", b"")
            total += len(body)
            if total > self.max_bytes:
                await _send_413(send, self.max_bytes, total)
                return
            chunks.append(body)
            if not message.get("more_body", False):
                break

        replayed = False

        async def replay() -> dict[str, Any]:
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": b"".join(chunks), "more_body": False}
            return await receive()

        await self.app(scope, replay, send)
