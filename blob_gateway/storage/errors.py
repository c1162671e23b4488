"""Blob store error types.

Every store implementation raises BlobStoreError (or a subclass) for
upstream faults, tagging it with an ErrorKind so callers can tell a
credential problem from a generic failure without reading the message.

Tests:
    - tests/unit/test_storage/test_vercel.py::TestErrorMapping
"""

from enum import Enum

__all__ = [
    "BlobCredentialError",
    "BlobNotFoundError",
    "BlobRateLimitError",
    "BlobStoreError",
    "ErrorKind",
]


class ErrorKind(str, Enum):
    """Category of a blob store failure."""

    CREDENTIALS = "credentials"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    UPSTREAM = "upstream"


class BlobStoreError(Exception):
    """Base exception for blob store errors.

    Attributes:
        message: Error message
        kind: Failure category
        status_code: HTTP status code from the store (if applicable)
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.UPSTREAM,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class BlobCredentialError(BlobStoreError):
    """Missing, invalid or insufficient token."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message, ErrorKind.CREDENTIALS, status_code)


class BlobNotFoundError(BlobStoreError):
    """The store does not know the requested blob."""

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorKind.NOT_FOUND, 404)


class BlobRateLimitError(BlobStoreError):
    """Rate limit exceeded."""

    def __init__(self, message: str, retry_after: int | None = None) -> None:
        super().__init__(message, ErrorKind.RATE_LIMITED, 429)
        self.retry_after = retry_after
