"""Error kinds surfaced by the request helper.

Every failure of a call is reported as one of the four ``ApiClientError``
subclasses below. None of them are retried by the helper.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Classification of a failed call."""

    MALFORMED_ENDPOINT = "malformed_endpoint"
    TRANSPORT = "transport"
    EMPTY_DATA = "empty_data"
    DECODE = "decode"


class ApiClientError(Exception):
    """Base class for every error raised by the helper."""

    kind: ErrorKind


class MalformedEndpointError(ApiClientError):
    """The endpoint string is not an absolute http(s) URL. Raised before any I/O."""

    kind = ErrorKind.MALFORMED_ENDPOINT

    def __init__(self, endpoint: str, reason: str | None = None) -> None:
        self.endpoint = endpoint
        self.reason = reason
        message = f"Malformed endpoint {endpoint!r}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class TransportError(ApiClientError):
    """The HTTP transport failed; ``cause`` holds the underlying ``httpx`` error."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, url: str, cause: BaseException) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"Request to {url} failed: {cause}")


class EmptyDataError(ApiClientError):
    kind = ErrorKind.EMPTY_DATA

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Response from {url} has an empty body")


class DecodeError(ApiClientError):
    """The body was present but did not match the requested shape."""

    kind = ErrorKind.DECODE

    def __init__(self, target: Any, cause: BaseException) -> None:
        self.target = target
        self.cause = cause
        name = getattr(target, "__name__", repr(target))
        super().__init__(f"Could not decode response body into {name}: {cause}")


__all__ = [
    "ErrorKind",
    "ApiClientError",
    "MalformedEndpointError",
    "TransportError",
    "EmptyDataError",
    "DecodeError",
]
