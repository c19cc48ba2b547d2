"""Deterministic construction of request descriptors.

A descriptor depends only on the call inputs and the authorization headers
snapshot handed in by the caller; nothing here touches the network.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping
from urllib.parse import urlencode

import httpx

from simple_api.common import (
    ACCEPT,
    CONTENT_TYPE,
    FORM_CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    Body,
    FormFields,
    Headers,
)
from simple_api.errors import MalformedEndpointError
from simple_api.model import HttpMethod, RequestDescriptor

_ALLOWED_SCHEMES = {"http", "https"}


def parse_endpoint(endpoint: str) -> httpx.URL:
    """Parse ``endpoint`` into an absolute http(s) URL or raise ``MalformedEndpointError``."""

    if not isinstance(endpoint, str) or not endpoint.strip():
        raise MalformedEndpointError(endpoint, "empty endpoint")
    if endpoint != endpoint.strip() or any(ch.isspace() for ch in endpoint):
        raise MalformedEndpointError(endpoint, "endpoint contains whitespace")
    try:
        url = httpx.URL(endpoint)
    except (httpx.InvalidURL, TypeError, ValueError) as exc:
        raise MalformedEndpointError(endpoint, str(exc)) from exc
    if url.scheme not in _ALLOWED_SCHEMES:
        raise MalformedEndpointError(endpoint, "scheme must be http or https")
    if not url.host:
        raise MalformedEndpointError(endpoint, "missing host")
    return url


def merge_headers(*layers: Headers) -> dict[str, str]:
    """Merge header mappings left to right; later layers win per case-insensitive name."""

    merged: dict[str, str] = {}
    names: dict[str, str] = {}
    for layer in layers:
        if not layer:
            continue
        for name, value in layer.items():
            folded = name.lower()
            previous = names.get(folded)
            if previous is not None:
                del merged[previous]
            names[folded] = name
            merged[name] = value
    return merged


def base_headers(*, form: bool = False) -> dict[str, str]:
    if form:
        return {CONTENT_TYPE: FORM_CONTENT_TYPE}
    return {CONTENT_TYPE: JSON_CONTENT_TYPE, ACCEPT: JSON_CONTENT_TYPE}


def encode_form(fields: FormFields) -> bytes:
    """Encode form fields as an ``application/x-www-form-urlencoded`` body."""

    if fields is None:
        return b""
    if isinstance(fields, (bytes, bytearray)):
        return bytes(fields)
    items: Iterable[tuple[str, Any]]
    items = fields.items() if isinstance(fields, Mapping) else fields
    return urlencode(list(items), doseq=True).encode("utf-8")


def build_request(
    method: HttpMethod | str,
    endpoint: str,
    *,
    headers: Headers = None,
    body: Body = None,
    authorization: Headers = None,
    defaults: Headers = None,
    form: bool = False,
) -> RequestDescriptor:
    """Build the descriptor for one call.

    Header precedence, lowest first: content headers, ``authorization``,
    client ``defaults``, per-call ``headers``. GET requests never carry a body.
    """

    request_method = HttpMethod(method.upper() if isinstance(method, str) else method)
    url = parse_endpoint(endpoint)

    merged = merge_headers(base_headers(form=form), authorization, defaults, headers)
    payload = None if request_method is HttpMethod.GET else body

    return RequestDescriptor(
        url=str(url),
        method=request_method,
        header_items=tuple(merged.items()),
        body=payload,
    )


__all__ = [
    "build_request",
    "base_headers",
    "encode_form",
    "merge_headers",
    "parse_endpoint",
]
