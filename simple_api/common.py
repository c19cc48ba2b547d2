"""Shared utilities for submitting request descriptors and decoding responses."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, TypeVar

import httpx

from simple_api.decoding import decode
from simple_api.errors import EmptyDataError, TransportError
from simple_api.model import RequestDescriptor

CONTENT_TYPE = "Content-Type"
ACCEPT = "Accept"
AUTHORIZATION = "Authorization"
JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

T = TypeVar("T")

Headers = Mapping[str, str] | None
Body = bytes | None
FormFields = Mapping[str, Any] | Iterable[tuple[str, Any]] | bytes | None

logger = logging.getLogger(__name__)


def _decode_response(
    descriptor: RequestDescriptor,
    response: httpx.Response,
    response_type: type[T] | None,
    *,
    raise_for_status: bool,
) -> T | None:
    if raise_for_status:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "%s %s returned status %s.",
                descriptor.method.value,
                descriptor.url,
                response.status_code,
            )
            raise TransportError(descriptor.url, exc) from exc

    if response_type is None:
        return None

    content = response.content
    if not content:
        raise EmptyDataError(descriptor.url)
    return decode(response_type, content)


def _transport_failure(descriptor: RequestDescriptor, exc: httpx.HTTPError) -> TransportError:
    logger.warning(
        "%s %s failed at the transport: %s", descriptor.method.value, descriptor.url, exc
    )
    return TransportError(descriptor.url, exc)


async def send_async(
    client: httpx.AsyncClient,
    descriptor: RequestDescriptor,
    response_type: type[T] | None,
    *,
    raise_for_status: bool = False,
) -> T | None:
    """Submit ``descriptor`` on ``client`` and decode the body into ``response_type``.

    The single outbound call is never retried. Transport errors surface as
    ``TransportError``, empty bodies as ``EmptyDataError`` and shape mismatches
    as ``DecodeError``. A ``response_type`` of ``None`` skips decoding.
    """

    logger.debug("Sending %s %s", descriptor.method.value, descriptor.url)
    try:
        response = await client.send(descriptor.to_httpx())
    except httpx.HTTPError as exc:
        raise _transport_failure(descriptor, exc) from exc
    logger.debug(
        "%s %s -> %s (%d bytes)",
        descriptor.method.value,
        descriptor.url,
        response.status_code,
        len(response.content),
    )
    return _decode_response(
        descriptor, response, response_type, raise_for_status=raise_for_status
    )


def send(
    client: httpx.Client,
    descriptor: RequestDescriptor,
    response_type: type[T] | None,
    *,
    raise_for_status: bool = False,
) -> T | None:
    """Blocking counterpart of ``send_async``."""

    logger.debug("Sending %s %s", descriptor.method.value, descriptor.url)
    try:
        response = client.send(descriptor.to_httpx())
    except httpx.HTTPError as exc:
        raise _transport_failure(descriptor, exc) from exc
    logger.debug(
        "%s %s -> %s (%d bytes)",
        descriptor.method.value,
        descriptor.url,
        response.status_code,
        len(response.content),
    )
    return _decode_response(
        descriptor, response, response_type, raise_for_status=raise_for_status
    )


__all__ = [
    "send",
    "send_async",
    "ACCEPT",
    "AUTHORIZATION",
    "CONTENT_TYPE",
    "FORM_CONTENT_TYPE",
    "JSON_CONTENT_TYPE",
]
