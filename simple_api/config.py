"""Client configuration resolved from arguments or the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping

from dotenv import find_dotenv, load_dotenv

from simple_api.common import AUTHORIZATION

TOKEN_ENV = "API_CLIENT_TOKEN"
AUTH_HEADERS_ENV = "API_CLIENT_AUTH_HEADERS"
RAISE_FOR_STATUS_ENV = "API_CLIENT_RAISE_FOR_STATUS"

_TRUTHY = {"1", "true", "yes", "on"}

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientConfig:
    """Settings applied to every request made through one client.

    ``authorization_headers`` are merged after the content headers, ``headers``
    after those, and per-call headers last.
    """

    authorization_headers: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    raise_for_status: bool = False


def parse_header(entry: str) -> tuple[str, str]:
    """Parse one ``"Name: value"`` entry. The value may contain ``;`` or ``:``."""

    name, sep, value = entry.strip().partition(":")
    if not sep or not name.strip():
        raise ValueError(f"Header entry {entry!r} must use the format 'Name: value'.")
    return name.strip(), value.strip()


def parse_header_list(raw: str) -> dict[str, str]:
    """Parse ``"Name: value; Other: value"`` into a header mapping."""

    headers: dict[str, str] = {}
    for entry in raw.split(";"):
        if not entry.strip():
            continue
        name, value = parse_header(entry)
        headers[name] = value
    return headers


def _resolve_token(token: str | None) -> str | None:
    resolved = token or os.getenv(TOKEN_ENV)
    if not resolved:
        logger.debug("No API token configured (%s unset); sending without bearer auth.", TOKEN_ENV)
    return resolved


def load_client_config(
    token: str | None = None,
    *,
    headers: Mapping[str, str] | None = None,
    raise_for_status: bool | None = None,
    dotenv: bool = True,
) -> ClientConfig:
    """Build a ``ClientConfig`` from explicit values, falling back to the environment."""

    if dotenv:
        load_dotenv(find_dotenv(usecwd=True))

    authorization: dict[str, str] = {}
    raw_headers = os.getenv(AUTH_HEADERS_ENV)
    if raw_headers:
        authorization.update(parse_header_list(raw_headers))

    resolved_token = _resolve_token(token)
    if resolved_token:
        authorization[AUTHORIZATION] = f"Bearer {resolved_token}"

    if raise_for_status is None:
        raise_for_status = os.getenv(RAISE_FOR_STATUS_ENV, "").strip().lower() in _TRUTHY

    return ClientConfig(
        authorization_headers=authorization,
        headers=dict(headers or {}),
        raise_for_status=raise_for_status,
    )


__all__ = ["ClientConfig", "load_client_config", "parse_header", "parse_header_list"]
