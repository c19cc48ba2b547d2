"""Command-line entrypoint for one-off typed API calls."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any

from simple_api.client import AsyncApiClient
from simple_api.config import load_client_config, parse_header
from simple_api.decoding import encode
from simple_api.errors import ApiClientError

logger = logging.getLogger(__name__)


def _parse_headers(values: list[str] | None) -> dict[str, str]:
    return dict(parse_header(raw) for raw in values or [])


def _parse_fields(values: list[str] | None) -> list[tuple[str, str]]:
    fields: list[tuple[str, str]] = []
    for raw in values or []:
        key, sep, value = raw.partition("=")
        if not sep or not key:
            raise SystemExit(f"Form field {raw!r} must use the format 'key=value'.")
        fields.append((key, value))
    return fields


def _parse_body(raw: str | None) -> bytes | None:
    if raw is None:
        return None
    try:
        return encode(json.loads(raw))
    except json.JSONDecodeError as exc:
        raise SystemExit(f"--data is not valid JSON: {exc}") from exc


async def _run(args: argparse.Namespace, headers: dict[str, str]) -> Any:
    config = load_client_config(args.token)
    async with AsyncApiClient(config) as client:
        if args.command == "get":
            return await client.get(Any, args.url, headers=headers)
        if args.command == "post":
            return await client.post(Any, args.url, args.body, headers=headers)
        return await client.post_form(Any, args.url, args.fields, headers=headers)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Typed JSON API client")
    parser.add_argument(
        "--log-level",
        help="Override LOG_LEVEL for this invocation (e.g. DEBUG, INFO)",
    )
    parser.add_argument(
        "--token",
        help="Bearer token for the Authorization header (defaults to API_CLIENT_TOKEN)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("url", help="Absolute http(s) endpoint URL")
    common.add_argument(
        "-H",
        "--header",
        action="append",
        help="Extra request header as 'Name: value' (repeatable)",
    )

    subparsers.add_parser("get", parents=[common], help="GET a JSON endpoint")

    post_parser = subparsers.add_parser("post", parents=[common], help="POST a JSON body")
    post_parser.add_argument("--data", help="JSON document to send as the request body")

    form_parser = subparsers.add_parser(
        "post-form", parents=[common], help="POST an url-encoded form"
    )
    form_parser.add_argument(
        "--field",
        action="append",
        help="Form field as 'key=value' (repeatable)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    if args.log_level:
        os.environ["LOG_LEVEL"] = args.log_level
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))

    try:
        headers = _parse_headers(args.header)
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc
    args.body = _parse_body(getattr(args, "data", None))
    args.fields = _parse_fields(getattr(args, "field", None))
    logger.debug("Running %s %s", args.command, args.url)

    try:
        result = asyncio.run(_run(args, headers))
    except ApiClientError as exc:
        print(f"error ({exc.kind.value}): {exc}", file=sys.stderr)
        return 1

    if result is not None:
        print(json.dumps(result, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
