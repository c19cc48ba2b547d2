"""JSON decode/encode of response and request bodies through pydantic."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, TypeVar

from pydantic import PydanticUserError, TypeAdapter, ValidationError

from simple_api.errors import DecodeError

T = TypeVar("T")

logger = logging.getLogger(__name__)


@lru_cache(maxsize=256)
def _adapter_for(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


def _adapter(target: Any) -> TypeAdapter[Any]:
    try:
        hash(target)
    except TypeError:
        return TypeAdapter(target)
    return _adapter_for(target)


def decode(target: type[T], data: bytes) -> T:
    """Decode a JSON byte buffer into ``target``.

    ``target`` may be anything pydantic can validate: a ``BaseModel`` subclass,
    a dataclass, a ``TypedDict``, or a plain ``dict[str, str]`` / ``list[...]``
    annotation. Validation is strict: ``"1"`` does not satisfy an ``int`` field.
    Failures always propagate as ``DecodeError``, including targets pydantic
    cannot build a schema for.
    """

    try:
        adapter = _adapter(target)
    except PydanticUserError as exc:
        logger.warning("No decoder can be built for %r: %s", target, exc)
        raise DecodeError(target, exc) from exc

    try:
        return adapter.validate_json(data, strict=True)
    except ValidationError as exc:
        logger.warning("Decoding %d bytes into %r failed: %s", len(data), target, exc)
        raise DecodeError(target, exc) from exc


def encode(value: Any) -> bytes:
    """Encode ``value`` as a JSON byte buffer suitable for a POST body."""

    return _adapter(Any).dump_json(value)


__all__ = ["decode", "encode"]
