"""Request descriptors and call outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Generic, Mapping, NoReturn, Optional, TypeVar, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field

from simple_api.errors import ApiClientError, ErrorKind

T = TypeVar("T")


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"


class RequestDescriptor(BaseModel):
    """Fully formed request, ready to hand to the transport."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="Absolute http(s) URL the request targets.")
    method: HttpMethod = Field(..., description="HTTP method of the request.")
    header_items: tuple[tuple[str, str], ...] = Field(
        default=(),
        description="Merged request headers; one pair per case-insensitive name.",
    )
    body: Optional[bytes] = Field(
        default=None, description="Raw request body. Always absent for GET."
    )

    @property
    def headers(self) -> Mapping[str, str]:
        """Read-only view of ``header_items``."""
        return MappingProxyType(dict(self.header_items))

    def to_httpx(self) -> httpx.Request:
        return httpx.Request(
            self.method.value,
            self.url,
            headers=list(self.header_items),
            content=self.body,
        )


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def is_success(self) -> bool:
        return True

    @property
    def kind(self) -> None:
        return None

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    error: ApiClientError

    @property
    def is_success(self) -> bool:
        return False

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind

    def unwrap(self) -> NoReturn:
        raise self.error


Outcome = Union[Success[T], Failure]


__all__ = ["HttpMethod", "RequestDescriptor", "Success", "Failure", "Outcome"]
