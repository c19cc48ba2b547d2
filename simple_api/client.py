"""Typed JSON API clients built on ``httpx``.

``AsyncApiClient`` is the primary surface: every operation is one coroutine
that builds a descriptor, submits it once and decodes the body. The callback,
stream and outcome variants are thin views over that coroutine. ``ApiClient``
offers the same operations for blocking callers.
"""

from __future__ import annotations

import asyncio
from typing import Any, AsyncIterator, TypeVar

import httpx

from simple_api.adapters import Completion, as_stream, to_outcome, with_callback
from simple_api.common import Body, FormFields, Headers, send, send_async
from simple_api.config import ClientConfig
from simple_api.errors import ApiClientError
from simple_api.model import Failure, HttpMethod, Outcome, RequestDescriptor, Success
from simple_api.request import build_request, encode_form

T = TypeVar("T")


class _BaseClient:
    def __init__(self, config: ClientConfig | None) -> None:
        self.config = config or ClientConfig()

    def build(
        self,
        method: HttpMethod | str,
        endpoint: str,
        *,
        headers: Headers = None,
        body: Body = None,
        form: bool = False,
    ) -> RequestDescriptor:
        """Build a descriptor using this client's authorization and default headers."""

        return build_request(
            method,
            endpoint,
            headers=headers,
            body=body,
            authorization=self.config.authorization_headers,
            defaults=self.config.headers,
            form=form,
        )

    def _form_descriptor(
        self, endpoint: str, fields: FormFields, headers: Headers
    ) -> RequestDescriptor:
        return self.build(
            HttpMethod.POST,
            endpoint,
            headers=headers,
            body=encode_form(fields),
            form=True,
        )


class AsyncApiClient(_BaseClient):
    """Asynchronous client. Pass ``client`` to reuse an existing ``httpx.AsyncClient``."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(config)
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient()

    async def __aenter__(self) -> "AsyncApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying ``httpx`` client if this instance created it."""

        if self._owns_client:
            await self._client.aclose()

    async def _execute(
        self, descriptor: RequestDescriptor, response_type: type[T] | None
    ) -> T | None:
        return await send_async(
            self._client,
            descriptor,
            response_type,
            raise_for_status=self.config.raise_for_status,
        )

    # Awaited results

    async def get(
        self, response_type: type[T], endpoint: str, *, headers: Headers = None
    ) -> T:
        descriptor = self.build(HttpMethod.GET, endpoint, headers=headers)
        return await self._execute(descriptor, response_type)

    async def post(
        self,
        response_type: type[T] | None,
        endpoint: str,
        body: Body = None,
        *,
        headers: Headers = None,
    ) -> T | None:
        descriptor = self.build(HttpMethod.POST, endpoint, headers=headers, body=body)
        return await self._execute(descriptor, response_type)

    async def post_form(
        self,
        response_type: type[T] | None,
        endpoint: str,
        fields: FormFields = None,
        *,
        headers: Headers = None,
    ) -> T | None:
        descriptor = self._form_descriptor(endpoint, fields, headers)
        return await self._execute(descriptor, response_type)

    # Outcomes

    async def get_outcome(
        self, response_type: type[T], endpoint: str, *, headers: Headers = None
    ) -> Outcome[T]:
        return await to_outcome(self.get(response_type, endpoint, headers=headers))

    async def post_outcome(
        self,
        response_type: type[T] | None,
        endpoint: str,
        body: Body = None,
        *,
        headers: Headers = None,
    ) -> Outcome[T | None]:
        return await to_outcome(self.post(response_type, endpoint, body, headers=headers))

    async def post_form_outcome(
        self,
        response_type: type[T] | None,
        endpoint: str,
        fields: FormFields = None,
        *,
        headers: Headers = None,
    ) -> Outcome[T | None]:
        return await to_outcome(
            self.post_form(response_type, endpoint, fields, headers=headers)
        )

    # Callbacks

    def get_with_callback(
        self,
        response_type: type[T],
        endpoint: str,
        completion: Completion[T],
        *,
        headers: Headers = None,
    ) -> asyncio.Task:
        return with_callback(self.get(response_type, endpoint, headers=headers), completion)

    def post_with_callback(
        self,
        response_type: type[T] | None,
        endpoint: str,
        completion: Completion[T | None],
        body: Body = None,
        *,
        headers: Headers = None,
    ) -> asyncio.Task:
        return with_callback(
            self.post(response_type, endpoint, body, headers=headers), completion
        )

    def post_form_with_callback(
        self,
        response_type: type[T] | None,
        endpoint: str,
        completion: Completion[T | None],
        fields: FormFields = None,
        *,
        headers: Headers = None,
    ) -> asyncio.Task:
        return with_callback(
            self.post_form(response_type, endpoint, fields, headers=headers), completion
        )

    # Streams

    def get_stream(
        self, response_type: type[T], endpoint: str, *, headers: Headers = None
    ) -> AsyncIterator[T]:
        return as_stream(self.get(response_type, endpoint, headers=headers))

    def post_stream(
        self,
        response_type: type[T] | None,
        endpoint: str,
        body: Body = None,
        *,
        headers: Headers = None,
    ) -> AsyncIterator[T | None]:
        return as_stream(self.post(response_type, endpoint, body, headers=headers))

    def post_form_stream(
        self,
        response_type: type[T] | None,
        endpoint: str,
        fields: FormFields = None,
        *,
        headers: Headers = None,
    ) -> AsyncIterator[T | None]:
        return as_stream(self.post_form(response_type, endpoint, fields, headers=headers))


class ApiClient(_BaseClient):
    """Blocking client sharing the request builder and decoder with ``AsyncApiClient``."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        client: httpx.Client | None = None,
    ) -> None:
        super().__init__(config)
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _execute(
        self, descriptor: RequestDescriptor, response_type: type[T] | None
    ) -> T | None:
        return send(
            self._client,
            descriptor,
            response_type,
            raise_for_status=self.config.raise_for_status,
        )

    def get(self, response_type: type[T], endpoint: str, *, headers: Headers = None) -> T:
        descriptor = self.build(HttpMethod.GET, endpoint, headers=headers)
        return self._execute(descriptor, response_type)

    def post(
        self,
        response_type: type[T] | None,
        endpoint: str,
        body: Body = None,
        *,
        headers: Headers = None,
    ) -> T | None:
        descriptor = self.build(HttpMethod.POST, endpoint, headers=headers, body=body)
        return self._execute(descriptor, response_type)

    def post_form(
        self,
        response_type: type[T] | None,
        endpoint: str,
        fields: FormFields = None,
        *,
        headers: Headers = None,
    ) -> T | None:
        descriptor = self._form_descriptor(endpoint, fields, headers)
        return self._execute(descriptor, response_type)

    def get_outcome(
        self, response_type: type[T], endpoint: str, *, headers: Headers = None
    ) -> Outcome[T]:
        try:
            return Success(self.get(response_type, endpoint, headers=headers))
        except ApiClientError as exc:
            return Failure(exc)

    def post_outcome(
        self,
        response_type: type[T] | None,
        endpoint: str,
        body: Body = None,
        *,
        headers: Headers = None,
    ) -> Outcome[T | None]:
        try:
            return Success(self.post(response_type, endpoint, body, headers=headers))
        except ApiClientError as exc:
            return Failure(exc)

    def post_form_outcome(
        self,
        response_type: type[T] | None,
        endpoint: str,
        fields: FormFields = None,
        *,
        headers: Headers = None,
    ) -> Outcome[T | None]:
        try:
            return Success(self.post_form(response_type, endpoint, fields, headers=headers))
        except ApiClientError as exc:
            return Failure(exc)


__all__ = ["ApiClient", "AsyncApiClient"]
