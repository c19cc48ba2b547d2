"""Calling-convention adapters over one awaited request.

Each client call is a single coroutine. These helpers present it as an
``Outcome``, as a completion callback, or as a one-item async stream.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Awaitable, Callable, TypeVar

from simple_api.errors import ApiClientError
from simple_api.model import Failure, Outcome, Success

T = TypeVar("T")

Completion = Callable[[Outcome[T]], None]

logger = logging.getLogger(__name__)


async def to_outcome(awaitable: Awaitable[T]) -> Outcome[T]:
    """Await ``awaitable`` and wrap its result or ``ApiClientError`` in an ``Outcome``."""

    try:
        value = await awaitable
    except ApiClientError as exc:
        return Failure(exc)
    return Success(value)


def with_callback(awaitable: Awaitable[T], completion: Completion[T]) -> asyncio.Task:
    """Schedule ``awaitable`` and hand its ``Outcome`` to ``completion`` exactly once.

    Must be called from a running event loop, otherwise ``RuntimeError`` is
    raised. The loop only keeps a weak reference to the task, so the caller
    must hold on to the returned task until it finishes. It is also the only
    handle for cancellation; a cancelled call never invokes ``completion``.
    Exceptions outside the client error kinds are logged and left on the task.
    """

    loop = asyncio.get_running_loop()
    task = loop.create_task(to_outcome(awaitable))

    def _deliver(done: asyncio.Future) -> None:
        if done.cancelled():
            logger.debug("Request task cancelled before completion.")
            return
        exc = done.exception()
        if exc is not None:
            logger.error("Request task failed outside the client error kinds: %r", exc)
            return
        completion(done.result())

    task.add_done_callback(_deliver)
    return task


async def as_stream(awaitable: Awaitable[T]) -> AsyncIterator[T]:
    """Yield the single result of ``awaitable``, then finish. Errors are raised to the consumer."""

    yield await awaitable


__all__ = ["Completion", "to_outcome", "with_callback", "as_stream"]
