"""
适配器 - asyncio 互操作与同步运行

Bridges between :class:`Promise` and the rest of the Python async world:

- :func:`to_asyncio_future` / ``await promise``: observe a promise from a
  coroutine;
- :func:`from_awaitable`: drive a promise from a coroutine or asyncio future;
- :func:`run_until_settled`: flush a :class:`ManualScheduler` from plain
  synchronous code and return the outcome.
"""

import asyncio
from typing import Any, Awaitable, Optional

from .common import get_logger
from .interfaces import Scheduler
from .promise import Promise
from .scheduler import AsyncioScheduler, ManualScheduler
from .types import PromiseError, reason_to_exception


def to_asyncio_future(
    promise: Promise,
    loop: Optional[asyncio.AbstractEventLoop] = None,
) -> "asyncio.Future[Any]":
    """
    Return an asyncio future mirroring ``promise``.

    Non-exception rejection reasons are raised as ``RejectionError``. The
    promise's own scheduler still has to run for the future to complete, so
    promises bound to a ManualScheduler must be flushed by someone.
    """
    loop = loop or asyncio.get_running_loop()
    future = loop.create_future()

    def on_fulfilled(value: Any) -> None:
        if not future.done():
            future.set_result(value)

    def on_rejected(reason: Any) -> None:
        if not future.done():
            future.set_exception(reason_to_exception(reason, promise))

    promise.then(on_fulfilled, on_rejected)
    return future


def from_awaitable(
    awaitable: Awaitable[Any],
    *,
    loop: Optional[asyncio.AbstractEventLoop] = None,
    scheduler: Optional[Scheduler] = None,
) -> Promise:
    """
    Wrap a coroutine or asyncio future. The result goes through the
    resolution procedure; an exception or cancellation rejects.
    """
    loop = loop or asyncio.get_running_loop()
    task = asyncio.ensure_future(awaitable, loop=loop)
    promise = Promise(scheduler=scheduler or AsyncioScheduler(loop))

    def settle(done: "asyncio.Future[Any]") -> None:
        if done.cancelled():
            promise.reject(asyncio.CancelledError())
            return
        exc = done.exception()
        if exc is not None:
            promise.reject(exc)
        else:
            promise.resolve(done.result())

    task.add_done_callback(settle)
    return promise


def run_until_settled(
    promise: Promise,
    scheduler: Optional[ManualScheduler] = None,
    max_jobs: Optional[int] = None,
) -> Any:
    """
    Flush a ManualScheduler and return the promise's fulfillment value.

    ``scheduler`` defaults to the promise's own scheduler.

    Raises:
        TypeError: the scheduler is not a ManualScheduler.
        SchedulerOverflowError: the flush exceeded ``max_jobs``.
        PromiseError: the queue ran dry while the promise is still pending.
        The rejection reason (or ``RejectionError`` wrapping it) on rejection.
    """
    if scheduler is None:
        scheduler = promise.scheduler
    if not isinstance(scheduler, ManualScheduler):
        raise TypeError(f"run_until_settled 需要 ManualScheduler, 实际为 {type(scheduler).__name__}")

    ran = scheduler.flush(max_jobs)
    get_logger().debug(f"run_until_settled: {ran} jobs, {promise!r}")

    if promise.is_pending():
        raise PromiseError("调度队列已清空但 promise 仍未结算", promise=promise)
    if promise.is_rejected():
        raise reason_to_exception(promise.value, promise)
    return promise.value
