"""
调度器实现

The drain of a promise's continuation queue, and the invocation of foreign
``then`` members, always go through a scheduler so that callbacks run on a
later turn than the code that registered or settled them.

- :class:`ManualScheduler` keeps a FIFO work queue that the caller flushes
  explicitly; deterministic and used throughout the tests.
- :class:`AsyncioScheduler` hands jobs to an asyncio event loop with
  ``call_soon``.
"""

from __future__ import annotations

import asyncio
from collections import deque
from typing import Any, Callable, Deque, Optional, Union

from .common import PromiseSettings, SchedulerMode, configure_logger, convert_settings
from .interfaces import Scheduler
from .types import SchedulerOverflowError, SchedulerUnavailableError

Job = Callable[[], Any]


class ManualScheduler:
    """Single-threaded work queue, run by :meth:`flush` or :meth:`run_pending`."""

    def __init__(self, flush_limit: Optional[int] = None) -> None:
        self._jobs: Deque[Job] = deque()
        self.flush_limit = flush_limit
        self.executed = 0

    def schedule(self, job: Job) -> None:
        self._jobs.append(job)

    @property
    def pending(self) -> int:
        return len(self._jobs)

    def run_pending(self) -> int:
        """Run only the jobs queued at call time; returns how many ran."""
        count = len(self._jobs)
        for _ in range(count):
            self._run_one()
        return count

    def flush(self, max_jobs: Optional[int] = None) -> int:
        """
        Run jobs until the queue is empty, including jobs scheduled by jobs.

        Raises:
            SchedulerOverflowError: more than ``max_jobs`` (or the configured
                ``flush_limit``) jobs would be needed to drain the queue.
        """
        limit = max_jobs if max_jobs is not None else self.flush_limit
        ran = 0
        while self._jobs:
            if limit is not None and ran >= limit:
                raise SchedulerOverflowError(
                    f"flush 超过上限: 已执行 {ran} 个任务, 仍有 {len(self._jobs)} 个待执行"
                )
            self._run_one()
            ran += 1
        return ran

    def _run_one(self) -> None:
        job = self._jobs.popleft()
        self.executed += 1
        job()

    def __repr__(self) -> str:
        return f"ManualScheduler(pending={len(self._jobs)}, executed={self.executed})"


class AsyncioScheduler:
    """Schedules jobs with ``loop.call_soon``."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            raise SchedulerUnavailableError(
                "AsyncioScheduler 未绑定事件循环且当前没有运行中的事件循环"
            ) from None

    def schedule(self, job: Job) -> None:
        self.loop.call_soon(job)

    def __repr__(self) -> str:
        bound = "bound" if self._loop is not None else "running-loop"
        return f"AsyncioScheduler({bound})"


# 全局默认调度器
_default_scheduler: Scheduler = ManualScheduler()


def get_default_scheduler() -> Scheduler:
    """获取默认调度器"""
    return _default_scheduler


def set_default_scheduler(scheduler: Scheduler) -> Scheduler:
    """替换默认调度器，返回旧的调度器"""
    global _default_scheduler
    if not isinstance(scheduler, Scheduler):
        raise TypeError(f"Unsupported scheduler type: {type(scheduler)}")
    previous = _default_scheduler
    _default_scheduler = scheduler
    return previous


def create_scheduler(settings: Optional[PromiseSettings] = None) -> Scheduler:
    """按配置创建调度器"""
    settings = settings or PromiseSettings()
    if settings.scheduler_mode is SchedulerMode.ASYNCIO:
        return AsyncioScheduler()
    return ManualScheduler(flush_limit=settings.flush_limit)


def configure(settings: Union[PromiseSettings, dict, Any, None] = None) -> Scheduler:
    """
    Apply process-wide settings: rebuild the package logger and install a
    fresh default scheduler. Returns the new default scheduler.
    """
    converted = convert_settings(settings)
    configure_logger(converted)
    scheduler = create_scheduler(converted)
    set_default_scheduler(scheduler)
    return scheduler
