"""
核心类型定义

Settlement states, the continuation record and the error taxonomy shared by
every other module of the package.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Optional, TYPE_CHECKING
from enum import Enum

if TYPE_CHECKING:
    from .promise import Promise


class PromiseState(Enum):
    """Settlement state of a promise."""
    PENDING = "pending"           # 未决
    FULFILLED = "fulfilled"       # 已兑现
    REJECTED = "rejected"         # 已拒绝

    @property
    def is_settled(self) -> bool:
        return self is not PromiseState.PENDING


@dataclass
class Continuation:
    """A registered handler pair plus the promise that receives its outcome."""
    on_fulfilled: Optional[Callable[[Any], Any]]
    on_rejected: Optional[Callable[[Any], Any]]
    downstream: "Promise"

    def select_handler(self, state: PromiseState) -> Optional[Callable[[Any], Any]]:
        """Return the handler matching ``state``, or ``None`` for passthrough."""
        if state is PromiseState.FULFILLED:
            return self.on_fulfilled
        if state is PromiseState.REJECTED:
            return self.on_rejected
        return None


class PromiseError(Exception):
    """Promise 错误基类"""

    def __init__(self, message: str, *, promise: Optional["Promise"] = None):
        super().__init__(message)
        self.promise = promise


class SelfResolutionError(PromiseError, TypeError):
    """A promise was resolved with itself."""


class SchedulerOverflowError(PromiseError, RuntimeError):
    """A manual scheduler flush ran more jobs than its limit allows."""


class SchedulerUnavailableError(PromiseError, RuntimeError):
    """The scheduler has nowhere to run jobs, e.g. no event loop is running."""


class RejectionError(PromiseError):
    """
    Raised when a rejection has to cross into exception-based code
    (asyncio futures, synchronous runners) and the reason is not itself an
    exception.
    """

    def __init__(self, reason: Any, *, promise: Optional["Promise"] = None):
        super().__init__(f"promise rejected with {reason!r}", promise=promise)
        self.reason = reason


def reason_to_exception(reason: Any, promise: Optional["Promise"] = None) -> BaseException:
    """Return ``reason`` if it is an exception, otherwise wrap it in RejectionError."""
    if isinstance(reason, BaseException):
        return reason
    return RejectionError(reason, promise=promise)
