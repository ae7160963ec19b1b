"""Factories for pre-settled and externally controlled promises."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional

from .interfaces import Scheduler
from .promise import Promise


@dataclass(frozen=True)
class Deferred:
    """A promise together with its external resolve/reject capabilities."""

    promise: Promise
    resolve: Callable[[Any], None]
    reject: Callable[[Any], Any]

    def __iter__(self) -> Iterator[Any]:
        return iter((self.promise, self.resolve, self.reject))


def resolved(value: Any, *, scheduler: Optional[Scheduler] = None) -> Promise:
    """Promise resolved with ``value``; thenables are followed as usual."""
    return Promise(lambda resolve, _reject: resolve(value), scheduler=scheduler)


def rejected(reason: Any, *, scheduler: Optional[Scheduler] = None) -> Promise:
    """Promise already rejected with ``reason``."""
    return Promise(lambda _resolve, reject: reject(reason), scheduler=scheduler)


def deferred(*, scheduler: Optional[Scheduler] = None, label: Optional[str] = None) -> Deferred:
    """Pending promise plus its capabilities, for callers without an executor."""
    promise = Promise(scheduler=scheduler, label=label)
    return Deferred(promise=promise, resolve=promise.resolve, reject=promise.reject)
