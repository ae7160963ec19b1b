"""
Resolution procedure.

``resolve_promise(target, x)`` turns an arbitrary value ``x`` into the
eventual settlement of ``target``:

1. ``x is target``: reject with :class:`SelfResolutionError`.
2. ``x`` is a :class:`Promise`: adopt its state, waiting on it if pending.
3. ``x`` has a callable ``then``: call it (on a later turn) with one-shot
   resolve/reject capabilities.
4. anything else: fulfill with ``x``.

Nested resolutions re-enter through the scheduler (step 2 via ``then``,
step 3 via a scheduled job), so the Python stack stays flat however long
the chain of promises or thenables is.
"""

from __future__ import annotations

from functools import partial
from typing import Any, Callable

from .common import get_logger
from .interfaces import is_thenable_candidate
from .promise import Promise
from .types import SelfResolutionError

__all__ = ["resolve_promise"]


def resolve_promise(target: Promise, x: Any) -> None:
    """Settle ``target`` from ``x``. Never raises; failures become rejections."""

    if x is target:
        get_logger().debug(f"{target!r}: resolved with itself")
        target.reject(
            SelfResolutionError("promise can not be resolved with itself", promise=target)
        )
        return

    if isinstance(x, Promise):
        _adopt_promise(target, x)
        return

    if not is_thenable_candidate(x):
        target.fulfill(x)
        return

    try:
        then_ = x.then
    except AttributeError:
        target.fulfill(x)
        return
    except Exception as exc:
        get_logger().debug(f"{target!r}: reading then raised {exc!r}")
        target.reject(exc)
        return

    if callable(then_):
        target.scheduler.schedule(partial(_call_foreign_then, target, then_))
    else:
        target.fulfill(x)


def _adopt_promise(target: Promise, source: Promise) -> None:
    if source.is_pending():
        # Fulfillment values go back through the procedure, reasons are final.
        source.then(partial(resolve_promise, target), target.reject)
    else:
        target.transition(source.state, source.value)


def _call_foreign_then(target: Promise, then_: Callable[..., Any]) -> None:
    """Invoke a foreign ``then``; only the first capability call counts."""
    called = False

    def resolve_capability(y: Any = None) -> None:
        nonlocal called
        if called:
            return
        called = True
        resolve_promise(target, y)

    def reject_capability(r: Any = None) -> None:
        nonlocal called
        if called:
            return
        called = True
        target.reject(r)

    try:
        then_(resolve_capability, reject_capability)
    except Exception as exc:
        if called:
            get_logger().debug(f"{target!r}: ignoring {exc!r} raised after settlement")
            return
        called = True
        get_logger().debug(f"{target!r}: foreign then raised {exc!r}")
        target.reject(exc)
